class UserAPIException(Exception):
    """Base exception for the user API"""
    pass

class StorageError(UserAPIException):
    """Raised when a query or write against the document store fails"""
    pass

class DatabaseConnectionError(StorageError):
    """Raised when the connection URI is invalid or the client cannot be built"""
    pass
