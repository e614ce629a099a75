"""User API - FastAPI service for user records stored in MongoDB."""

__version__ = "0.1.0"
