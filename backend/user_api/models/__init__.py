"""
Record models for the user API.

Import models from this module rather than from their defining files.
"""

from user_api.models.user import User, U32_MAX

__all__ = [
    "User",
    "U32_MAX",
]
