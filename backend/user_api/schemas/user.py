"""
Response envelopes for the user endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field


class CreateUserResponse(BaseModel):
    """
    Body returned by POST /user on success.

    Attributes:
        success: Always True
        inserted_id: Storage-assigned identifier, serialized as ``insertedID``
    """
    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=True)
    inserted_id: str = Field(alias="insertedID")


class ErrorResponse(BaseModel):
    """Body returned when a user request fails."""
    success: bool = Field(default=False)
    message: str = Field(description="Generic, client-safe error message")
