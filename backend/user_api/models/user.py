"""
User record model.

A User is the only entity the service stores. The same model is used for
the request body of POST /user, the response body of GET /user and the
document written to MongoDB, so the wire format and the stored format
are identical.

Validation is strict: JSON types are not coerced, so `"76"` or `true` is
not an id and `"yes"` is not a boolean.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


U32_MAX = 2**32 - 1


class User(BaseModel):
    """
    User record.

    Attributes:
        id: Numeric user identifier (unsigned 32-bit)
        name: Display name
        phone: Phone number as free text
        email: Email address; omitted from the wire when absent
        is_active: Account flag, serialized as ``isActive``

    Instances are frozen: a record is replaced, never mutated.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        strict=True,
        extra="ignore",  # Stored documents carry Mongo's _id
    )

    id: int = Field(ge=0, le=U32_MAX, description="User identifier")
    name: str = Field(description="Display name")
    phone: str = Field(description="Phone number")
    email: Optional[str] = Field(default=None, description="Email address (optional)")
    is_active: bool = Field(alias="isActive", description="Whether the account is active")
