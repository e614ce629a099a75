"""
Centralized configuration management using Pydantic Settings.

This module provides type-safe configuration management with validation,
loading settings from environment variables and .env files.
"""

from typing import Annotated, List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
import json
import logging

from user_api.models.user import U32_MAX


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    MONGODB_URI has no default: the process refuses to start without it.
    """

    # API Configuration
    project_name: str = Field(
        default="User API",
        description="Project name displayed in API docs"
    )

    # Database Configuration (MongoDB)
    mongodb_uri: str = Field(
        ...,
        description="MongoDB connection URI (mongodb:// or mongodb+srv://)"
    )
    database_name: str = Field(
        default="myDB",
        description="Database holding the users collection"
    )
    users_collection: str = Field(
        default="users",
        description="Collection where user records are stored"
    )
    default_user_id: int = Field(
        default=76,
        ge=0,
        le=U32_MAX,
        description="Identifier of the user returned by GET /user"
    )

    # HTTP Server Configuration
    host: str = Field(
        default="127.0.0.1",
        description="Interface the server binds to"
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Port the server listens on"
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Per-request timeout; slower requests get 408"
    )
    server_header: str = Field(
        default="user_api",
        description="Default value for the Server response header"
    )

    # CORS Configuration
    cors_origins: Annotated[List[str], NoDecode] = Field(
        default=["*"],
        description="Allowed CORS origins (permissive by default)"
    )

    # Logging Configuration
    log_level: str = Field(
        default="DEBUG",
        description="Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_json: bool = Field(
        default=True,
        description="Emit structured JSON logs instead of plain text"
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | List[str]) -> List[str]:
        """
        Parse cors_origins from JSON string or list.

        Supports comma-separated origins for easier .env configuration.
        """
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # Fallback: split by comma if not valid JSON
                return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("mongodb_uri")
    @classmethod
    def validate_mongodb_uri(cls, v: str) -> str:
        """
        Validate MongoDB URI format.

        Only the scheme is checked here; the driver parses the rest
        when the client is constructed.
        """
        if not v or v.strip() == "":
            raise ValueError("MONGODB_URI is required and cannot be empty")

        valid_schemes = ["mongodb", "mongodb+srv"]
        if not any(v.startswith(scheme + "://") for scheme in valid_schemes):
            raise ValueError(
                f"MONGODB_URI must start with one of: "
                f"{', '.join(s + '://' for s in valid_schemes)}. "
                f"Got: {v[:20]}..."
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level and reject unknown names."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(
                f"LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL. "
                f"Got: {v}"
            )
        return level


# Global settings instance
# Import this instance throughout the application
settings = Settings()
