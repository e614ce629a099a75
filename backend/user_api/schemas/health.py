"""
Pydantic schemas for health check endpoints.
"""

from datetime import datetime
from typing import Dict, Optional, Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness answer: the process is up."""
    status: Literal["ok"] = Field(description="Health status indicator")
    timestamp: datetime = Field(description="Current UTC timestamp")


class HealthCheckDetail(BaseModel):
    """Result of one dependency check."""
    healthy: bool = Field(description="Whether the check passed")
    latency_ms: Optional[float] = Field(
        default=None,
        description="Check execution time in milliseconds"
    )
    error: Optional[str] = Field(
        default=None,
        description="Error message if check failed"
    )


class ReadinessResponse(BaseModel):
    """
    Readiness answer.

    `status` is "ready" only if every entry in `checks` is healthy.
    """
    status: Literal["ready", "not_ready"] = Field(description="Overall readiness status")
    checks: Dict[str, HealthCheckDetail] = Field(
        description="Individual dependency checks, keyed by name (db)"
    )
    timestamp: datetime = Field(description="Current UTC timestamp")
