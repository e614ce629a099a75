"""
Health check endpoints for monitoring and readiness probes.

This module provides endpoints for:
- Liveness probe: /health (basic "is the server running" check)
- Readiness probe: /health/ready (checks that MongoDB answers)
"""

import time
from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, status, Response

from user_api.api.dependencies import DocumentStore
from user_api.core.probes import check_database
from user_api.schemas.health import (
    HealthResponse,
    ReadinessResponse,
    HealthCheckDetail,
)


router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
    description="Basic health check to verify the service is running",
)
async def health_check() -> HealthResponse:
    """
    Basic liveness probe.

    Always returns 200 while the application is running.
    """
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc)
    )


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Readiness check including the document store",
)
async def readiness_check(
    response: Response,
    store: DocumentStore,
) -> ReadinessResponse:
    """
    Readiness probe with dependency checks.

    Returns 200 if the document store answers a ping, 503 otherwise.

    Example response (unhealthy):
        {
            "status": "not_ready",
            "checks": {
                "db": {"healthy": false, "latency_ms": 2000.0,
                       "error": "Database connection failed or timed out"}
            },
            "timestamp": "2026-10-19T10:30:00.123456+00:00"
        }
    """
    db_start = time.time()
    db_healthy = await check_database(store)
    db_latency = (time.time() - db_start) * 1000  # Convert to ms

    checks: Dict[str, HealthCheckDetail] = {
        "db": HealthCheckDetail(
            healthy=db_healthy,
            latency_ms=round(db_latency, 2),
            error=None if db_healthy else "Database connection failed or timed out"
        ),
    }

    all_healthy = all(check.healthy for check in checks.values())
    overall_status = "ready" if all_healthy else "not_ready"

    if not all_healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(
        status=overall_status,
        checks=checks,
        timestamp=datetime.now(timezone.utc)
    )
