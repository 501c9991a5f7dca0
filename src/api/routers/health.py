#!/usr/bin/env python3
"""
Health check endpoints for monitoring and readiness
"""

import asyncio
import os

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, PlainTextResponse

from api.models.responses import (
    DependencyCheck,
    EphemerisCheck,
    HealthStatus,
    ReadinessResponse,
)
from api.routers.panchanga import get_panchanga_engine
from config.feature_flags import get_feature_flags
from engine.constants import SUN
from engine.facade import PanchangaEngine

router = APIRouter(tags=["health"])


@router.get(
    "/health/live",
    response_model=HealthStatus,
    summary="Liveness",
    operation_id="health_live",
)
async def liveness_check() -> HealthStatus:
    """
    Kubernetes liveness probe endpoint.

    Returns 200 OK if the application process is alive and responsive.
    """
    return HealthStatus(
        status="ok",
        timestamp=datetime.now(UTC),
        process_id=str(os.getpid()),
    )


@router.get(
    "/health/up",
    response_class=PlainTextResponse,
    summary="Up",
    operation_id="health_up",
)
async def health_up() -> PlainTextResponse:
    """Plaintext liveness for external monitors."""
    return PlainTextResponse("ok")


async def _check_ephemeris(engine: PanchangaEngine) -> EphemerisCheck:
    try:
        position = await asyncio.to_thread(engine.provider.position_of, SUN, datetime.now(UTC))
        return EphemerisCheck(status="ok", sun_longitude=round(position.longitude, 6))
    except Exception as e:
        return EphemerisCheck(status="error", error=str(e))


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={
        200: {"description": "Service is ready"},
        503: {"description": "Service is not ready"},
    },
    summary="Readiness",
    operation_id="health_ready",
)
async def readiness_check(engine: PanchangaEngine = Depends(get_panchanga_engine)):
    """
    Kubernetes readiness probe endpoint.

    Returns 503 when the ephemeris cannot produce a Sun position. A registry
    that would only serve approximations is reported as a warning.
    """
    checks: dict[str, DependencyCheck] = {"ephemeris": await _check_ephemeris(engine)}

    reading = await asyncio.to_thread(
        engine.registry.degree, engine.default_ayanamsa, datetime.now(UTC)
    )
    if reading is None:
        checks["ayanamsa"] = DependencyCheck(
            status="error", error=f"Default ayanamsa {engine.default_ayanamsa!r} is unknown"
        )
    elif reading.is_approximate:
        checks["ayanamsa"] = DependencyCheck(status="warning", error="Serving approximate values")
    else:
        checks["ayanamsa"] = DependencyCheck(status="ok")

    errors = [f"{name}: {c.error or 'unknown error'}" for name, c in checks.items() if c.status == "error"]
    response = ReadinessResponse(
        status="ready" if not errors else "not_ready",
        timestamp=datetime.now(UTC),
        checks=checks,
        features=get_feature_flags().enabled_features(),
        errors=errors or None,
    )

    if errors:
        return JSONResponse(
            content=response.model_dump(mode="json"), status_code=status.HTTP_503_SERVICE_UNAVAILABLE
        )
    return response
