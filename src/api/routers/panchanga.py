"""
Panchanga API Router

Five limbs with end times, Kalam and Muhurta windows, moon times, planet
positions and ayanamsa lookup.
Engine work runs on a worker thread so the event loop stays free.
"""

import asyncio
import time

from datetime import UTC, datetime
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field, field_validator

from api.models.responses import AyanamsaInfo, AyanamsaListResponse
from api.services.metrics import panchanga_metrics
from app.core.logging import get_api_logger
from app.openapi.common import DEFAULT_ERROR_RESPONSES, problem_response
from config.feature_flags import require_feature
from engine.core_types import GeoLocation
from engine.errors import AyanamsaNotFoundError, EphemerisUnavailableError
from engine.facade import PanchangaEngine, get_engine

router = APIRouter(prefix="/api/v1/panchanga", tags=["panchanga"], responses=DEFAULT_ERROR_RESPONSES)
logger = get_api_logger("panchanga")


def get_panchanga_engine() -> PanchangaEngine:
    """Engine dependency; tests override it with a deterministic provider."""
    return get_engine()


class PanchangaRequest(BaseModel):
    """Request for a Panchanga calculation"""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "timestamp": "2025-07-20T19:00:00Z",
                "latitude": 49.888,
                "longitude": -119.496,
                "timezone": "America/Vancouver",
                "ayanamsa": "Lahiri",
            }
        }
    )

    timestamp: datetime = Field(..., description="Query instant; naive values are UTC")
    latitude: float = Field(..., ge=-90, le=90, description="Location latitude")
    longitude: float = Field(..., ge=-180, le=180, description="Location longitude")
    altitude: float = Field(default=0.0, ge=0, description="Altitude in metres")
    timezone: str | None = Field(default=None, description="IANA zone, display only")
    ayanamsa: int | str | None = Field(
        default=None, description="Ayanamsa id or name (default from configuration)"
    )
    include_windows: bool = Field(default=True, description="Include Kalam and Muhurta windows")
    include_end_times: bool = Field(default=True, description="Search element end instants")
    include_planets: bool = Field(
        default=True, description="Include sidereal positions of the classical planets"
    )

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v


class PanchangaResponse(BaseModel):
    """Panchanga calculation envelope"""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "success",
                "data": {
                    "elements": {
                        "tithi": {"name": "Ekadashi", "number": 11, "paksha": "Krishna"},
                        "vara": {"name": "Sunday", "index": 0},
                    },
                    "ayanamsa": {"name": "Lahiri", "degree": 24.2153, "source": "live"},
                },
                "meta": {"compute_time_ms": 42.1, "ayanamsa_source": "live"},
            }
        }
    )

    status: str
    data: dict[str, Any]
    meta: dict[str, Any]


def _not_found(e: AyanamsaNotFoundError) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={
            "title": "Unknown ayanamsa",
            "detail": str(e),
            "code": "AYANAMSA_NOT_FOUND",
            "available": e.available,
        },
    )


@router.post(
    "/calculate",
    response_model=PanchangaResponse,
    summary="Calculate Panchanga",
    operation_id="panchanga_calculate",
)
@require_feature("panchanga_full")
async def calculate_panchanga(
    request: PanchangaRequest,
    engine: PanchangaEngine = Depends(get_panchanga_engine),
) -> PanchangaResponse:
    """
    Calculate the five limbs anchored at local sunrise

    Elements carry their end instants; windows come from the same day's
    sunrise and sunset and are empty where the Sun does not rise or set.
    """
    location = GeoLocation(
        latitude=request.latitude,
        longitude=request.longitude,
        altitude=request.altitude,
        timezone=request.timezone,
    )
    logger.info(
        "Panchanga calculation requested",
        extra={
            "query_instant": request.timestamp.isoformat(),
            "ayanamsa": request.ayanamsa,
        },
    )

    started = time.perf_counter()
    try:
        result = await asyncio.to_thread(
            engine.compute,
            request.timestamp,
            location,
            ayanamsa=request.ayanamsa,
            compute_end_times=request.include_end_times,
            include_windows=request.include_windows,
            include_planets=request.include_planets,
        )
    except AyanamsaNotFoundError as e:
        panchanga_metrics.record_request("calculate", "not_found")
        raise _not_found(e) from e
    except EphemerisUnavailableError as e:
        panchanga_metrics.record_request("calculate", "error")
        logger.error(f"Ephemeris unavailable: {e}")
        raise HTTPException(status_code=503, detail=f"Ephemeris unavailable: {e.reason}") from e

    elapsed = time.perf_counter() - started
    panchanga_metrics.record_request("calculate", "success", elapsed)
    panchanga_metrics.record_result(result)

    meta = {
        "compute_time_ms": round(elapsed * 1000.0, 2),
        "ayanamsa_source": result.ayanamsa.source.value,
        "anchored_at_sunrise": result.anchored_at_sunrise,
    }
    logger.info("Panchanga calculation completed", extra=meta)

    return PanchangaResponse(status="success", data=result.to_dict(), meta=meta)


@router.get(
    "/ayanamsa",
    response_model=AyanamsaListResponse,
    summary="List ayanamsa systems",
    operation_id="panchanga_ayanamsa_list",
)
async def list_ayanamsas(
    timestamp: datetime | None = Query(default=None, description="Instant (default now)"),
    engine: PanchangaEngine = Depends(get_panchanga_engine),
) -> AyanamsaListResponse:
    """Every known system read at ``timestamp``, sorted by degree"""
    instant = timestamp or datetime.now(UTC)
    readings = await asyncio.to_thread(engine.registry.list_at, instant)
    for reading in readings:
        panchanga_metrics.record_ayanamsa(reading)
    panchanga_metrics.record_request("ayanamsa_list", "success")

    return AyanamsaListResponse(
        timestamp=instant,
        count=len(readings),
        systems=[AyanamsaInfo(**r.to_dict()) for r in readings],
    )


@router.get(
    "/ayanamsa/{selector}",
    response_model=AyanamsaInfo,
    summary="Get one ayanamsa",
    responses=problem_response(404, "Unknown ayanamsa", "Selector matches no ayanamsa system"),
    operation_id="panchanga_ayanamsa_get",
)
async def get_ayanamsa(
    selector: str,
    timestamp: datetime | None = Query(default=None, description="Instant (default now)"),
    engine: PanchangaEngine = Depends(get_panchanga_engine),
) -> AyanamsaInfo:
    """Resolve ``selector`` (id or name) and read it at ``timestamp``"""
    instant = timestamp or datetime.now(UTC)
    reading = await asyncio.to_thread(engine.registry.degree, selector, instant)
    if reading is None:
        panchanga_metrics.record_request("ayanamsa_get", "not_found")
        raise _not_found(AyanamsaNotFoundError(selector, engine.registry.names()))

    panchanga_metrics.record_ayanamsa(reading)
    panchanga_metrics.record_request("ayanamsa_get", "success")
    return AyanamsaInfo(**reading.to_dict())
