"""
Response models for OpenAPI specification and contract stability.

Every route declares a response model for:
- SDK generation
- Contract stability
- Type safety
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# =======================
# Health & Monitoring
# =======================

class HealthStatus(BaseModel):
    """Basic health status response."""
    status: str = Field(..., description="Health status: ok, warning, error")
    timestamp: datetime = Field(..., description="Check timestamp")
    process_id: str = Field(..., description="Process ID as string")


class DependencyCheck(BaseModel):
    """Individual dependency check result."""
    status: str = Field(..., description="Check status: ok, warning, error")
    error: Optional[str] = Field(None, description="Error message if failed")


class EphemerisCheck(DependencyCheck):
    """Swiss Ephemeris position check."""
    sun_longitude: Optional[float] = Field(None, description="Tropical Sun longitude if successful")


class ReadinessResponse(BaseModel):
    """Readiness probe response."""
    status: str = Field(..., description="Overall readiness: ready, not_ready")
    timestamp: datetime = Field(..., description="Check timestamp")
    checks: dict[str, EphemerisCheck | DependencyCheck] = Field(..., description="Dependency checks")
    features: list[str] = Field(..., description="Enabled feature flags")
    errors: Optional[list[str]] = Field(None, description="Failing checks")


# =======================
# Root
# =======================

class RootInfoResponse(BaseModel):
    """Service identity returned by GET /."""
    name: str
    version: str
    status: str
    docs: str
    endpoints: list[str]


# =======================
# Panchanga
# =======================

class AyanamsaInfo(BaseModel):
    """One ayanamsa reading."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Lahiri",
                "description": "Chitrapaksha, Indian national standard",
                "degree": 24.2153,
                "source": "live",
                "is_approximate": False,
            }
        }
    )

    id: int = Field(..., description="Swiss Ephemeris sidereal mode")
    name: str
    description: str
    degree: float = Field(..., description="Ayanamsa in degrees")
    source: str = Field(..., description="live or approximate")
    is_approximate: bool


class AyanamsaListResponse(BaseModel):
    """All ayanamsa systems at one instant, sorted by degree."""
    timestamp: datetime
    count: int
    systems: list[AyanamsaInfo]


# RFC 7807 Problem Details (global error model)
class Problem(BaseModel):
    """Problem Details per RFC 7807 for error responses."""
    type: Optional[str] = Field(
        None, description="URI reference that identifies the problem type"
    )
    title: str = Field(..., description="Short, human-readable summary of the problem")
    status: int = Field(..., description="HTTP status code")
    detail: Optional[str] = Field(None, description="Human-readable explanation")
    instance: Optional[str] = Field(
        None, description="URI reference that identifies the specific occurrence"
    )
    code: Optional[str] = Field(None, description="Application-specific error code")
    available: Optional[list[str]] = Field(
        None, description="Valid choices when the problem is an unknown selector"
    )
    extra: Optional[dict[str, Any]] = Field(None, description="Additional context")
