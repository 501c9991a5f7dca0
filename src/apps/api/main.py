#!/usr/bin/env python3
"""
Panchang API - Main Application
FastAPI application for sunrise-anchored Panchanga calculations
"""

import asyncio
import os
import uuid

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from api.models.responses import Problem, RootInfoResponse
from api.routers.health import router as health_router
from api.routers.panchanga import router as panchanga_router
from api.services.metrics import initialize_panchang_metrics
from app.core.config import API_TITLE, API_VERSION
from app.core.logging import get_api_logger, setup_logging
from config.feature_flags import get_feature_flags
from engine.facade import get_engine
from engine.swe_backend import close_ephemeris

SKIP_WARMUP = os.getenv("PANCHANG_SKIP_WARMUP", "false").lower() in ("true", "1")

# Initialize structured logging EARLY (before any logger usage)
setup_logging(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format_json=os.getenv("LOG_FORMAT", "json").lower() == "json",
)
logger = get_api_logger("main")


async def _warmup() -> None:
    """Build the engine and resolve the default ayanamsa once"""
    engine = await asyncio.to_thread(get_engine)
    system = engine.registry.resolve(engine.default_ayanamsa)
    if system is None:
        logger.error(f"Default ayanamsa {engine.default_ayanamsa!r} is unknown")
    else:
        logger.info("Engine ready", extra={"ayanamsa_id": system.id, "ayanamsa_name": system.name})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Panchang API...")
    initialize_panchang_metrics(API_VERSION)
    logger.info("Feature flags", extra=get_feature_flags().to_dict())
    if not SKIP_WARMUP:
        await _warmup()
    try:
        yield
    finally:
        close_ephemeris()
        logger.info("Panchang API stopped")


app = FastAPI(
    title=API_TITLE,
    description="Tithi, Nakshatra, Yoga, Karana and Vara with end times, Kalam and Muhurta windows",
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)


def configure_cors() -> dict:
    """CORS settings from CORS_ALLOWED_ORIGINS (comma separated)."""
    env = os.getenv("ENVIRONMENT", "development").lower()
    raw = os.getenv("CORS_ALLOWED_ORIGINS", "").strip()
    origins = [o.strip() for o in raw.split(",") if o.strip()]

    if "*" in origins and env == "production":
        raise RuntimeError("CORS Security Error: Wildcard origins prohibited in production")
    if not origins and env != "production":
        origins = ["http://localhost:3000", "http://127.0.0.1:3000"]

    return {
        "allow_origins": origins,
        "allow_credentials": "*" not in origins,
        "allow_methods": ["GET", "POST", "OPTIONS"],
        "allow_headers": ["Content-Type", "X-Request-ID"],
        "expose_headers": ["x-request-id"],
        "max_age": 86400,
    }


app.add_middleware(CORSMiddleware, **configure_cors())

app.include_router(health_router, prefix="/api/v1")
app.include_router(panchanga_router)


# Prometheus metrics endpoint
@app.get("/metrics", response_class=PlainTextResponse, tags=["health"])
async def metrics():
    """Prometheus metrics endpoint"""
    return PlainTextResponse(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/", response_model=RootInfoResponse, tags=["health"])
async def root() -> dict[str, object]:
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "status": "operational",
        "docs": "/api/docs",
        "endpoints": [
            "/api/v1/panchanga/calculate",
            "/api/v1/panchanga/ayanamsa",
            "/api/v1/panchanga/ayanamsa/{selector}",
            "/api/v1/health/live",
            "/api/v1/health/ready",
        ],
    }


# Global HTTPException handler emitting RFC7807 Problem Details
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    title = "HTTP error"
    detail = None
    code = None
    available = None
    if isinstance(exc.detail, dict):
        title = exc.detail.get("title") or title
        detail = exc.detail.get("detail")
        code = exc.detail.get("code")
        available = exc.detail.get("available")
    elif isinstance(exc.detail, str):
        title = exc.detail

    problem = Problem(
        title=title,
        status=exc.status_code,
        detail=detail,
        instance=str(request.url),
        code=code,
        available=available,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=problem.model_dump(exclude_none=True),
        headers={"X-Request-ID": req_id},
    )


# Fallback handler for uncaught exceptions
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    logger.exception("Unhandled error", extra={"request_id": req_id, "path": request.url.path})
    problem = Problem(
        title="Internal Server Error",
        status=500,
        detail=str(exc)[:200],
        instance=str(request.url),
        code="INTERNAL_ERROR",
    )
    return JSONResponse(
        status_code=500,
        content=problem.model_dump(exclude_none=True),
        headers={"X-Request-ID": req_id},
    )


# Custom OpenAPI schema with metadata (servers/contact/license)
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(
        title=app.title,
        version=os.getenv("OPENAPI_VERSION", API_VERSION),
        description=app.description,
        routes=app.routes,
    )
    schema["servers"] = [{"url": os.getenv("OPENAPI_PUBLIC_URL", "/")}]
    schema.setdefault("info", {})["license"] = {"name": "MIT"}
    schema["info"]["x-ephemeris"] = "Swiss Ephemeris (pyswisseph)"
    app.openapi_schema = schema
    return app.openapi_schema


app.openapi = custom_openapi
