#!/usr/bin/env python3
"""
Shared OpenAPI helpers and reusable response docs.
"""

from __future__ import annotations

from typing import Any, Dict


# Reusable default error responses for routers. These are documentation-only
# (the global exception handler already returns RFC7807 Problem JSON).
DEFAULT_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    403: {"description": "Feature disabled"},
    404: {"description": "Unknown ayanamsa"},
    422: {"description": "Validation Error"},  # FastAPI default
    500: {"description": "Server Error"},
    503: {"description": "Ephemeris unavailable"},
}


def problem_response(status: int, title: str, description: str) -> Dict[int, Dict[str, Any]]:
    """Single documented Problem response, e.g. for route-specific overrides."""
    return {
        status: {
            "description": description,
            "content": {
                "application/problem+json": {
                    "example": {"title": title, "status": status, "detail": description}
                }
            },
        }
    }
