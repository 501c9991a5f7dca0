#!/usr/bin/env python3
"""
Feature flag utilities and decorators.

Provides a stable interface expected by the engine and the API:
- get_feature_flags() -> returns a state object with boolean flags and helpers
- require_feature(flag) -> decorator to gate endpoints/functions
- FeatureFlags -> enum-style names for router decorators

Supports both enum-based flags (for API routers) and string keys used by
internal modules (e.g., "daily_windows", "muhurta").
"""

from __future__ import annotations

import inspect
import os
from dataclasses import asdict, dataclass, field
from enum import Enum
from functools import wraps
from typing import Any, Callable


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}


class FeatureFlags(Enum):
    ENABLE_PANCHANGA_FULL = "ENABLE_PANCHANGA_FULL"
    ENABLE_DAILY_WINDOWS = "ENABLE_DAILY_WINDOWS"
    ENABLE_MUHURTA_WINDOWS = "ENABLE_MUHURTA_WINDOWS"
    ENABLE_TRANSITION_TIMES = "ENABLE_TRANSITION_TIMES"


@dataclass
class FeatureFlagState:
    # Panchanga API surface
    ENABLE_PANCHANGA_FULL: bool = field(
        default_factory=lambda: _env_bool("ENABLE_PANCHANGA_FULL", True)
    )
    # Rahu Kaal / Yamaganda / Gulikai
    ENABLE_DAILY_WINDOWS: bool = field(
        default_factory=lambda: _env_bool("ENABLE_DAILY_WINDOWS", True)
    )
    # Abhijit, Brahma and the other named muhurtas
    ENABLE_MUHURTA_WINDOWS: bool = field(
        default_factory=lambda: _env_bool("ENABLE_MUHURTA_WINDOWS", True)
    )
    # End instants for the five elements and the karana schedule
    ENABLE_TRANSITION_TIMES: bool = field(
        default_factory=lambda: _env_bool("ENABLE_TRANSITION_TIMES", True)
    )

    def enabled_features(self) -> list[str]:
        """Return a list of feature names that are enabled."""
        return [name for name, value in self.to_dict().items() if value is True]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# Module-level singleton
_FLAGS: FeatureFlagState | None = None


def get_feature_flags() -> FeatureFlagState:
    global _FLAGS
    if _FLAGS is None:
        _FLAGS = FeatureFlagState()
    return _FLAGS


def reset_feature_flags() -> None:
    """Drop the cached state so the next read picks up the environment again."""
    global _FLAGS
    _FLAGS = None


# Mapping for string-based require_feature usage
_STRING_FLAG_MAP: dict[str, str] = {
    "panchanga_full": "ENABLE_PANCHANGA_FULL",
    "daily_windows": "ENABLE_DAILY_WINDOWS",
    "muhurta": "ENABLE_MUHURTA_WINDOWS",
    "transitions": "ENABLE_TRANSITION_TIMES",
}


def is_feature_enabled(flag: FeatureFlags | str) -> bool:
    flags = get_feature_flags()

    if isinstance(flag, FeatureFlags):
        attr = flag.value
        return getattr(flags, attr, False) is True

    # string name support
    attr = _STRING_FLAG_MAP.get(flag, None)
    if attr is None:
        # Unknown string flag: default to False to be safe
        return False
    return getattr(flags, attr, False) is True


def require_feature(flag: FeatureFlags | str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to gate function/endpoint by feature flag.

    Works with both sync and async callables. For FastAPI endpoints (async),
    raises HTTPException 403 when disabled. For plain functions,
    raises RuntimeError when disabled.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                if not is_feature_enabled(flag):
                    from fastapi import HTTPException

                    raise HTTPException(status_code=403, detail="Feature disabled")
                return await func(*args, **kwargs)

            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            if not is_feature_enabled(flag):
                raise RuntimeError("Feature disabled")
            return func(*args, **kwargs)

        return sync_wrapper

    return decorator
