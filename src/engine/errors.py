#!/usr/bin/env python3
"""
Panchanga engine exceptions
"""

from __future__ import annotations


class PanchangaError(Exception):
    """Base class for engine failures"""

    pass


class EphemerisUnavailableError(PanchangaError):
    """Raised when the position provider cannot supply a body position.

    Positions have no fallback, so this always propagates to the caller.
    """

    def __init__(self, body: str, reason: str):
        super().__init__(f"Ephemeris unavailable for {body}: {reason}")
        self.body = body
        self.reason = reason


class AyanamsaNotFoundError(PanchangaError, LookupError):
    """Raised when an ayanamsa selector matches no known system"""

    def __init__(self, selector: int | str, available: list[str]):
        super().__init__(f"Unknown ayanamsa: {selector!r}")
        self.selector = selector
        self.available = available
