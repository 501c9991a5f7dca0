#!/usr/bin/env python3
"""
Provider interfaces for the Panchanga engine
Structural contracts for ephemeris and rise/set sources
"""

from .providers import PositionProvider, SunriseSolver

__all__ = [
    "PositionProvider",
    "SunriseSolver",
]
