#!/usr/bin/env python3
"""
Numerical helpers used across engine modules.
"""

from __future__ import annotations

from math import floor


def normalize_angle(deg: float) -> float:
    """Normalize an angle in degrees to [0, 360).

    Handles negative inputs robustly.
    """
    x = float(deg) % 360.0
    # float modulo can round up to exactly 360.0 for tiny negative inputs
    return 0.0 if x >= 360.0 else x


def cyclic_index(deg: float, span: float, count: int) -> int:
    """Index of the arc of width ``span`` containing ``deg``, in [0, count)."""
    idx = int(floor(normalize_angle(deg) / span))
    return min(idx, count - 1)


def fraction_in_span(deg: float, span: float) -> float:
    """Fraction of the current arc already traversed, in [0, 1)."""
    frac = (normalize_angle(deg) % span) / span
    return 0.0 if frac >= 1.0 else frac


def clamp_value(v: float, lo: float, hi: float) -> float:
    """Clamp a value into [lo, hi]."""
    if v < lo:
        return lo
    if v > hi:
        return hi
    return v

