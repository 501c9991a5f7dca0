#!/usr/bin/env python3
"""
Step Change Detection
Locates the instant a piecewise-constant function of time changes value.
Coarse forward stepping brackets the change, bisection refines it.
"""

import logging

from collections.abc import Callable, Hashable
from datetime import datetime, timedelta

from .core_types import StepChange
from .time_utils import ensure_utc

logger = logging.getLogger(__name__)

# ============================================================================
# CHANGE DETECTION PARAMETERS
# ============================================================================

# Grid search parameters
DEFAULT_STEP_MINUTES = 30  # Shorter than the briefest karana (~4.5 h)
DEFAULT_HORIZON_HOURS = 72  # Longest tithi is ~26.5 h, longest nakshatra ~27 h

# Bisection parameters
BISECTION_TOLERANCE_SECONDS = 1.0  # Target precision in seconds
BISECTION_MAX_DEPTH = 60  # Hard stop; 30 min / 2**60 is far below a microsecond

StepFunction = Callable[[datetime], Hashable]

# ============================================================================
# CHANGE REFINEMENT - BISECTION
# ============================================================================


def refine_change_time(
    f: StepFunction,
    lo: datetime,
    hi: datetime,
    old_value: Hashable,
    tolerance_seconds: float = BISECTION_TOLERANCE_SECONDS,
) -> datetime:
    """Refine change time using bisection

    Args:
        f: Step function of time
        lo: Instant where f still equals old_value
        hi: Instant where f already differs from old_value
        old_value: Value before the change
        tolerance_seconds: Target precision

    Returns:
        Midpoint of the final bracketing interval
    """
    lo = ensure_utc(lo)
    hi = ensure_utc(hi)

    depth = 0
    while depth < BISECTION_MAX_DEPTH:
        if (hi - lo).total_seconds() <= tolerance_seconds:
            break

        mid = lo + (hi - lo) / 2
        if f(mid) == old_value:
            # Change is in second half
            lo = mid
        else:
            hi = mid

        depth += 1

    return lo + (hi - lo) / 2


# ============================================================================
# FIRST CHANGE AFTER AN INSTANT
# ============================================================================


def find_step_change(
    f: StepFunction,
    start: datetime,
    horizon: timedelta = timedelta(hours=DEFAULT_HORIZON_HOURS),
    step: timedelta = timedelta(minutes=DEFAULT_STEP_MINUTES),
    precision: timedelta = timedelta(seconds=BISECTION_TOLERANCE_SECONDS),
) -> datetime | None:
    """Find the first instant after ``start`` at which ``f`` changes value

    ``step`` must be shorter than the shortest run of any value of ``f``,
    otherwise a change and its reversal can fall inside one step unseen.

    Args:
        f: Step function of time (any comparable value)
        start: Search start
        horizon: Maximum span searched past start
        step: Coarse grid interval
        precision: Width of the final bisection bracket

    Returns:
        Change instant, or None when f is constant over the whole horizon
    """
    if step <= timedelta(0):
        raise ValueError("step must be positive")

    start = ensure_utc(start)
    limit = start + horizon
    initial = f(start)

    lo = start
    while lo < limit:
        hi = min(lo + step, limit)
        if f(hi) != initial:
            return refine_change_time(
                f, lo, hi, initial, tolerance_seconds=precision.total_seconds()
            )
        lo = hi

    logger.warning(
        "No value change found within horizon",
        extra={"search_start": start.isoformat(), "horizon_hours": horizon.total_seconds() / 3600.0},
    )
    return None


# ============================================================================
# ALL CHANGES IN A RANGE
# ============================================================================


def detect_changes(
    f: StepFunction,
    start: datetime,
    end: datetime,
    step: timedelta = timedelta(minutes=DEFAULT_STEP_MINUTES),
    precision: timedelta = timedelta(seconds=BISECTION_TOLERANCE_SECONDS),
) -> list[StepChange]:
    """Detect every value change of ``f`` in ``[start, end)``

    Args:
        f: Step function of time
        start: Start time (UTC)
        end: End time (UTC)
        step: Coarse grid interval
        precision: Width of the final bisection bracket

    Returns:
        Chronological list of StepChange events
    """
    start = ensure_utc(start)
    end = ensure_utc(end)
    changes: list[StepChange] = []

    current_time = start
    prev_value = f(current_time)

    while current_time < end:
        next_time = min(current_time + step, end)
        next_value = f(next_time)

        if next_value != prev_value:
            exact = refine_change_time(
                f, current_time, next_time, prev_value, precision.total_seconds()
            )
            changes.append(StepChange(instant=exact, old_value=prev_value, new_value=next_value))

        prev_value = next_value
        current_time = next_time

    return changes
