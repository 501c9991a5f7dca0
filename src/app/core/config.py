#!/usr/bin/env python3
"""
Application configuration
"""

import os

from dataclasses import dataclass
from datetime import timedelta

# Swiss Ephemeris data directory; unset uses the built-in Moshier ephemeris
EPHE_PATH = os.getenv("PANCHANG_EPHE_PATH") or None

# Ayanamsa used when a request names none
DEFAULT_AYANAMSA = os.getenv("PANCHANG_DEFAULT_AYANAMSA", "Lahiri")

# Transition search settings
TRANSITION_STEP_MINUTES = float(os.getenv("PANCHANG_TRANSITION_STEP_MINUTES", "30"))
TRANSITION_PRECISION_SECONDS = float(os.getenv("PANCHANG_TRANSITION_PRECISION_SECONDS", "1.0"))
TRANSITION_HORIZON_HOURS = float(os.getenv("PANCHANG_TRANSITION_HORIZON_HOURS", "72"))

# API settings
API_TITLE = "Panchang API"
API_VERSION = os.getenv("PANCHANG_API_VERSION", "1.0.0")


@dataclass(frozen=True)
class TransitionSettings:
    """Step, precision and horizon of every end-time search"""

    step: timedelta = timedelta(minutes=30)
    precision: timedelta = timedelta(seconds=1)
    horizon: timedelta = timedelta(hours=72)

    def __post_init__(self) -> None:
        if self.step <= timedelta(0) or self.precision <= timedelta(0):
            raise ValueError("step and precision must be positive")
        if self.horizon < self.step:
            raise ValueError("horizon must cover at least one step")

    @classmethod
    def from_env(cls) -> "TransitionSettings":
        return cls(
            step=timedelta(minutes=TRANSITION_STEP_MINUTES),
            precision=timedelta(seconds=TRANSITION_PRECISION_SECONDS),
            horizon=timedelta(hours=TRANSITION_HORIZON_HOURS),
        )
