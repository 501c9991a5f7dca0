#!/usr/bin/env python3
"""
Centralized Panchanga Constants and Body ID Mappings
Cycle sizes and arc spans shared by the classifier, finder and partitioners
"""

import swisseph as swe

# ============================================================================
# BODY ID MAPPING
# ============================================================================
SUN = "sun"
MOON = "moon"
MERCURY = "mercury"
VENUS = "venus"
MARS = "mars"
JUPITER = "jupiter"
SATURN = "saturn"

BODY_IDS = {
    SUN: swe.SUN,
    MOON: swe.MOON,
    MERCURY: swe.MERCURY,
    VENUS: swe.VENUS,
    MARS: swe.MARS,
    JUPITER: swe.JUPITER,
    SATURN: swe.SATURN,
}

# Weekday lords in weekday order
CLASSICAL_PLANETS = (SUN, MOON, MARS, MERCURY, JUPITER, VENUS, SATURN)

# ============================================================================
# CYCLE SIZES
# ============================================================================
TITHI_COUNT = 30
NAKSHATRA_COUNT = 27
YOGA_COUNT = 27
KARANA_COUNT = 60
VARA_COUNT = 7
PADAS_PER_NAKSHATRA = 4
RASHI_COUNT = 12

# ============================================================================
# ARC SPANS (degrees)
# ============================================================================
TITHI_SPAN = 360.0 / TITHI_COUNT  # 12°
NAKSHATRA_SPAN = 360.0 / NAKSHATRA_COUNT  # 13°20'
PADA_SPAN = NAKSHATRA_SPAN / PADAS_PER_NAKSHATRA  # 3°20'
YOGA_SPAN = 360.0 / YOGA_COUNT
KARANA_SPAN = 360.0 / KARANA_COUNT  # 6°
RASHI_SPAN = 360.0 / RASHI_COUNT  # 30°

# ============================================================================
# VIMSHOTTARI LORDS
# ============================================================================
# Nakshatra lord sequence, repeating three times across the 27 nakshatras
VIMSHOTTARI_LORDS = [
    "Ketu",
    "Venus",
    "Sun",
    "Moon",
    "Mars",
    "Rahu",
    "Jupiter",
    "Saturn",
    "Mercury",
]

# ============================================================================
# HORIZON
# ============================================================================
# Standard altitude of the Sun's upper limb at rise/set (refraction + semi-diameter)
SUNRISE_ALTITUDE_DEG = -0.8333

# Horizon dip coefficient: degrees per sqrt(metre) of observer altitude
HORIZON_DIP_COEFF = 0.0347

# Geocentric altitude of the Moon's centre at rise/set (parallax less refraction and semi-diameter)
MOONRISE_ALTITUDE_DEG = 0.125
