"""
metrics.py — Prometheus metrics for the Panchang service.

- vc_panchanga_requests_total{endpoint,outcome} - Requests served
- vc_panchanga_compute_seconds{endpoint} - Engine compute latency
- vc_ayanamsa_fallback_total{system} - Readings served from the approximation
- vc_transition_unresolved_total{element} - End-time searches that hit the horizon
- vc_sunrise_missing_total - Queries at locations without sunrise that day
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram, Info

# ===========================
# REQUEST METRICS
# ===========================

vc_panchanga_requests_total = Counter(
    "vc_panchanga_requests_total",
    "Panchanga API requests by endpoint and outcome",
    ["endpoint", "outcome"],  # outcome: success, not_found, error
)

vc_panchanga_compute_seconds = Histogram(
    "vc_panchanga_compute_seconds",
    "Time spent computing a Panchanga response",
    ["endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, float("inf")),
)

# ===========================
# ENGINE QUALITY METRICS
# ===========================

vc_ayanamsa_fallback_total = Counter(
    "vc_ayanamsa_fallback_total",
    "Ayanamsa readings served from the polynomial approximation",
    ["system"],
)

vc_transition_unresolved_total = Counter(
    "vc_transition_unresolved_total",
    "Element end-time searches that found no change within the horizon",
    ["element"],
)

vc_sunrise_missing_total = Counter(
    "vc_sunrise_missing_total",
    "Queries for which no sunrise exists on the local day",
)

# ===========================
# SYSTEM INFO
# ===========================

vc_panchang_info = Info("vc_panchang_info", "Panchang service information")


# ===========================
# METRIC COLLECTION HELPERS
# ===========================


class PanchangaMetricsCollector:
    """Helper class to collect and update Panchanga metrics."""

    def record_request(self, endpoint: str, outcome: str, seconds: float | None = None):
        vc_panchanga_requests_total.labels(endpoint=endpoint, outcome=outcome).inc()
        if seconds is not None:
            vc_panchanga_compute_seconds.labels(endpoint=endpoint).observe(seconds)

    def record_ayanamsa(self, reading) -> None:
        """Count a reading if it came from the approximation."""
        if reading.is_approximate:
            vc_ayanamsa_fallback_total.labels(system=reading.system.name).inc()

    def record_result(self, result) -> None:
        """Record engine quality signals from a PanchangaResult.

        Missing end instants only count when the search actually ran.
        """
        self.record_ayanamsa(result.ayanamsa)
        if not result.anchored_at_sunrise:
            vc_sunrise_missing_total.inc()
        if result.end_times_computed:
            for kind, element in result.elements.items():
                if element.end_instant is None:
                    vc_transition_unresolved_total.labels(element=kind).inc()


# Global metrics collector instance
panchanga_metrics = PanchangaMetricsCollector()


def initialize_panchang_metrics(version: str) -> None:
    """Initialize service metrics with static information."""
    vc_panchang_info.info({"version": version, "service": "panchang", "ephemeris": "swisseph"})
