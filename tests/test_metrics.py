from __future__ import annotations

from datetime import UTC, datetime, timedelta

from prometheus_client import REGISTRY

from api.services.metrics import panchanga_metrics
from app.core.config import TransitionSettings
from engine.facade import PanchangaEngine

from conftest import FakeSunriseSolver

INSTANT = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)
ELEMENTS = ("tithi", "nakshatra", "yoga", "karana", "vara")


def _unresolved(element: str) -> float:
    value = REGISTRY.get_sample_value("vc_transition_unresolved_total", {"element": element})
    return value or 0.0


def _snapshot() -> dict[str, float]:
    return {kind: _unresolved(kind) for kind in ELEMENTS}


def test_skipped_search_is_not_counted(fake_engine, greenwich, clean_flags):
    from config.feature_flags import reset_feature_flags

    clean_flags.setenv("ENABLE_TRANSITION_TIMES", "false")
    reset_feature_flags()
    result = fake_engine.compute(INSTANT, greenwich)
    assert all(e.end_instant is None for e in result.elements.values())

    before = _snapshot()
    panchanga_metrics.record_result(result)
    assert _snapshot() == before


def test_end_times_not_requested_are_not_counted(fake_engine, greenwich):
    result = fake_engine.compute(INSTANT, greenwich, compute_end_times=False)
    before = _snapshot()
    panchanga_metrics.record_result(result)
    assert _snapshot() == before


def test_exhausted_search_is_counted(fake_provider, greenwich):
    engine = PanchangaEngine(
        provider=fake_provider,
        sunrise_solver=FakeSunriseSolver(),
        settings=TransitionSettings(
            step=timedelta(minutes=30),
            precision=timedelta(seconds=1),
            horizon=timedelta(minutes=30),
        ),
    )
    result = engine.compute(INSTANT, greenwich, include_windows=False)
    # The next tithi begins hours after sunrise
    assert result.tithi.end_instant is None

    before = _unresolved("tithi")
    panchanga_metrics.record_result(result)
    assert _unresolved("tithi") == before + 1
