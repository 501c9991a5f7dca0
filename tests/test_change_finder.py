from __future__ import annotations

import logging

from datetime import UTC, datetime, timedelta

import pytest

from engine.change_finder import detect_changes, find_step_change, refine_change_time

START = datetime(2025, 7, 20, tzinfo=UTC)


def _switch_at(moment: datetime):
    return lambda t: 0 if t < moment else 1


def test_finds_change_within_precision():
    moment = START + timedelta(hours=5, minutes=17, seconds=42)
    found = find_step_change(_switch_at(moment), START)
    assert found is not None
    assert abs((found - moment).total_seconds()) <= 1.0

    f = _switch_at(moment)
    assert f(found - timedelta(seconds=1)) == 0
    assert f(found + timedelta(seconds=1)) == 1


def test_change_on_grid_point():
    moment = START + timedelta(minutes=30)
    found = find_step_change(_switch_at(moment), START)
    assert abs((found - moment).total_seconds()) <= 1.0


def test_precision_is_configurable():
    moment = START + timedelta(hours=2, seconds=0.3)
    found = find_step_change(_switch_at(moment), START, precision=timedelta(milliseconds=10))
    assert abs((found - moment).total_seconds()) <= 0.01


def test_no_change_within_horizon_returns_none(caplog):
    with caplog.at_level(logging.WARNING, logger="engine.change_finder"):
        found = find_step_change(lambda t: "constant", START, horizon=timedelta(hours=6))
    assert found is None
    assert "No value change found within horizon" in caplog.text


def test_change_beyond_horizon_is_not_reported():
    moment = START + timedelta(hours=10)
    assert find_step_change(_switch_at(moment), START, horizon=timedelta(hours=6)) is None


def test_rejects_non_positive_step():
    with pytest.raises(ValueError):
        find_step_change(lambda t: 0, START, step=timedelta(0))


def test_naive_start_is_utc():
    moment = START + timedelta(hours=1)
    found = find_step_change(_switch_at(moment), START.replace(tzinfo=None))
    assert found.tzinfo is not None


def test_refine_returns_interval_midpoint():
    moment = START + timedelta(minutes=10)
    found = refine_change_time(
        _switch_at(moment), START, START + timedelta(minutes=30), 0, tolerance_seconds=0.5
    )
    assert abs((found - moment).total_seconds()) <= 0.5


def test_detect_changes_lists_every_change():
    def hour_parity(t: datetime) -> int:
        return int((t - START).total_seconds() // 3600) % 2

    changes = detect_changes(hour_parity, START, START + timedelta(hours=4, minutes=30))
    assert len(changes) == 4
    for hour, change in enumerate(changes, start=1):
        assert abs((change.instant - (START + timedelta(hours=hour))).total_seconds()) <= 1.0
        assert change.new_value != change.old_value

    assert changes[0].to_dict()["old_value"] == 0


def test_detect_changes_empty_for_constant():
    assert detect_changes(lambda t: 1, START, START + timedelta(hours=3)) == []
