"""Tests for wind series analysis."""
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from windwatch.analytics import TrendDirection, summarize_series
from windwatch.analytics.wind_trends import angular_difference, circular_mean, compute_trend
from windwatch.models import WindHistoryPoint

START = datetime(2024, 5, 1, 6, 0, tzinfo=timezone.utc)


def series(speeds, directions=None, gusts=None, step_hours=1):
    directions = directions or [90.0] * len(speeds)
    gusts = gusts or [None] * len(speeds)
    return [
        WindHistoryPoint(
            time=START + timedelta(hours=i * step_hours),
            direction=d,
            speed=s,
            gust=g,
        )
        for i, (s, d, g) in enumerate(zip(speeds, directions, gusts))
    ]


def test_circular_mean_across_north():
    assert circular_mean(np.array([350.0, 20.0])) == pytest.approx(5.0)


def test_circular_mean_simple():
    assert circular_mean(np.array([80.0, 100.0])) == pytest.approx(90.0)


def test_angular_difference_wraps():
    diffs = angular_difference(np.array([350.0, 10.0, 180.0]), 0.0)
    assert diffs.tolist() == pytest.approx([10.0, 10.0, 180.0])


def test_building_wind_is_increasing():
    hours = np.arange(6, dtype=float)
    assert compute_trend(hours, np.array([5, 6, 7, 8, 9, 10], dtype=float)) is TrendDirection.INCREASING


def test_dying_wind_is_decreasing():
    hours = np.arange(6, dtype=float)
    assert compute_trend(hours, np.array([12, 11, 10, 9, 8, 7], dtype=float)) is TrendDirection.DECREASING


def test_flat_wind_is_stable():
    hours = np.arange(6, dtype=float)
    assert compute_trend(hours, np.full(6, 10.0)) is TrendDirection.STABLE


def test_single_sample_is_unknown():
    assert compute_trend(np.array([0.0]), np.array([10.0])) is TrendDirection.UNKNOWN


def test_summary_statistics():
    summary = summarize_series(series(
        speeds=[8.0, 10.0, 12.0],
        directions=[80.0, 90.0, 100.0],
        gusts=[None, 15.0, 18.0],
    ))

    assert summary.count == 3
    assert summary.mean_speed == pytest.approx(10.0)
    assert summary.max_speed == 12.0
    assert summary.max_gust == 18.0
    assert summary.mean_direction == pytest.approx(90.0)
    assert summary.direction_spread == pytest.approx(10.0)
    assert summary.speed_trend is TrendDirection.INCREASING


def test_summary_without_gusts():
    summary = summarize_series(series(speeds=[10.0, 10.0]))
    assert summary.max_gust is None
    assert summary.to_dict()['max_gust_kts'] is None
    assert summary.to_dict()['speed_trend'] == 'stable'


def test_summary_sorts_points_by_time():
    points = series(speeds=[5.0, 6.0, 7.0, 8.0, 9.0, 10.0])
    assert summarize_series(list(reversed(points))).speed_trend is TrendDirection.INCREASING


def test_empty_series():
    assert summarize_series([]) is None
