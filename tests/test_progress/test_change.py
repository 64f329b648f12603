"""Tests for change and threshold primitives."""

import pytest

from rehab_outcomes.models.measures import Trend
from rehab_outcomes.progress.change import (
    directional_mcid_met,
    improvement,
    magnitude_mcid_met,
    progress_toward_target,
    relative_change_percent,
    trend_for_change,
)


class TestDirection:
    def test_higher_is_better(self):
        assert trend_for_change(2, True) == Trend.IMPROVED
        assert trend_for_change(-2, True) == Trend.DECLINED

    def test_lower_is_better(self):
        assert trend_for_change(-2, False) == Trend.IMPROVED
        assert trend_for_change(2, False) == Trend.DECLINED

    def test_zero_is_stable(self):
        assert trend_for_change(0, True) == Trend.STABLE
        assert trend_for_change(0, False) == Trend.STABLE

    def test_improvement_sign(self):
        assert improvement(3, True) == 3
        assert improvement(3, False) == -3


class TestProgressTowardTarget:
    def test_partial_progress(self):
        assert progress_toward_target(5, 7, 10) == pytest.approx(40.0)

    def test_regression_is_negative(self):
        assert progress_toward_target(7, 5, 10) == pytest.approx(-66.6667, abs=1e-3)

    def test_not_clamped_above_100(self):
        assert progress_toward_target(8, 2, 4) == pytest.approx(150.0)

    def test_target_equals_baseline(self):
        assert progress_toward_target(10, 8, 10) == 0.0

    def test_target_within_epsilon(self):
        assert progress_toward_target(10, 8, 10.00005) == 0.0


class TestRelativeChange:
    def test_relative_to_baseline(self):
        assert relative_change_percent(90, 30) == pytest.approx(33.3333, abs=1e-3)

    def test_negative_baseline_keeps_sign(self):
        assert relative_change_percent(-10, 5) == pytest.approx(-50.0)

    def test_zero_baseline_is_none(self):
        assert relative_change_percent(0, 5) is None


class TestMcidRules:
    def test_directional_counts_only_improvement(self):
        assert directional_mcid_met(-3, 2, higher_is_better=False)
        assert not directional_mcid_met(3, 2, higher_is_better=False)

    def test_directional_is_inclusive(self):
        assert directional_mcid_met(2, 2, higher_is_better=True)

    def test_magnitude_ignores_direction(self):
        assert magnitude_mcid_met(-3, 2)
        assert magnitude_mcid_met(3, 2)
        assert magnitude_mcid_met(2, 2)
        assert not magnitude_mcid_met(1.5, 2)
