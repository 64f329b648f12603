"""Tests for longitudinal progress and trending."""

import pytest

from rehab_outcomes.errors import NotFoundError
from rehab_outcomes.models.measures import MeasureType, Trend
from rehab_outcomes.progress.calculator import build_trending, calculate_progress, history_trend


class TestCalculateProgress:
    def test_improvement_toward_max(self, function_definition, make_measurement):
        history = [
            make_measurement(5, days=0, definition=function_definition),
            make_measurement(7, days=14, definition=function_definition),
        ]
        result = calculate_progress("patient-1", MeasureType.CUSTOM, history, function_definition)

        assert result.baseline_score == 5
        assert result.current_score == 7
        assert result.previous_score == 5
        assert result.change == 2
        assert result.change_percent == pytest.approx(40.0)
        assert result.trend == Trend.IMPROVED
        assert result.mcid_achieved is True
        assert result.total_measurements == 2
        assert result.library_id == "lib-func"

    def test_regression(self, function_definition, make_measurement):
        history = [
            make_measurement(7, days=0, definition=function_definition),
            make_measurement(5, days=14, definition=function_definition),
        ]
        result = calculate_progress("patient-1", MeasureType.CUSTOM, history, function_definition)

        assert result.change == -2
        assert result.change_percent == pytest.approx(-66.6667, abs=1e-3)
        assert result.trend == Trend.DECLINED
        assert result.mcid_achieved is False

    def test_lower_is_better_progress(self, vas_definition, make_measurement):
        history = [
            make_measurement(8, days=0),
            make_measurement(6, days=14),
            make_measurement(4, days=28),
        ]
        result = calculate_progress("patient-1", MeasureType.VAS, history, vas_definition)

        assert result.change == -4
        assert result.change_percent == pytest.approx(50.0)
        assert result.previous_score == 6
        assert result.trend == Trend.IMPROVED
        assert result.mcid_achieved is True

    def test_mcid_boundary_is_inclusive(self, vas_definition, make_measurement):
        history = [make_measurement(6, days=0), make_measurement(4, days=14)]
        result = calculate_progress("patient-1", MeasureType.VAS, history, vas_definition)
        assert result.mcid_achieved is True

    def test_worsening_past_mcid_is_not_achieved(self, vas_definition, make_measurement):
        history = [make_measurement(3, days=0), make_measurement(7, days=14)]
        result = calculate_progress("patient-1", MeasureType.VAS, history, vas_definition)
        assert result.mcid_achieved is False
        assert result.trend == Trend.DECLINED

    def test_baseline_at_target(self, vas_definition, make_measurement):
        history = [make_measurement(0, days=0), make_measurement(3, days=14)]
        result = calculate_progress("patient-1", MeasureType.VAS, history, vas_definition)
        assert result.change_percent == 0.0

    def test_single_measurement(self, vas_definition, make_measurement):
        result = calculate_progress("patient-1", MeasureType.VAS, [make_measurement(6)], vas_definition)

        assert result.trend == Trend.INSUFFICIENT_DATA
        assert result.previous_score is None
        assert result.change == 0
        assert result.total_measurements == 1

    def test_no_mcid_leaves_flag_unset(self, vas_definition, make_measurement):
        vas_definition.mcid = None
        history = [make_measurement(8, days=0), make_measurement(2, days=14)]
        result = calculate_progress("patient-1", MeasureType.VAS, history, vas_definition)
        assert result.mcid_achieved is None

    def test_empty_history(self, vas_definition):
        with pytest.raises(NotFoundError):
            calculate_progress("patient-1", MeasureType.VAS, [], vas_definition)

    def test_unchanged_is_stable(self, vas_definition, make_measurement):
        history = [make_measurement(5, days=0), make_measurement(5, days=14)]
        assert history_trend(history, higher_is_better=False) == Trend.STABLE


class TestBuildTrending:
    def test_series(self, vas_definition, make_measurement):
        history = [make_measurement(8, days=0), make_measurement(5, days=14)]
        data = build_trending("patient-1", MeasureType.VAS, history, vas_definition, goal=2)

        assert [p.score for p in data.data_points] == [8, 5]
        assert data.baseline == 8
        assert data.goal == 2
        assert data.mcid == 2
        assert data.measure_name == "Visual Analog Scale"
        assert data.trend == Trend.IMPROVED

    def test_empty_history(self, vas_definition):
        with pytest.raises(NotFoundError):
            build_trending("patient-1", MeasureType.VAS, [], vas_definition)
