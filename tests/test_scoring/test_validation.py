"""Tests for score, region, interval, and assessment value validation."""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from rehab_outcomes.errors import ReassessmentTooSoonError, ValidationError
from rehab_outcomes.models.measures import MeasureType
from rehab_outcomes.models.reevaluation import ROMJoint
from rehab_outcomes.scoring.validation import (
    BODY_REGIONS,
    MCID_THRESHOLDS,
    SCORE_RANGES,
    check_body_region,
    check_reassessment_interval,
    is_measure_compatible_with_region,
    validate_mcid_threshold,
    validate_measure_type_for_condition,
    validate_mmt_grade,
    validate_rom_degrees,
    validate_score_for_definition,
    validate_score_range,
)

T0 = datetime(2024, 1, 1, 8, 30, tzinfo=timezone.utc)


class TestScoreRange:
    @pytest.mark.parametrize(
        "measure_type,score",
        [
            (MeasureType.VAS, 0),
            (MeasureType.VAS, 10),
            (MeasureType.NDI, 100),
            (MeasureType.LEFS, 80),
            (MeasureType.WOMAC, 96),
            (MeasureType.BBS, 56),
            (MeasureType.FIM, 18),
            (MeasureType.FIM, 126),
            (MeasureType.MMT, 5),
        ],
    )
    def test_bounds_are_inclusive(self, measure_type, score):
        validate_score_range(measure_type, score)

    @pytest.mark.parametrize(
        "measure_type,score",
        [
            (MeasureType.VAS, 11),
            (MeasureType.NRS, -1),
            (MeasureType.ODI, 100.5),
            (MeasureType.LEFS, 81),
            (MeasureType.BBS, 57),
            (MeasureType.FIM, 17),
        ],
    )
    def test_out_of_range_rejected(self, measure_type, score):
        with pytest.raises(ValidationError) as exc_info:
            validate_score_range(measure_type, score)
        assert exc_info.value.code == "OUTCOME_INVALID_SCORE_RANGE"

    def test_message_cites_bounds(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_score_range(MeasureType.VAS, 11)
        assert "[0, 10]" in exc_info.value.message
        assert "[0, 10]" in exc_info.value.message_vi

    @pytest.mark.parametrize("measure_type", [MeasureType.CUSTOM, MeasureType.TUG, MeasureType.ROM])
    def test_unbounded_types_pass(self, measure_type):
        validate_score_range(measure_type, 9999)

    def test_definition_bounds_also_apply(self, function_definition):
        with pytest.raises(ValidationError):
            validate_score_for_definition(10.5, function_definition)

    def test_published_range_applies_to_custom_bounds(self, vas_definition):
        vas_definition.max_score = 20
        with pytest.raises(ValidationError):
            validate_score_for_definition(15, vas_definition)

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            SCORE_RANGES[MeasureType.VAS] = None
        with pytest.raises(TypeError):
            MCID_THRESHOLDS[MeasureType.VAS] = 1.0

    def test_to_dict(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_score_range(MeasureType.VAS, 11)
        payload = exc_info.value.to_dict()
        assert set(payload) == {"code", "message", "message_vi"}


class TestBodyRegion:
    def test_global_definition_always_compatible(self, vas_definition):
        assert is_measure_compatible_with_region(vas_definition, "knee")

    def test_empty_region_compatible(self, ndi_definition):
        assert is_measure_compatible_with_region(ndi_definition, None)
        assert is_measure_compatible_with_region(ndi_definition, "")

    def test_match_is_exact(self, ndi_definition):
        assert is_measure_compatible_with_region(ndi_definition, "neck")
        assert not is_measure_compatible_with_region(ndi_definition, "Neck")
        assert not is_measure_compatible_with_region(ndi_definition, "knee")

    def test_mismatch_warns_but_does_not_raise(self, ndi_definition, caplog):
        with caplog.at_level(logging.WARNING, logger="rehab_outcomes.scoring.validation"):
            assert check_body_region(ndi_definition, "knee") is False
        assert "knee" in caplog.text

    def test_match_does_not_warn(self, ndi_definition, caplog):
        with caplog.at_level(logging.WARNING, logger="rehab_outcomes.scoring.validation"):
            assert check_body_region(ndi_definition, "cervical_spine") is True
        assert caplog.records == []

    def test_static_table(self):
        assert BODY_REGIONS[MeasureType.KOOS] == frozenset({"knee"})
        assert MeasureType.VAS not in BODY_REGIONS
        assert validate_measure_type_for_condition(MeasureType.ODI, "lower_back")
        assert not validate_measure_type_for_condition(MeasureType.ODI, "knee")
        assert validate_measure_type_for_condition(MeasureType.VAS, "knee")


class TestReassessmentInterval:
    def test_no_previous_measurement(self):
        check_reassessment_interval(None, T0)

    def test_exactly_min_days_accepted(self):
        check_reassessment_interval(T0, T0 + timedelta(days=14))

    def test_thirteen_days_rejected(self):
        with pytest.raises(ReassessmentTooSoonError) as exc_info:
            check_reassessment_interval(T0, T0 + timedelta(days=13))
        err = exc_info.value
        assert err.code == "OUTCOME_REASSESSMENT_TOO_SOON"
        assert err.previous_measured_at == T0
        assert err.min_days == 14
        assert "2024-01-01" in err.message

    def test_one_second_short_rejected(self):
        with pytest.raises(ReassessmentTooSoonError):
            check_reassessment_interval(T0, T0 + timedelta(days=14) - timedelta(seconds=1))

    def test_backdated_entry_held_to_same_rule(self):
        with pytest.raises(ReassessmentTooSoonError):
            check_reassessment_interval(T0, T0 - timedelta(days=3))

    def test_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            check_reassessment_interval(T0, T0)

    def test_custom_minimum(self):
        check_reassessment_interval(T0, T0 + timedelta(days=7), min_days=7)
        check_reassessment_interval(T0, T0, min_days=0)


class TestMcidThreshold:
    def test_table_values(self):
        assert dict(MCID_THRESHOLDS) == {
            MeasureType.VAS: 2,
            MeasureType.NRS: 2,
            MeasureType.NDI: 10,
            MeasureType.ODI: 10,
            MeasureType.DASH: 10,
            MeasureType.LEFS: 9,
            MeasureType.KOOS: 8,
            MeasureType.BBS: 4,
        }

    def test_koos(self):
        assert validate_mcid_threshold(MeasureType.KOOS, 9)
        assert validate_mcid_threshold(MeasureType.KOOS, -8)
        assert not validate_mcid_threshold(MeasureType.KOOS, 7.5)

    @pytest.mark.parametrize("measure_type", [MeasureType.TUG, MeasureType.WOMAC, MeasureType.CUSTOM])
    def test_types_without_published_mcid(self, measure_type):
        assert measure_type not in MCID_THRESHOLDS

    def test_magnitude_either_direction(self):
        assert validate_mcid_threshold(MeasureType.VAS, -2)
        assert validate_mcid_threshold(MeasureType.VAS, 2)
        assert not validate_mcid_threshold(MeasureType.VAS, 1.9)

    def test_unknown_type_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_mcid_threshold(MeasureType.CUSTOM, 5)
        assert exc_info.value.code == "OUTCOME_UNKNOWN_MCID"


class TestAssessmentValues:
    def test_rom_within_range(self):
        validate_rom_degrees(ROMJoint.KNEE, 150)
        validate_rom_degrees(ROMJoint.ANKLE, 0)

    def test_rom_out_of_range(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_rom_degrees(ROMJoint.KNEE, 151)
        assert exc_info.value.code == "ASSESSMENT_ROM_OUT_OF_RANGE"
        with pytest.raises(ValidationError):
            validate_rom_degrees(ROMJoint.SHOULDER, -1)

    @pytest.mark.parametrize("grade", [0, 2.5, 3.5, 5])
    def test_valid_mmt_grades(self, grade):
        validate_mmt_grade(grade)

    @pytest.mark.parametrize("grade", [-0.5, 3.3, 5.5])
    def test_invalid_mmt_grades(self, grade):
        with pytest.raises(ValidationError) as exc_info:
            validate_mmt_grade(grade)
        assert exc_info.value.code == "ASSESSMENT_INVALID_MMT_GRADE"
