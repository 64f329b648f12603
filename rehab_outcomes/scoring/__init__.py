"""Scoring: score calculation, validation, and interpretation."""

from rehab_outcomes.scoring.calculator import calculate_percentage, calculate_score
from rehab_outcomes.scoring.interpretation import interpret_score
from rehab_outcomes.scoring.validation import (
    BODY_REGIONS,
    MCID_THRESHOLDS,
    SCORE_RANGES,
    check_body_region,
    check_reassessment_interval,
    is_measure_compatible_with_region,
    validate_score_for_definition,
    validate_score_range,
)

__all__ = [
    "calculate_percentage",
    "calculate_score",
    "interpret_score",
    "BODY_REGIONS",
    "MCID_THRESHOLDS",
    "SCORE_RANGES",
    "check_body_region",
    "check_reassessment_interval",
    "is_measure_compatible_with_region",
    "validate_score_for_definition",
    "validate_score_range",
]
