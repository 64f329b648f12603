"""Score, region, and re-assessment validation for outcome measures.

Range checks and the re-assessment interval are hard rejections. Body-region
compatibility is advisory: a mismatch is logged and reported but never
blocks a measurement.

The static tables below are built once at import and exposed read-only.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional, assert_never

from rehab_outcomes.errors import (
    INVALID_MMT_GRADE,
    INVALID_SCORE_RANGE,
    ROM_OUT_OF_RANGE,
    UNKNOWN_MCID,
    ReassessmentTooSoonError,
    ValidationError,
)
from rehab_outcomes.models.measures import MeasureDefinition, MeasureType
from rehab_outcomes.models.reevaluation import ROMJoint
from rehab_outcomes.timestamps import ensure_aware

logger = logging.getLogger(__name__)

DEFAULT_MIN_REASSESSMENT_DAYS = 14

VALID_MMT_GRADES = frozenset({0.0, 0.5, 1.0, 1.5, 2.0, 2.5, 3.0, 3.5, 4.0, 4.5, 5.0})


class ScoreRange(NamedTuple):
    minimum: float
    maximum: float

    def contains(self, score: float) -> bool:
        return self.minimum <= score <= self.maximum


def _static_score_range(measure_type: MeasureType) -> Optional[ScoreRange]:
    """Published score range per measure type; None means unbounded."""
    match measure_type:
        case MeasureType.VAS | MeasureType.NRS:
            return ScoreRange(0, 10)
        case MeasureType.NDI | MeasureType.ODI | MeasureType.DASH:
            return ScoreRange(0, 100)
        case MeasureType.LEFS:
            return ScoreRange(0, 80)
        case MeasureType.KOOS | MeasureType.SF36:
            return ScoreRange(0, 100)
        case MeasureType.WOMAC:
            return ScoreRange(0, 96)
        case MeasureType.BBS:
            return ScoreRange(0, 56)
        case MeasureType.FIM:
            return ScoreRange(18, 126)
        case MeasureType.MMT:
            return ScoreRange(0, 5)
        # TUG is timed; ROM is joint-specific; custom is clinic-defined.
        case MeasureType.TUG | MeasureType.ROM | MeasureType.CUSTOM:
            return None
        case _:
            assert_never(measure_type)


def _static_mcid(measure_type: MeasureType) -> Optional[float]:
    match measure_type:
        case MeasureType.VAS | MeasureType.NRS:
            return 2.0
        case MeasureType.NDI | MeasureType.ODI | MeasureType.DASH:
            return 10.0
        case MeasureType.LEFS:
            return 9.0
        case MeasureType.KOOS:
            return 8.0
        case MeasureType.BBS:
            return 4.0
        case (
            MeasureType.TUG
            | MeasureType.WOMAC
            | MeasureType.SF36
            | MeasureType.FIM
            | MeasureType.MMT
            | MeasureType.ROM
            | MeasureType.CUSTOM
        ):
            return None
        case _:
            assert_never(measure_type)


def _static_body_regions(measure_type: MeasureType) -> Optional[frozenset[str]]:
    match measure_type:
        case MeasureType.NDI:
            return frozenset({"cervical_spine", "neck"})
        case MeasureType.ODI:
            return frozenset({"lumbar_spine", "lower_back"})
        case MeasureType.DASH:
            return frozenset({"shoulder", "elbow", "wrist", "hand"})
        case MeasureType.LEFS:
            return frozenset({"hip", "knee", "ankle", "foot"})
        case MeasureType.KOOS:
            return frozenset({"knee"})
        case MeasureType.WOMAC:
            return frozenset({"hip", "knee"})
        case (
            MeasureType.VAS
            | MeasureType.NRS
            | MeasureType.SF36
            | MeasureType.BBS
            | MeasureType.TUG
            | MeasureType.FIM
            | MeasureType.MMT
            | MeasureType.ROM
            | MeasureType.CUSTOM
        ):
            return None
        case _:
            assert_never(measure_type)


def _build_table(resolve) -> Mapping:
    table = {}
    for measure_type in MeasureType:
        value = resolve(measure_type)
        if value is not None:
            table[measure_type] = value
    return MappingProxyType(table)


SCORE_RANGES: Mapping[MeasureType, ScoreRange] = _build_table(_static_score_range)
MCID_THRESHOLDS: Mapping[MeasureType, float] = _build_table(_static_mcid)
BODY_REGIONS: Mapping[MeasureType, frozenset[str]] = _build_table(_static_body_regions)

ROM_JOINT_MAX_DEGREES: Mapping[ROMJoint, float] = MappingProxyType({
    ROMJoint.SHOULDER: 200,
    ROMJoint.ELBOW: 160,
    ROMJoint.WRIST: 100,
    ROMJoint.HIP: 140,
    ROMJoint.KNEE: 150,
    ROMJoint.ANKLE: 70,
    ROMJoint.CERVICAL_SPINE: 100,
    ROMJoint.THORACIC_SPINE: 60,
    ROMJoint.LUMBAR_SPINE: 80,
})


# ------------------------------------------------------------------
# Score range
# ------------------------------------------------------------------


def _check_range(score: float, score_range: ScoreRange) -> None:
    if not score_range.contains(score):
        raise ValidationError.from_definition(
            INVALID_SCORE_RANGE,
            score=score,
            minimum=score_range.minimum,
            maximum=score_range.maximum,
        )


def validate_score_range(measure_type: MeasureType, score: float) -> None:
    """Check ``score`` against the published range for ``measure_type``.

    Types without a published range (custom, timed, joint-specific) pass.

    Raises:
        ValidationError: ``OUTCOME_INVALID_SCORE_RANGE`` citing the bounds.
    """
    score_range = SCORE_RANGES.get(measure_type)
    if score_range is None:
        return
    _check_range(score, score_range)


def validate_score_for_definition(score: float, definition: MeasureDefinition) -> None:
    """Check ``score`` against both the published range and the definition's own bounds."""
    validate_score_range(definition.measure_type, score)
    _check_range(score, ScoreRange(definition.min_score, definition.max_score))


# ------------------------------------------------------------------
# Body region (advisory)
# ------------------------------------------------------------------


def is_measure_compatible_with_region(
    definition: MeasureDefinition, body_region: Optional[str]
) -> bool:
    """Whether the definition applies to ``body_region``.

    Global definitions and an empty region are always compatible. Matching is
    exact (no case folding).
    """
    if definition.is_global or not body_region:
        return True
    return body_region in definition.body_regions


def validate_measure_type_for_condition(measure_type: MeasureType, body_region: Optional[str]) -> bool:
    """Same rule as :func:`is_measure_compatible_with_region`, using the static region table."""
    regions = BODY_REGIONS.get(measure_type)
    if not regions or not body_region:
        return True
    return body_region in regions


def check_body_region(definition: MeasureDefinition, body_region: Optional[str]) -> bool:
    """Log a warning on region mismatch. Never raises."""
    compatible = is_measure_compatible_with_region(definition, body_region)
    if not compatible:
        logger.warning(
            "Measure %s (%s) is not indicated for body region %r (applies to: %s)",
            definition.id,
            definition.measure_type.value,
            body_region,
            ", ".join(sorted(definition.body_regions or ())),
        )
    return compatible


# ------------------------------------------------------------------
# Re-assessment interval
# ------------------------------------------------------------------


def check_reassessment_interval(
    previous_measured_at: Optional[datetime],
    new_measured_at: datetime,
    min_days: int = DEFAULT_MIN_REASSESSMENT_DAYS,
) -> None:
    """Require at least ``min_days`` between measurements of the same type.

    The boundary is inclusive: exactly ``min_days`` apart is accepted. The gap
    is measured in either direction, so a back-dated entry is held to the
    same rule.

    Raises:
        ReassessmentTooSoonError: naming the previous measurement date.
    """
    if previous_measured_at is None:
        return
    gap = abs(ensure_aware(new_measured_at) - ensure_aware(previous_measured_at))
    if gap < timedelta(days=min_days):
        raise ReassessmentTooSoonError(previous_measured_at, min_days)


# ------------------------------------------------------------------
# MCID lookup and assessment values
# ------------------------------------------------------------------


def validate_mcid_threshold(measure_type: MeasureType, change: float) -> bool:
    """Whether ``|change|`` meets the published MCID for ``measure_type``.

    Raises:
        ValidationError: if no MCID is published for the type.
    """
    threshold = MCID_THRESHOLDS.get(measure_type)
    if threshold is None:
        raise ValidationError.from_definition(UNKNOWN_MCID, measure_type=measure_type.value)
    return abs(change) >= threshold


def validate_rom_degrees(joint: ROMJoint, degrees: float) -> None:
    maximum = ROM_JOINT_MAX_DEGREES[joint]
    if degrees < 0 or degrees > maximum:
        raise ValidationError.from_definition(
            ROM_OUT_OF_RANGE, degrees=degrees, maximum=maximum, joint=joint.value
        )


def validate_mmt_grade(grade: float) -> None:
    """MMT grades run 0-5 in half-grade steps (3.5 == 3+)."""
    if grade not in VALID_MMT_GRADES:
        raise ValidationError.from_definition(INVALID_MMT_GRADE, grade=grade)
