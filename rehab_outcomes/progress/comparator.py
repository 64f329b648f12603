"""Type-agnostic re-evaluation comparator.

Applies the progress change/direction rules directly to caller-supplied
baseline/current pairs, so ROM degrees, MMT grades and questionnaire scores
can be compared in one batch without the measure library. MCID here is the
magnitude rule: ``|change| >= threshold``.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from rehab_outcomes.errors import NO_COMPARISON_ITEMS, ValidationError
from rehab_outcomes.models.measures import Trend
from rehab_outcomes.models.reevaluation import (
    ChangeInterpretation,
    ComparisonBatch,
    ComparisonItem,
    ComparisonItemRequest,
    CreateReevaluationRequest,
)
from rehab_outcomes.progress.change import (
    absolute_change,
    magnitude_mcid_met,
    relative_change_percent,
    trend_for_change,
)
from rehab_outcomes.timestamps import parse_optional_timestamp

_INTERPRETATIONS = {
    Trend.IMPROVED: ChangeInterpretation.IMPROVED,
    Trend.DECLINED: ChangeInterpretation.DECLINED,
    Trend.STABLE: ChangeInterpretation.STABLE,
}


def interpret_change(change: float, higher_is_better: bool) -> ChangeInterpretation:
    return _INTERPRETATIONS[trend_for_change(change, higher_is_better)]


def compare_values(
    baseline: float,
    current: float,
    higher_is_better: bool,
    mcid_threshold: Optional[float] = None,
) -> tuple[float, Optional[float], ChangeInterpretation, bool]:
    """Return (change, change %, interpretation, MCID achieved) for one pair."""
    change = absolute_change(baseline, current)
    change_pct = relative_change_percent(baseline, change)
    interpretation = interpret_change(change, higher_is_better)
    mcid_achieved = mcid_threshold is not None and magnitude_mcid_met(change, mcid_threshold)
    return change, change_pct, interpretation, mcid_achieved


def build_comparison_batch(
    request: CreateReevaluationRequest,
    clinic_id: str,
    therapist_id: str,
    batch_id: Optional[str] = None,
) -> ComparisonBatch:
    """Compute every comparison item and the batch's aggregate counts.

    Raises:
        ValidationError: if no items are supplied (``REEVALUATION_NO_ITEMS``) or
            ``assessed_at`` is not a valid RFC 3339 date-time. Both checks run
            before any item is computed.
    """
    if not request.assessments:
        raise ValidationError.from_definition(NO_COMPARISON_ITEMS)

    assessed_at = parse_optional_timestamp(request.assessed_at, "assessed_at")
    batch_id = batch_id or str(uuid.uuid4())

    counts = {interpretation: 0 for interpretation in ChangeInterpretation}
    mcid_count = 0
    items: list[ComparisonItem] = []

    for item in request.assessments:
        computed = _compute_item(item, request, batch_id, clinic_id, therapist_id, assessed_at)
        items.append(computed)
        counts[computed.interpretation] += 1
        if computed.mcid_achieved:
            mcid_count += 1

    return ComparisonBatch(
        batch_id=batch_id,
        patient_id=request.patient_id,
        clinic_id=clinic_id,
        therapist_id=therapist_id,
        visit_id=request.visit_id,
        assessed_at=assessed_at,
        comparisons=items,
        total_items=len(items),
        improved=counts[ChangeInterpretation.IMPROVED],
        declined=counts[ChangeInterpretation.DECLINED],
        stable=counts[ChangeInterpretation.STABLE],
        mcid_achieved=mcid_count,
    )


def _compute_item(
    item: ComparisonItemRequest,
    request: CreateReevaluationRequest,
    batch_id: str,
    clinic_id: str,
    therapist_id: str,
    assessed_at: datetime,
) -> ComparisonItem:
    change, change_pct, interpretation, mcid_achieved = compare_values(
        item.baseline_value, item.current_value, item.higher_is_better, item.mcid_threshold
    )
    return ComparisonItem(
        id=str(uuid.uuid4()),
        batch_id=batch_id,
        patient_id=request.patient_id,
        clinic_id=clinic_id,
        therapist_id=therapist_id,
        visit_id=request.visit_id,
        baseline_assessment_id=request.baseline_assessment_id,
        assessment_type=item.assessment_type,
        measure_label=item.measure_label,
        current_value=item.current_value,
        baseline_value=item.baseline_value,
        change=change,
        change_percentage=change_pct,
        higher_is_better=item.higher_is_better,
        mcid_threshold=item.mcid_threshold,
        mcid_achieved=mcid_achieved,
        interpretation=interpretation,
        notes=request.notes,
        assessed_at=assessed_at,
    )
