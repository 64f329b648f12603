"""Longitudinal progress for one patient on one measure type.

Given the full history ordered by ``measured_at`` ascending:

  baseline   = first score
  current    = last score
  previous   = second-to-last score (if >= 2 measurements)
  target     = max_score if higher_is_better else min_score
  change     = current - baseline
  change %   = change / (target - baseline) * 100   (0 when target == baseline)

Results are computed fresh on every call; nothing is cached.
"""

from __future__ import annotations

from typing import Optional, Sequence

from rehab_outcomes.errors import NotFoundError
from rehab_outcomes.models.measures import (
    MeasureDefinition,
    Measurement,
    MeasureType,
    ProgressResult,
    Trend,
    TrendDataPoint,
    TrendingData,
)
from rehab_outcomes.progress.change import (
    absolute_change,
    directional_mcid_met,
    progress_toward_target,
    trend_for_change,
)


def _require_history(patient_id: str, measure_type: MeasureType, history: Sequence[Measurement]) -> None:
    if not history:
        raise NotFoundError("measurement history", f"patient {patient_id}, measure type {measure_type.value}")


def history_trend(history: Sequence[Measurement], higher_is_better: bool) -> Trend:
    if len(history) < 2:
        return Trend.INSUFFICIENT_DATA
    change = absolute_change(history[0].score, history[-1].score)
    return trend_for_change(change, higher_is_better)


def calculate_progress(
    patient_id: str,
    measure_type: MeasureType,
    history: Sequence[Measurement],
    definition: MeasureDefinition,
) -> ProgressResult:
    """Compute baseline/current change, target progress, MCID, and trend.

    Args:
        patient_id: Patient the history belongs to.
        measure_type: Measure type of every entry in ``history``.
        history: All measurements, ordered by ``measured_at`` ascending.
        definition: Library definition supplying bounds, direction and MCID.

    Raises:
        NotFoundError: if ``history`` is empty.
    """
    _require_history(patient_id, measure_type, history)

    baseline = history[0].score
    current = history[-1].score
    previous: Optional[float] = history[-2].score if len(history) >= 2 else None

    change = absolute_change(baseline, current)
    change_percent = progress_toward_target(baseline, current, definition.target_score)

    mcid_achieved: Optional[bool] = None
    if definition.mcid is not None:
        mcid_achieved = directional_mcid_met(change, definition.mcid, definition.higher_is_better)

    return ProgressResult(
        patient_id=patient_id,
        measure_type=measure_type,
        library_id=definition.id,
        current_score=current,
        baseline_score=baseline,
        previous_score=previous,
        change=change,
        change_percent=change_percent,
        mcid_achieved=mcid_achieved,
        trend=history_trend(history, definition.higher_is_better),
        total_measurements=len(history),
    )


def build_trending(
    patient_id: str,
    measure_type: MeasureType,
    history: Sequence[Measurement],
    definition: MeasureDefinition,
    goal: Optional[float] = None,
) -> TrendingData:
    """Chartable series of every measurement with baseline, MCID and trend."""
    _require_history(patient_id, measure_type, history)

    return TrendingData(
        patient_id=patient_id,
        measure_type=measure_type,
        library_id=definition.id,
        measure_name=definition.name,
        measure_name_vi=definition.name_vi,
        data_points=[
            TrendDataPoint(
                score=m.score,
                percentage=m.percentage,
                measured_at=m.measured_at,
                session_id=m.session_id,
                notes=m.notes,
            )
            for m in history
        ],
        baseline=history[0].score,
        goal=goal,
        mcid=definition.mcid,
        trend=history_trend(history, definition.higher_is_better),
    )
