"""Reduce item responses to a single measure score."""

from __future__ import annotations

from typing import Optional, Sequence, assert_never

from rehab_outcomes.models.measures import MeasureDefinition, MeasurementResponse, ScoringMethodKind


def scoring_method_for(definition: MeasureDefinition) -> ScoringMethodKind:
    """Return the definition's scoring method, defaulting to ``sum``."""
    if definition.scoring_method is None:
        return ScoringMethodKind.SUM
    return definition.scoring_method.method


def calculate_score(responses: Sequence[MeasurementResponse], definition: MeasureDefinition) -> float:
    """Score a set of responses using the definition's scoring method.

    Order of responses is irrelevant; an empty list scores 0.0.
    """
    if not responses:
        return 0.0

    total = float(sum(r.value for r in responses))

    method = scoring_method_for(definition)
    match method:
        case ScoringMethodKind.SUM:
            return total
        case ScoringMethodKind.AVERAGE:
            return total / len(responses)
        case _:
            assert_never(method)


def calculate_percentage(score: float, definition: MeasureDefinition) -> Optional[float]:
    """Position of ``score`` within the definition's range, as 0-100.

    Undefined (None) when the range is degenerate.
    """
    score_range = definition.max_score - definition.min_score
    if score_range == 0:
        return None
    return (score - definition.min_score) / score_range * 100
