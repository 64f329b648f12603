"""Map a raw score to a bilingual severity band.

Scores are normalized to 0-100 within the measure's range, inverted for
lower-is-better measures, then banded:

  >= 75  minimal
  >= 50  mild
  >= 25  moderate
  <  25  severe
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Optional

from rehab_outcomes.models.measures import MeasureDefinition, MeasureInterpretation, Severity

# (lower bound, severity), checked top-down
_BANDS: tuple[tuple[float, Severity], ...] = (
    (75.0, Severity.MINIMAL),
    (50.0, Severity.MILD),
    (25.0, Severity.MODERATE),
)

_LABELS = MappingProxyType({
    Severity.MINIMAL: ("Toi thieu", "Minimal impairment", "Suy giam toi thieu"),
    Severity.MILD: ("Nhe", "Mild impairment", "Suy giam nhe"),
    Severity.MODERATE: ("Trung binh", "Moderate impairment", "Suy giam trung binh"),
    Severity.SEVERE: ("Nang", "Severe impairment", "Suy giam nang"),
})


def normalized_percentage(score: float, definition: MeasureDefinition) -> Optional[float]:
    """Score as 0-100 where higher always means less impairment."""
    score_range = definition.max_score - definition.min_score
    if score_range <= 0:
        return None
    pct = (score - definition.min_score) / score_range * 100
    if not definition.higher_is_better:
        pct = 100 - pct
    return pct


def severity_for(pct: float) -> Severity:
    for lower_bound, severity in _BANDS:
        if pct >= lower_bound:
            return severity
    return Severity.SEVERE


def interpret_score(score: float, definition: MeasureDefinition) -> Optional[MeasureInterpretation]:
    """Interpret ``score`` against the definition's bounds.

    Returns None when ``max_score == min_score``.
    """
    pct = normalized_percentage(score, definition)
    if pct is None:
        return None

    severity = severity_for(pct)
    severity_vi, description, description_vi = _LABELS[severity]
    return MeasureInterpretation(
        severity=severity,
        severity_vi=severity_vi,
        description=description,
        description_vi=description_vi,
    )
