"""Change and threshold primitives shared by progress and re-evaluation.

Both callers use the same sign rule for direction: a positive change is an
improvement when higher is better, a negative change is an improvement when
lower is better. They differ on MCID: progress uses the
directional rule, re-evaluation the magnitude rule.
"""

from __future__ import annotations

from typing import Optional

from rehab_outcomes.models.measures import Trend

# Target and baseline closer than this are treated as equal.
TARGET_EPSILON = 1e-4


def absolute_change(baseline: float, current: float) -> float:
    return current - baseline


def improvement(change: float, higher_is_better: bool) -> float:
    """Signed change where positive always means clinical improvement."""
    return change if higher_is_better else -change


def trend_for_change(change: float, higher_is_better: bool) -> Trend:
    """Classify a change as improved, declined, or stable (exactly zero)."""
    signed = improvement(change, higher_is_better)
    if signed > 0:
        return Trend.IMPROVED
    if signed < 0:
        return Trend.DECLINED
    return Trend.STABLE


def progress_toward_target(baseline: float, current: float, target: float) -> float:
    """Percent of the baseline-to-target distance covered.

    Not clamped: values above 100 mean the target was surpassed, negative
    values mean regression. Zero when the target equals the baseline.
    """
    denominator = target - baseline
    if abs(denominator) < TARGET_EPSILON:
        return 0.0
    return absolute_change(baseline, current) / denominator * 100


def relative_change_percent(baseline: float, change: float) -> Optional[float]:
    """Change as a percentage of the baseline value; None for a zero baseline."""
    if baseline == 0:
        return None
    return change / baseline * 100


def directional_mcid_met(change: float, mcid: float, higher_is_better: bool) -> bool:
    """Whether the improvement (not just the magnitude) reaches ``mcid``."""
    return improvement(change, higher_is_better) >= mcid


def magnitude_mcid_met(change: float, mcid: float) -> bool:
    """Whether ``|change|`` reaches ``mcid``, regardless of direction."""
    return abs(change) >= mcid
