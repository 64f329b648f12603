"""Progress tracking and re-evaluation comparison."""

from rehab_outcomes.progress.calculator import build_trending, calculate_progress
from rehab_outcomes.progress.comparator import build_comparison_batch, compare_values

__all__ = [
    "build_trending",
    "calculate_progress",
    "build_comparison_batch",
    "compare_values",
]
