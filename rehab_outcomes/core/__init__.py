"""SQLAlchemy storage adapter for the outcome services."""

from rehab_outcomes.core.repository import (
    MeasureLibraryRepository,
    MeasurementRepository,
    ReevaluationRepository,
)

__all__ = [
    "MeasureLibraryRepository",
    "MeasurementRepository",
    "ReevaluationRepository",
]
