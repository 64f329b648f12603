"""Service layer: orchestration over injected storage collaborators."""

from rehab_outcomes.services.interfaces import MeasureLibrary, MeasurementStore, ReevaluationStore
from rehab_outcomes.services.outcome_measures import OutcomeMeasuresService, derive_measurement_fields
from rehab_outcomes.services.reevaluation import ReevaluationService

__all__ = [
    "MeasureLibrary",
    "MeasurementStore",
    "ReevaluationStore",
    "OutcomeMeasuresService",
    "derive_measurement_fields",
    "ReevaluationService",
]
