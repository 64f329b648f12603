"""Collaborator interfaces consumed by the outcome services.

Storage lives outside this package. Any object satisfying these protocols can
be injected; ``rehab_outcomes.core.repository`` provides SQLAlchemy-backed
implementations.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from rehab_outcomes.models.measures import MeasureDefinition, Measurement, MeasureType
from rehab_outcomes.models.reevaluation import ComparisonItem


class MeasureLibrary(Protocol):
    async def get_definition_by_id(self, definition_id: str) -> Optional[MeasureDefinition]:
        """Return the definition, or None if it does not exist."""
        ...

    async def list_definitions(self) -> Sequence[MeasureDefinition]:
        ...


class MeasurementStore(Protocol):
    async def get_history(self, patient_id: str, measure_type: MeasureType) -> Sequence[Measurement]:
        """All measurements for the pair, ordered by ``measured_at`` ascending."""
        ...

    async def get_last_measurement(self, patient_id: str, measure_type: MeasureType) -> Optional[Measurement]:
        ...

    async def get_by_id(self, measurement_id: str) -> Optional[Measurement]:
        ...

    async def list_by_patient(self, patient_id: str) -> Sequence[Measurement]:
        ...

    async def create(self, measurement: Measurement) -> None:
        ...

    async def update(self, measurement: Measurement) -> None:
        ...

    async def delete(self, measurement_id: str) -> None:
        ...


class ReevaluationStore(Protocol):
    async def create_batch(self, items: Sequence[ComparisonItem]) -> None:
        """Persist every item or none of them."""
        ...

    async def list_by_patient(self, patient_id: str) -> Sequence[ComparisonItem]:
        ...

    async def get_batch(self, batch_id: str) -> Sequence[ComparisonItem]:
        ...
