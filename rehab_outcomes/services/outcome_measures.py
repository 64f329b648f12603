"""Outcome measure recording and progress orchestration.

Each operation receives its collaborators at construction and keeps no state
between calls. Derived fields (score, percentage, interpretation) are always
recomputed together from the stored responses and the library definition.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import NamedTuple, Optional, Sequence

from rehab_outcomes.config import get_settings
from rehab_outcomes.errors import NotFoundError, OwnershipError
from rehab_outcomes.models.measures import (
    CreateMeasurementRequest,
    MeasureDefinition,
    MeasureInterpretation,
    Measurement,
    MeasurementResponse,
    MeasureType,
    ProgressResult,
    TrendingData,
    UpdateMeasurementRequest,
)
from rehab_outcomes.progress.calculator import build_trending, calculate_progress
from rehab_outcomes.scoring.calculator import calculate_percentage, calculate_score
from rehab_outcomes.scoring.interpretation import interpret_score
from rehab_outcomes.scoring.validation import (
    check_body_region,
    check_reassessment_interval,
    validate_score_for_definition,
)
from rehab_outcomes.services.interfaces import MeasureLibrary, MeasurementStore
from rehab_outcomes.timestamps import parse_optional_timestamp, parse_timestamp, utcnow

logger = logging.getLogger(__name__)


class DerivedFields(NamedTuple):
    score: float
    percentage: Optional[float]
    interpretation: Optional[MeasureInterpretation]


def derive_measurement_fields(
    responses: Sequence[MeasurementResponse], definition: MeasureDefinition
) -> DerivedFields:
    """Score, validate, and interpret a response set in one step.

    Raises:
        ValidationError: if the score falls outside either range.
    """
    score = calculate_score(responses, definition)
    validate_score_for_definition(score, definition)
    return DerivedFields(
        score=score,
        percentage=calculate_percentage(score, definition),
        interpretation=interpret_score(score, definition),
    )


class OutcomeMeasuresService:
    """Records outcome measures and derives progress from their history."""

    def __init__(
        self,
        library: MeasureLibrary,
        store: MeasurementStore,
        min_reassessment_days: Optional[int] = None,
    ) -> None:
        self.library = library
        self.store = store
        if min_reassessment_days is None:
            min_reassessment_days = get_settings().min_reassessment_days
        self.min_reassessment_days = min_reassessment_days

    async def _get_definition(self, definition_id: str) -> MeasureDefinition:
        definition = await self.library.get_definition_by_id(definition_id)
        if definition is None:
            raise NotFoundError("measure definition", definition_id)
        return definition

    async def _get_owned_measurement(
        self, measure_id: str, patient_id: str, clinic_id: Optional[str] = None
    ) -> Measurement:
        measurement = await self.store.get_by_id(measure_id)
        if measurement is None:
            raise NotFoundError("measurement", measure_id)
        if measurement.patient_id != patient_id:
            raise OwnershipError(measure_id, "patient", patient_id)
        if clinic_id is not None and measurement.clinic_id != clinic_id:
            raise OwnershipError(measure_id, "clinic", clinic_id)
        return measurement

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    async def record_measure(
        self,
        clinic_id: str,
        therapist_id: str,
        request: CreateMeasurementRequest,
        body_region: Optional[str] = None,
    ) -> Measurement:
        """Score, validate, interpret, and persist a new measurement.

        Args:
            clinic_id: Clinic recording the measurement.
            therapist_id: Recording clinician.
            request: Responses and metadata.
            body_region: Patient's treated region, for the advisory
                applicability check.

        Raises:
            NotFoundError: unknown library definition.
            ValidationError: malformed ``measured_at`` or score out of range.
            ReassessmentTooSoonError: previous measurement of the same type is
                too recent.
        """
        definition = await self._get_definition(request.library_id)
        measured_at = parse_optional_timestamp(request.measured_at, "measured_at")

        derived = derive_measurement_fields(request.responses, definition)
        check_body_region(definition, body_region)

        last = await self.store.get_last_measurement(request.patient_id, definition.measure_type)
        check_reassessment_interval(
            last.measured_at if last else None, measured_at, self.min_reassessment_days
        )
        if last is not None and measured_at < last.measured_at:
            # Back-dated: any existing entry may be the nearest neighbour.
            await self._check_interval_against_history(request.patient_id, definition.measure_type, measured_at)

        now = utcnow()
        measurement = Measurement(
            id=str(uuid.uuid4()),
            patient_id=request.patient_id,
            clinic_id=clinic_id,
            therapist_id=therapist_id,
            library_id=definition.id,
            measure_type=definition.measure_type,
            session_id=request.session_id,
            score=derived.score,
            max_possible=definition.max_score,
            percentage=derived.percentage,
            interpretation=derived.interpretation,
            responses=list(request.responses),
            notes=request.notes,
            measured_at=measured_at,
            created_at=now,
            updated_at=now,
            created_by=therapist_id,
            updated_by=therapist_id,
        )
        await self.store.create(measurement)

        logger.info(
            "Outcome measure recorded: id=%s patient=%s type=%s score=%.2f therapist=%s",
            measurement.id,
            measurement.patient_id,
            measurement.measure_type.value,
            measurement.score,
            therapist_id,
        )
        return measurement

    async def update_measure(
        self,
        clinic_id: str,
        therapist_id: str,
        request: UpdateMeasurementRequest,
    ) -> Measurement:
        """Edit responses, notes, or ``measured_at`` and recompute derived fields.

        Raises:
            NotFoundError: unknown measurement or definition.
            OwnershipError: measurement belongs to another patient or clinic.
            ValidationError: malformed ``measured_at`` or score out of range.
        """
        existing = await self._get_owned_measurement(request.measure_id, request.patient_id, clinic_id)

        measured_at = existing.measured_at
        if request.measured_at is not None:
            measured_at = parse_timestamp(request.measured_at, "measured_at")

        definition = await self._get_definition(existing.library_id)
        responses = request.responses if request.responses is not None else existing.responses
        derived = derive_measurement_fields(responses, definition)

        if measured_at != existing.measured_at:
            await self._check_interval_against_history(
                existing.patient_id, existing.measure_type, measured_at, exclude_id=existing.id
            )

        updated = existing.model_copy(
            update={
                "responses": list(responses),
                "score": derived.score,
                "max_possible": definition.max_score,
                "percentage": derived.percentage,
                "interpretation": derived.interpretation,
                "notes": request.notes if request.notes is not None else existing.notes,
                "measured_at": measured_at,
                "updated_at": utcnow(),
                "updated_by": therapist_id,
            }
        )
        await self.store.update(updated)

        logger.info(
            "Outcome measure updated: id=%s patient=%s score=%.2f therapist=%s",
            updated.id,
            updated.patient_id,
            updated.score,
            therapist_id,
        )
        return updated

    async def _check_interval_against_history(
        self,
        patient_id: str,
        measure_type: MeasureType,
        measured_at: datetime,
        exclude_id: Optional[str] = None,
    ) -> None:
        history = await self.store.get_history(patient_id, measure_type)
        for other in history:
            if other.id == exclude_id:
                continue
            check_reassessment_interval(other.measured_at, measured_at, self.min_reassessment_days)

    async def delete_measure(
        self,
        patient_id: str,
        measure_id: str,
        user_id: str,
        clinic_id: Optional[str] = None,
    ) -> None:
        """Delete a measurement after confirming ownership.

        Raises:
            NotFoundError: unknown measurement.
            OwnershipError: measurement belongs to another patient or clinic.
        """
        await self._get_owned_measurement(measure_id, patient_id, clinic_id)
        await self.store.delete(measure_id)
        logger.info("Outcome measure deleted: id=%s patient=%s by=%s", measure_id, patient_id, user_id)

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    async def get_patient_measures(self, patient_id: str) -> Sequence[Measurement]:
        return await self.store.list_by_patient(patient_id)

    async def get_measure_library(self) -> Sequence[MeasureDefinition]:
        return await self.library.list_definitions()

    async def _history_with_definition(
        self, patient_id: str, measure_type: MeasureType
    ) -> tuple[Sequence[Measurement], MeasureDefinition]:
        history = await self.store.get_history(patient_id, measure_type)
        if not history:
            raise NotFoundError("measurement history", f"patient {patient_id}, measure type {measure_type.value}")
        # The baseline's definition governs bounds, direction and MCID.
        definition = await self._get_definition(history[0].library_id)
        return history, definition

    async def calculate_progress(self, patient_id: str, measure_type: MeasureType) -> ProgressResult:
        """Progress from baseline for one patient and measure type.

        Raises:
            NotFoundError: no history, or the baseline's definition is missing.
        """
        history, definition = await self._history_with_definition(patient_id, measure_type)
        return calculate_progress(patient_id, measure_type, history, definition)

    async def get_trending(
        self, patient_id: str, measure_type: MeasureType, goal: Optional[float] = None
    ) -> TrendingData:
        history, definition = await self._history_with_definition(patient_id, measure_type)
        return build_trending(patient_id, measure_type, history, definition, goal=goal)
