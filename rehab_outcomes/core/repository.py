"""SQLAlchemy repositories implementing the service collaborator protocols.

Repositories flush but never commit; the caller owns the transaction (see
``rehab_outcomes.core.database.session_scope``).
"""

from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from rehab_outcomes.core.models import MeasureLibraryRecord, OutcomeMeasureRecord, ReevaluationRecord
from rehab_outcomes.errors import NotFoundError
from rehab_outcomes.models.measures import MeasureDefinition, Measurement, MeasureType
from rehab_outcomes.models.reevaluation import ComparisonItem
from rehab_outcomes.timestamps import ensure_aware


# ------------------------------------------------------------------
# Record <-> model conversion
# ------------------------------------------------------------------


def definition_from_record(rec: MeasureLibraryRecord) -> MeasureDefinition:
    return MeasureDefinition(
        id=rec.id,
        clinic_id=rec.clinic_id,
        code=rec.code,
        measure_type=rec.measure_type,
        category=rec.category,
        name=rec.name,
        name_vi=rec.name_vi,
        description=rec.description,
        description_vi=rec.description_vi,
        instructions=rec.instructions,
        instructions_vi=rec.instructions_vi,
        min_score=rec.min_score,
        max_score=rec.max_score,
        higher_is_better=rec.higher_is_better,
        mcid=rec.mcid,
        mdc=rec.mdc,
        questions=rec.questions or [],
        scoring_method=rec.scoring_method,
        body_regions=frozenset(rec.body_regions) if rec.body_regions else None,
        is_active=rec.is_active,
    )


def record_from_definition(definition: MeasureDefinition) -> MeasureLibraryRecord:
    return MeasureLibraryRecord(
        id=definition.id,
        clinic_id=definition.clinic_id,
        code=definition.code,
        measure_type=definition.measure_type.value,
        category=definition.category.value,
        name=definition.name,
        name_vi=definition.name_vi,
        description=definition.description,
        description_vi=definition.description_vi,
        instructions=definition.instructions,
        instructions_vi=definition.instructions_vi,
        min_score=definition.min_score,
        max_score=definition.max_score,
        higher_is_better=definition.higher_is_better,
        mcid=definition.mcid,
        mdc=definition.mdc,
        questions=[q.model_dump(mode="json") for q in definition.questions],
        scoring_method=definition.scoring_method.model_dump(mode="json") if definition.scoring_method else None,
        body_regions=sorted(definition.body_regions) if definition.body_regions else None,
        is_active=definition.is_active,
    )


def measurement_from_record(rec: OutcomeMeasureRecord) -> Measurement:
    return Measurement(
        id=rec.id,
        patient_id=rec.patient_id,
        clinic_id=rec.clinic_id,
        therapist_id=rec.therapist_id,
        library_id=rec.library_id,
        measure_type=rec.measure_type,
        session_id=rec.session_id,
        score=rec.score,
        max_possible=rec.max_possible,
        percentage=rec.percentage,
        interpretation=rec.interpretation,
        responses=rec.responses or [],
        notes=rec.notes or "",
        measured_at=ensure_aware(rec.measured_at),
        created_at=ensure_aware(rec.created_at),
        updated_at=ensure_aware(rec.updated_at),
        created_by=rec.created_by,
        updated_by=rec.updated_by,
    )


def _measurement_columns(m: Measurement) -> dict:
    return {
        "patient_id": m.patient_id,
        "clinic_id": m.clinic_id,
        "therapist_id": m.therapist_id,
        "library_id": m.library_id,
        "measure_type": m.measure_type.value,
        "session_id": m.session_id,
        "score": m.score,
        "max_possible": m.max_possible,
        "percentage": m.percentage,
        "responses": [r.model_dump(mode="json") for r in m.responses],
        "interpretation": m.interpretation.model_dump(mode="json") if m.interpretation else None,
        "notes": m.notes,
        "measured_at": m.measured_at,
        "updated_at": m.updated_at,
        "updated_by": m.updated_by,
    }


def comparison_from_record(rec: ReevaluationRecord) -> ComparisonItem:
    return ComparisonItem(
        id=rec.id,
        batch_id=rec.batch_id,
        patient_id=rec.patient_id,
        clinic_id=rec.clinic_id,
        therapist_id=rec.therapist_id,
        visit_id=rec.visit_id,
        baseline_assessment_id=rec.baseline_assessment_id,
        assessment_type=rec.assessment_type,
        measure_label=rec.measure_label,
        current_value=rec.current_value,
        baseline_value=rec.baseline_value,
        change=rec.change,
        change_percentage=rec.change_percentage,
        higher_is_better=rec.higher_is_better,
        mcid_threshold=rec.mcid_threshold,
        mcid_achieved=rec.mcid_achieved,
        interpretation=rec.interpretation,
        notes=rec.notes or "",
        assessed_at=ensure_aware(rec.assessed_at),
        created_at=ensure_aware(rec.created_at),
    )


def record_from_comparison(item: ComparisonItem, position: int = 0) -> ReevaluationRecord:
    return ReevaluationRecord(
        id=item.id,
        batch_id=item.batch_id,
        position=position,
        patient_id=item.patient_id,
        clinic_id=item.clinic_id,
        therapist_id=item.therapist_id,
        visit_id=item.visit_id,
        baseline_assessment_id=item.baseline_assessment_id,
        assessment_type=item.assessment_type.value,
        measure_label=item.measure_label,
        current_value=item.current_value,
        baseline_value=item.baseline_value,
        change=item.change,
        change_percentage=item.change_percentage,
        higher_is_better=item.higher_is_better,
        mcid_threshold=item.mcid_threshold,
        mcid_achieved=item.mcid_achieved,
        interpretation=item.interpretation.value,
        notes=item.notes,
        assessed_at=item.assessed_at,
        created_at=item.created_at,
    )


# ------------------------------------------------------------------
# Repositories
# ------------------------------------------------------------------


class MeasureLibraryRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, definition: MeasureDefinition) -> MeasureDefinition:
        self.session.add(record_from_definition(definition))
        await self.session.flush()
        return definition

    async def get_definition_by_id(self, definition_id: str) -> Optional[MeasureDefinition]:
        rec = await self.session.get(MeasureLibraryRecord, definition_id)
        return definition_from_record(rec) if rec else None

    async def list_definitions(self) -> Sequence[MeasureDefinition]:
        stmt = (
            select(MeasureLibraryRecord)
            .where(MeasureLibraryRecord.is_active.is_(True))
            .order_by(MeasureLibraryRecord.measure_type, MeasureLibraryRecord.name)
        )
        result = await self.session.execute(stmt)
        return [definition_from_record(rec) for rec in result.scalars().all()]


class MeasurementRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, measurement: Measurement) -> None:
        rec = OutcomeMeasureRecord(
            id=measurement.id,
            created_at=measurement.created_at,
            created_by=measurement.created_by,
            **_measurement_columns(measurement),
        )
        self.session.add(rec)
        await self.session.flush()

    async def update(self, measurement: Measurement) -> None:
        rec = await self.session.get(OutcomeMeasureRecord, measurement.id)
        if rec is None:
            raise NotFoundError("measurement", measurement.id)
        for column, value in _measurement_columns(measurement).items():
            setattr(rec, column, value)
        await self.session.flush()

    async def delete(self, measurement_id: str) -> None:
        result = await self.session.execute(
            delete(OutcomeMeasureRecord).where(OutcomeMeasureRecord.id == measurement_id)
        )
        if result.rowcount == 0:
            raise NotFoundError("measurement", measurement_id)
        await self.session.flush()

    async def get_by_id(self, measurement_id: str) -> Optional[Measurement]:
        rec = await self.session.get(OutcomeMeasureRecord, measurement_id)
        return measurement_from_record(rec) if rec else None

    async def list_by_patient(self, patient_id: str) -> Sequence[Measurement]:
        stmt = (
            select(OutcomeMeasureRecord)
            .where(OutcomeMeasureRecord.patient_id == patient_id)
            .order_by(OutcomeMeasureRecord.measured_at.desc())
        )
        result = await self.session.execute(stmt)
        return [measurement_from_record(rec) for rec in result.scalars().all()]

    async def get_history(self, patient_id: str, measure_type: MeasureType) -> Sequence[Measurement]:
        stmt = (
            select(OutcomeMeasureRecord)
            .where(
                OutcomeMeasureRecord.patient_id == patient_id,
                OutcomeMeasureRecord.measure_type == measure_type.value,
            )
            .order_by(OutcomeMeasureRecord.measured_at.asc())
        )
        result = await self.session.execute(stmt)
        return [measurement_from_record(rec) for rec in result.scalars().all()]

    async def get_last_measurement(self, patient_id: str, measure_type: MeasureType) -> Optional[Measurement]:
        stmt = (
            select(OutcomeMeasureRecord)
            .where(
                OutcomeMeasureRecord.patient_id == patient_id,
                OutcomeMeasureRecord.measure_type == measure_type.value,
            )
            .order_by(OutcomeMeasureRecord.measured_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        rec = result.scalar_one_or_none()
        return measurement_from_record(rec) if rec else None


class ReevaluationRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_batch(self, items: Sequence[ComparisonItem]) -> None:
        """Insert all items inside a savepoint; any failure discards the whole batch."""
        async with self.session.begin_nested():
            self.session.add_all([record_from_comparison(item, i) for i, item in enumerate(items)])
            await self.session.flush()

    async def list_by_patient(self, patient_id: str) -> Sequence[ComparisonItem]:
        stmt = (
            select(ReevaluationRecord)
            .where(ReevaluationRecord.patient_id == patient_id)
            .order_by(ReevaluationRecord.assessed_at.desc(), ReevaluationRecord.batch_id, ReevaluationRecord.position)
        )
        result = await self.session.execute(stmt)
        return [comparison_from_record(rec) for rec in result.scalars().all()]

    async def get_batch(self, batch_id: str) -> Sequence[ComparisonItem]:
        stmt = (
            select(ReevaluationRecord)
            .where(ReevaluationRecord.batch_id == batch_id)
            .order_by(ReevaluationRecord.position)
        )
        result = await self.session.execute(stmt)
        return [comparison_from_record(rec) for rec in result.scalars().all()]
