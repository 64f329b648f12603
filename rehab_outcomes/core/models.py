"""SQLAlchemy 2.0 async models for the reference storage adapter."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import JSON


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class MeasureLibraryRecord(Base):
    __tablename__ = "measure_library"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    clinic_id: Mapped[str | None] = mapped_column(String(64))
    code: Mapped[str] = mapped_column(String(50), default="")
    measure_type: Mapped[str] = mapped_column(String(20), nullable=False)
    category: Mapped[str] = mapped_column(String(30), default="custom")
    name: Mapped[str] = mapped_column(String(200), default="")
    name_vi: Mapped[str] = mapped_column(String(200), default="")
    description: Mapped[str] = mapped_column(Text, default="")
    description_vi: Mapped[str] = mapped_column(Text, default="")
    instructions: Mapped[str] = mapped_column(Text, default="")
    instructions_vi: Mapped[str] = mapped_column(Text, default="")
    min_score: Mapped[float] = mapped_column(Float, nullable=False)
    max_score: Mapped[float] = mapped_column(Float, nullable=False)
    higher_is_better: Mapped[bool] = mapped_column(Boolean, nullable=False)
    mcid: Mapped[float | None] = mapped_column(Float)
    mdc: Mapped[float | None] = mapped_column(Float)
    questions: Mapped[list | None] = mapped_column(JSON)
    scoring_method: Mapped[dict | None] = mapped_column(JSON)
    body_regions: Mapped[list | None] = mapped_column(JSON)  # null = global
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("ix_measure_library_measure_type", "measure_type"),
    )


class OutcomeMeasureRecord(Base):
    __tablename__ = "outcome_measures"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    patient_id: Mapped[str] = mapped_column(String(64), nullable=False)
    clinic_id: Mapped[str] = mapped_column(String(64), nullable=False)
    therapist_id: Mapped[str] = mapped_column(String(64), nullable=False)
    library_id: Mapped[str] = mapped_column(String(64), nullable=False)
    measure_type: Mapped[str] = mapped_column(String(20), nullable=False)
    session_id: Mapped[str | None] = mapped_column(String(64))
    score: Mapped[float] = mapped_column(Float, nullable=False)
    max_possible: Mapped[float] = mapped_column(Float, nullable=False)
    percentage: Mapped[float | None] = mapped_column(Float)
    responses: Mapped[list | None] = mapped_column(JSON)
    interpretation: Mapped[dict | None] = mapped_column(JSON)
    notes: Mapped[str] = mapped_column(Text, default="")
    measured_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
    created_by: Mapped[str | None] = mapped_column(String(64))
    updated_by: Mapped[str | None] = mapped_column(String(64))

    __table_args__ = (
        Index("ix_outcome_measures_patient_type", "patient_id", "measure_type", "measured_at"),
        Index("ix_outcome_measures_clinic_id", "clinic_id"),
    )


class ReevaluationRecord(Base):
    __tablename__ = "reevaluation_assessments"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    batch_id: Mapped[str] = mapped_column(String(64), nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0)  # order within the batch
    patient_id: Mapped[str] = mapped_column(String(64), nullable=False)
    clinic_id: Mapped[str] = mapped_column(String(64), nullable=False)
    therapist_id: Mapped[str] = mapped_column(String(64), nullable=False)
    visit_id: Mapped[str | None] = mapped_column(String(64))
    baseline_assessment_id: Mapped[str | None] = mapped_column(String(64))
    assessment_type: Mapped[str] = mapped_column(String(30), nullable=False)
    measure_label: Mapped[str] = mapped_column(String(120), nullable=False)
    current_value: Mapped[float] = mapped_column(Float, nullable=False)
    baseline_value: Mapped[float] = mapped_column(Float, nullable=False)
    change: Mapped[float] = mapped_column(Float, nullable=False)
    change_percentage: Mapped[float | None] = mapped_column(Float)
    higher_is_better: Mapped[bool] = mapped_column(Boolean, nullable=False)
    mcid_threshold: Mapped[float | None] = mapped_column(Float)
    mcid_achieved: Mapped[bool] = mapped_column(Boolean, default=False)
    interpretation: Mapped[str] = mapped_column(String(20), nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="")
    assessed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        Index("ix_reevaluation_patient_id", "patient_id"),
        Index("ix_reevaluation_batch_id", "batch_id"),
    )
