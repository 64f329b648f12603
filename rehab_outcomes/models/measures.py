"""Outcome measure definitions, recorded measurements, and progress results."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MeasureType(str, Enum):
    """Standardized outcome measure types."""

    VAS = "vas"  # Visual Analog Scale (pain)
    NRS = "nrs"  # Numeric Rating Scale (pain)
    NDI = "ndi"  # Neck Disability Index
    ODI = "odi"  # Oswestry Disability Index
    DASH = "dash"  # Disabilities of the Arm, Shoulder and Hand
    LEFS = "lefs"  # Lower Extremity Functional Scale
    KOOS = "koos"  # Knee injury and Osteoarthritis Outcome Score
    WOMAC = "womac"  # Western Ontario and McMaster Universities OA Index
    SF36 = "sf36"  # Short Form 36 Health Survey
    BBS = "bbs"  # Berg Balance Scale
    TUG = "tug"  # Timed Up and Go
    FIM = "fim"  # Functional Independence Measure
    MMT = "mmt"  # Manual Muscle Testing
    ROM = "rom"  # Range of Motion
    CUSTOM = "custom"  # Clinic-defined


class MeasureCategory(str, Enum):
    """Clinical purpose of an outcome measure."""

    PAIN = "pain"
    FUNCTION = "function"
    DISABILITY = "disability"
    BALANCE = "balance"
    STRENGTH = "strength"
    MOBILITY = "mobility"
    QUALITY_OF_LIFE = "quality_of_life"
    CUSTOM = "custom"


class ScoringMethodKind(str, Enum):
    SUM = "sum"
    AVERAGE = "average"


class Severity(str, Enum):
    """Severity band assigned from a normalized score."""

    MINIMAL = "minimal"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class Trend(str, Enum):
    """Direction of change from baseline."""

    IMPROVED = "improved"
    DECLINED = "declined"
    STABLE = "stable"
    INSUFFICIENT_DATA = "insufficient_data"


class ScoringMethod(BaseModel):
    """How item responses reduce to a single score."""

    method: ScoringMethodKind = ScoringMethodKind.SUM
    formula: Optional[str] = None
    normalize_to: Optional[float] = None  # e.g. 100


class MeasureQuestion(BaseModel):
    """A single question within an outcome measure."""

    question_id: str
    text: str
    text_vi: str = ""
    input_type: str = "scale"  # scale, number, radio, text
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    weight: float = 1.0
    is_required: bool = True


class MeasureDefinition(BaseModel):
    """Library definition of a standardized outcome measure."""

    id: str
    clinic_id: Optional[str] = None
    code: str = ""
    measure_type: MeasureType
    category: MeasureCategory = MeasureCategory.CUSTOM
    name: str = ""
    name_vi: str = ""
    description: str = ""
    description_vi: str = ""
    instructions: str = ""
    instructions_vi: str = ""
    min_score: float
    max_score: float
    higher_is_better: bool
    mcid: Optional[float] = Field(None, gt=0, description="Minimal Clinically Important Difference")
    mdc: Optional[float] = Field(None, gt=0, description="Minimal Detectable Change")
    questions: list[MeasureQuestion] = Field(default_factory=list)
    scoring_method: Optional[ScoringMethod] = None
    body_regions: Optional[frozenset[str]] = Field(
        None, description="Applicable body regions; None means the measure applies globally"
    )
    is_active: bool = True

    @model_validator(mode="after")
    def _check_bounds(self) -> "MeasureDefinition":
        if self.max_score < self.min_score:
            raise ValueError(
                f"max_score ({self.max_score}) must be >= min_score ({self.min_score})"
            )
        return self

    @property
    def is_global(self) -> bool:
        return not self.body_regions

    @property
    def target_score(self) -> float:
        """Best attainable score."""
        return self.max_score if self.higher_is_better else self.min_score


class MeasurementResponse(BaseModel):
    """A patient's answer to a single question."""

    question_id: str
    value: float
    text_value: Optional[str] = None


class MeasureInterpretation(BaseModel):
    """Bilingual clinical interpretation of a score."""

    severity: Severity
    severity_vi: str = ""
    description: str = ""
    description_vi: str = ""


class Measurement(BaseModel):
    """A recorded outcome measure for a patient."""

    id: str
    patient_id: str
    clinic_id: str
    therapist_id: str
    library_id: str
    measure_type: MeasureType
    session_id: Optional[str] = None
    score: float
    max_possible: float
    percentage: Optional[float] = None
    interpretation: Optional[MeasureInterpretation] = None
    responses: list[MeasurementResponse] = Field(default_factory=list)
    notes: str = ""
    measured_at: datetime
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    created_by: Optional[str] = None
    updated_by: Optional[str] = None


class ProgressResult(BaseModel):
    """Progress of one patient on one measure type, computed on demand."""

    patient_id: str
    measure_type: MeasureType
    library_id: str
    current_score: float
    baseline_score: float
    previous_score: Optional[float] = None
    change: float
    change_percent: float
    mcid_achieved: Optional[bool] = None  # None when the measure has no MCID
    trend: Trend
    total_measurements: int
    calculated_at: datetime = Field(default_factory=_utcnow)


class TrendDataPoint(BaseModel):
    """A single point on a progress chart."""

    score: float
    percentage: Optional[float] = None
    measured_at: datetime
    session_id: Optional[str] = None
    notes: str = ""


class TrendingData(BaseModel):
    """Time series of scores for one patient and measure type."""

    patient_id: str
    measure_type: MeasureType
    library_id: str
    measure_name: str = ""
    measure_name_vi: str = ""
    data_points: list[TrendDataPoint] = Field(default_factory=list)
    baseline: Optional[float] = None
    goal: Optional[float] = None
    mcid: Optional[float] = None
    trend: Trend = Trend.INSUFFICIENT_DATA


class CreateMeasurementRequest(BaseModel):
    """Request to record an outcome measure."""

    patient_id: str
    library_id: str
    session_id: Optional[str] = None
    responses: list[MeasurementResponse] = Field(..., min_length=1)
    notes: str = Field("", max_length=2000)
    measured_at: Optional[str] = Field(None, description="RFC 3339 date-time; defaults to now")


class UpdateMeasurementRequest(BaseModel):
    """Request to edit an existing outcome measure. Unset fields are left as-is."""

    measure_id: str
    patient_id: str
    responses: Optional[list[MeasurementResponse]] = Field(None, min_length=1)
    notes: Optional[str] = Field(None, max_length=2000)
    measured_at: Optional[str] = None
