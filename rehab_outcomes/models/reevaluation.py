"""Re-evaluation comparison models.

A re-evaluation compares baseline and current values across mixed
measurement domains (ROM degrees, MMT grades, questionnaire scores) in a
single clinical visit.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class AssessmentType(str, Enum):
    """Domain label for a comparison item; not used for scoring rules."""

    ROM = "rom"
    MMT = "mmt"
    OUTCOME_MEASURE = "outcome_measure"


class ROMJoint(str, Enum):
    """Joints with a known maximum range of motion."""

    SHOULDER = "shoulder"
    ELBOW = "elbow"
    WRIST = "wrist"
    HIP = "hip"
    KNEE = "knee"
    ANKLE = "ankle"
    CERVICAL_SPINE = "cervical_spine"
    THORACIC_SPINE = "thoracic_spine"
    LUMBAR_SPINE = "lumbar_spine"


class ChangeInterpretation(str, Enum):
    IMPROVED = "improved"
    DECLINED = "declined"
    STABLE = "stable"


class ComparisonItemRequest(BaseModel):
    """One baseline/current pair submitted for comparison."""

    assessment_type: AssessmentType
    measure_label: str = Field(..., min_length=1, max_length=120)
    current_value: float
    baseline_value: float
    higher_is_better: bool
    mcid_threshold: Optional[float] = Field(None, gt=0)


class CreateReevaluationRequest(BaseModel):
    """Batch of comparison items for one patient visit."""

    patient_id: str
    visit_id: Optional[str] = None
    baseline_assessment_id: Optional[str] = None
    assessments: list[ComparisonItemRequest] = Field(default_factory=list)
    notes: str = Field("", max_length=2000)
    assessed_at: Optional[str] = Field(None, description="RFC 3339 date-time; defaults to now")


class ComparisonItem(BaseModel):
    """A computed comparison, persisted as one re-evaluation record."""

    id: str
    batch_id: str
    patient_id: str
    clinic_id: str
    therapist_id: str
    visit_id: Optional[str] = None
    baseline_assessment_id: Optional[str] = None
    assessment_type: AssessmentType
    measure_label: str
    current_value: float
    baseline_value: float
    change: float
    change_percentage: Optional[float] = None
    higher_is_better: bool
    mcid_threshold: Optional[float] = None
    mcid_achieved: bool = False
    interpretation: ChangeInterpretation
    notes: str = ""
    assessed_at: datetime
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ComparisonBatch(BaseModel):
    """All comparison items from one re-evaluation, with aggregate counts."""

    batch_id: str
    patient_id: str
    clinic_id: str
    therapist_id: str
    visit_id: Optional[str] = None
    assessed_at: datetime
    comparisons: list[ComparisonItem] = Field(default_factory=list)
    total_items: int = 0
    improved: int = 0
    declined: int = 0
    stable: int = 0
    mcid_achieved: int = 0
