"""Data models for the outcomes engine."""

from rehab_outcomes.models.measures import (
    CreateMeasurementRequest,
    MeasureCategory,
    MeasureDefinition,
    MeasureInterpretation,
    MeasureQuestion,
    Measurement,
    MeasurementResponse,
    MeasureType,
    ProgressResult,
    ScoringMethod,
    ScoringMethodKind,
    Severity,
    Trend,
    TrendDataPoint,
    TrendingData,
    UpdateMeasurementRequest,
)
from rehab_outcomes.models.reevaluation import (
    AssessmentType,
    ChangeInterpretation,
    ComparisonBatch,
    ComparisonItem,
    ComparisonItemRequest,
    CreateReevaluationRequest,
    ROMJoint,
)

__all__ = [
    "CreateMeasurementRequest",
    "MeasureCategory",
    "MeasureDefinition",
    "MeasureInterpretation",
    "MeasureQuestion",
    "Measurement",
    "MeasurementResponse",
    "MeasureType",
    "ProgressResult",
    "ScoringMethod",
    "ScoringMethodKind",
    "Severity",
    "Trend",
    "TrendDataPoint",
    "TrendingData",
    "UpdateMeasurementRequest",
    # Re-evaluation
    "AssessmentType",
    "ChangeInterpretation",
    "ComparisonBatch",
    "ComparisonItem",
    "ComparisonItemRequest",
    "CreateReevaluationRequest",
    "ROMJoint",
]
