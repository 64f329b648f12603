"""Error taxonomy for the outcomes engine.

Validation errors are user-correctable and carry a machine-readable code plus
an English and Vietnamese message. Not-found and ownership errors are
propagated unchanged to the caller. Nothing here is retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ErrorDefinition:
    """Catalog entry for a bilingual validation error."""

    code: str
    message: str
    message_vi: str


# --- Outcome measures ---

INVALID_SCORE_RANGE = ErrorDefinition(
    code="OUTCOME_INVALID_SCORE_RANGE",
    message="score {score} is outside the valid range [{minimum}, {maximum}] for this measure type",
    message_vi="Diem so {score} nam ngoai pham vi hop le [{minimum}, {maximum}] cua loai do luong nay",
)
REASSESSMENT_TOO_SOON = ErrorDefinition(
    code="OUTCOME_REASSESSMENT_TOO_SOON",
    message=(
        "minimum {days} days required between re-assessments of the same measure type "
        "(previous measurement on {previous})"
    ),
    message_vi=(
        "Can toi thieu {days} ngay giua cac lan tai danh gia cung loai do luong "
        "(lan do truoc vao {previous})"
    ),
)
MEASURE_CONDITION_MISMATCH = ErrorDefinition(
    code="OUTCOME_MEASURE_CONDITION_MISMATCH",
    message="measure type does not match the patient's body region",
    message_vi="Loai do luong khong phu hop voi vung co the cua benh nhan",
)
UNKNOWN_MCID = ErrorDefinition(
    code="OUTCOME_UNKNOWN_MCID",
    message="no MCID threshold is defined for measure type {measure_type}",
    message_vi="Chua dinh nghia nguong MCID cho loai do luong {measure_type}",
)

# --- Re-evaluation ---

NO_COMPARISON_ITEMS = ErrorDefinition(
    code="REEVALUATION_NO_ITEMS",
    message="at least one assessment item is required",
    message_vi="Can it nhat mot muc danh gia",
)

# --- Assessments ---

ROM_OUT_OF_RANGE = ErrorDefinition(
    code="ASSESSMENT_ROM_OUT_OF_RANGE",
    message="ROM value {degrees} is outside the expected range [0, {maximum}] for {joint}",
    message_vi="Gia tri ROM {degrees} nam ngoai pham vi du kien [0, {maximum}] cua khop {joint}",
)
INVALID_MMT_GRADE = ErrorDefinition(
    code="ASSESSMENT_INVALID_MMT_GRADE",
    message="invalid MMT grade {grade}: must be 0-5 in steps of 0.5",
    message_vi="Diem MMT {grade} khong hop le: phai tu 0 den 5, buoc 0.5",
)

# --- Shared ---

INVALID_TIMESTAMP = ErrorDefinition(
    code="INVALID_TIMESTAMP",
    message="invalid {field} format: expected RFC 3339 date-time, got {value!r}",
    message_vi="Dinh dang {field} khong hop le: can ngay-gio RFC 3339, nhan duoc {value!r}",
)


class OutcomeError(Exception):
    """Base exception for outcomes engine errors."""

    pass


class ValidationError(OutcomeError):
    """Recoverable, user-correctable input error."""

    def __init__(self, code: str, message: str, message_vi: str = ""):
        super().__init__(message)
        self.code = code
        self.message = message
        self.message_vi = message_vi

    @classmethod
    def from_definition(cls, definition: ErrorDefinition, **params: Any) -> "ValidationError":
        """Build an error from a catalog entry, formatting both messages."""
        return cls(
            definition.code,
            definition.message.format(**params),
            definition.message_vi.format(**params),
        )

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message, "message_vi": self.message_vi}


class ReassessmentTooSoonError(ValidationError):
    """A measurement of the same type was recorded inside the minimum interval."""

    def __init__(self, previous_measured_at: datetime, min_days: int):
        definition = REASSESSMENT_TOO_SOON
        previous = previous_measured_at.date().isoformat()
        super().__init__(
            definition.code,
            definition.message.format(days=min_days, previous=previous),
            definition.message_vi.format(days=min_days, previous=previous),
        )
        self.previous_measured_at = previous_measured_at
        self.min_days = min_days


class NotFoundError(OutcomeError):
    """A requested definition, measurement, or history does not exist."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}")
        self.resource = resource
        self.identifier = identifier


class OwnershipError(OutcomeError):
    """An update or delete targeted a record owned by another patient or clinic."""

    def __init__(self, resource_id: str, owner_kind: str, owner_id: str):
        super().__init__(f"{resource_id} does not belong to {owner_kind} {owner_id}")
        self.resource_id = resource_id
        self.owner_kind = owner_kind
        self.owner_id = owner_id
