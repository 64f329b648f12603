"""Pytest configuration and fixtures."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from unittest.mock import AsyncMock

from rehab_outcomes.models.measures import (
    MeasureCategory,
    MeasureDefinition,
    Measurement,
    MeasureType,
    ScoringMethod,
    ScoringMethodKind,
)

BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def vas_definition():
    """Pain scale: 0-10, lower is better, MCID 2."""
    return MeasureDefinition(
        id="lib-vas",
        code="VAS",
        measure_type=MeasureType.VAS,
        category=MeasureCategory.PAIN,
        name="Visual Analog Scale",
        name_vi="Thang do VAS",
        min_score=0,
        max_score=10,
        higher_is_better=False,
        mcid=2,
    )


@pytest.fixture
def function_definition():
    """Custom function scale: 0-10, higher is better, averaged, MCID 2."""
    return MeasureDefinition(
        id="lib-func",
        code="PSFS",
        measure_type=MeasureType.CUSTOM,
        category=MeasureCategory.FUNCTION,
        name="Patient-Specific Functional Scale",
        min_score=0,
        max_score=10,
        higher_is_better=True,
        mcid=2,
        scoring_method=ScoringMethod(method=ScoringMethodKind.AVERAGE),
    )


@pytest.fixture
def ndi_definition():
    """Neck Disability Index restricted to cervical regions."""
    return MeasureDefinition(
        id="lib-ndi",
        code="NDI",
        measure_type=MeasureType.NDI,
        category=MeasureCategory.DISABILITY,
        name="Neck Disability Index",
        min_score=0,
        max_score=100,
        higher_is_better=False,
        mcid=10,
        body_regions=frozenset({"cervical_spine", "neck"}),
    )


@pytest.fixture
def make_measurement():
    """Factory for stored measurements, spaced a day apart by default."""

    def _make(
        score,
        days=0,
        definition=None,
        patient_id="patient-1",
        clinic_id="clinic-1",
        measurement_id=None,
    ):
        library_id = definition.id if definition else "lib-vas"
        measure_type = definition.measure_type if definition else MeasureType.VAS
        max_possible = definition.max_score if definition else 10
        return Measurement(
            id=measurement_id or str(uuid.uuid4()),
            patient_id=patient_id,
            clinic_id=clinic_id,
            therapist_id="therapist-1",
            library_id=library_id,
            measure_type=measure_type,
            score=score,
            max_possible=max_possible,
            measured_at=BASE_TIME + timedelta(days=days),
        )

    return _make


@pytest.fixture
def mock_library(vas_definition, function_definition, ndi_definition):
    """Measure library resolving the three fixture definitions by id."""
    definitions = {d.id: d for d in (vas_definition, function_definition, ndi_definition)}
    library = AsyncMock()
    library.get_definition_by_id = AsyncMock(side_effect=lambda definition_id: definitions.get(definition_id))
    library.list_definitions = AsyncMock(return_value=list(definitions.values()))
    return library


@pytest.fixture
def mock_store():
    """Empty measurement store."""
    store = AsyncMock()
    store.get_history = AsyncMock(return_value=[])
    store.get_last_measurement = AsyncMock(return_value=None)
    store.get_by_id = AsyncMock(return_value=None)
    store.list_by_patient = AsyncMock(return_value=[])
    store.create = AsyncMock()
    store.update = AsyncMock()
    store.delete = AsyncMock()
    return store
