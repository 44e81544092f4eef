"""Shared test fixtures."""

from datetime import date

import mlflow
import pytest

from changemap.core.types import Place, RawEvent

# Pinned reference date so status and disruption wording are reproducible
TODAY = date(2025, 6, 15)


@pytest.fixture(autouse=True)
def _disable_mlflow_tracing():
    """Disable MLflow tracing during tests — no side effects, no mlruns/ writes."""
    mlflow.tracing.disable()
    yield
    mlflow.tracing.enable()


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def make_event():
    """Factory for normalized events with DOB defaults."""

    def _make(
        event_type: str,
        event_date="2024-01-15",
        source: str = "dob",
        raw_data: dict | None = None,
        place_id: str = "place-1",
        source_id: str | None = None,
    ) -> RawEvent:
        return RawEvent(
            place_id=place_id,
            source=source,
            event_type=event_type,
            event_date=event_date,
            source_id=source_id,
            raw_data=raw_data,
        )

    return _make


@pytest.fixture
def make_place():
    def _make(place_id: str = "place-1", lat: float | None = 40.75, lng: float | None = -73.95) -> Place:
        return Place(
            id=place_id,
            latitude=lat,
            longitude=lng,
            address="123 Test St",
            borough="Manhattan",
            bin="1234567",
            bbl="1000010001",
            nta_code="MN17",
            nta_name="Midtown",
        )

    return _make
