"""Eval test fixtures — golden place scenarios and MLflow experiment setup."""

import json
from datetime import date
from pathlib import Path

import mlflow
import pytest

from changemap.config import settings
from changemap.core.types import Place, RawEvent, TransformationInput

GOLDEN_DATA_PATH = Path(__file__).parent / "golden_data.json"

# Reference date the golden expectations were written against
GOLDEN_TODAY = date(2025, 6, 15)


def load_golden_data() -> list[dict]:
    """Load the golden evaluation dataset from JSON."""
    return json.loads(GOLDEN_DATA_PATH.read_text())


def pytest_generate_tests(metafunc):
    """Parametrize ``golden_sample`` with one case per golden scenario."""
    if "golden_sample" in metafunc.fixturenames:
        data = load_golden_data()
        metafunc.parametrize("golden_sample", data, ids=[sample["name"] for sample in data])


@pytest.fixture(scope="session")
def golden_data() -> list[dict]:
    data = load_golden_data()
    assert len(data) >= 2, f"Expected at least 2 golden samples, got {len(data)}"
    return data


@pytest.fixture
def golden_today() -> date:
    return GOLDEN_TODAY


@pytest.fixture
def to_input():
    """Build the compute input for one golden sample."""

    def _convert(sample: dict) -> TransformationInput:
        place = Place(**sample["place"])
        events = [RawEvent(place_id=place.id, **event) for event in sample["events"]]
        return TransformationInput(place=place, events=events)

    return _convert


@pytest.fixture
def eval_tracking(tmp_path, monkeypatch):
    """Point MLflow run tracking at a temp store so eval runs don't pollute mlruns/."""
    tracking_uri = f"sqlite:///{tmp_path}/mlflow.db"
    monkeypatch.setattr(settings, "mlflow_tracking_uri", tracking_uri)
    monkeypatch.setattr(settings, "mlflow_experiment_name", "changemap-eval")

    prev_uri = mlflow.get_tracking_uri()
    yield tracking_uri
    mlflow.set_tracking_uri(prev_uri)
