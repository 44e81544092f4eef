"""Batch compute job: transformation states → heatmap cells.

Recomputes every place from its full current event set (no deltas),
then aggregates the results into H3 cells. Callers persist the returned
records; this module performs no I/O beyond logging and optional MLflow
run tracking.
"""

import logging
import uuid
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

import mlflow
from mlflow.entities import SpanType

from changemap.compute.heatmap import DEFAULT_RESOLUTION, compute_heatmap_cells
from changemap.compute.transformation import compute_transformation_state
from changemap.config import settings
from changemap.core.types import (
    HeatmapCell,
    PlaceForHeatmap,
    TransformationInput,
    TransformationState,
)
from changemap.observability.logging import correlation_id, log_step

logger = logging.getLogger(__name__)


@dataclass
class ComputeResult:
    states: list[TransformationState] = field(default_factory=list)
    cells: list[HeatmapCell] = field(default_factory=list)
    resolution: int = DEFAULT_RESOLUTION


def places_for_heatmap(
    inputs: Sequence[TransformationInput],
    states: Sequence[TransformationState],
) -> list[PlaceForHeatmap]:
    """Pair each place's coordinates with its computed state.

    Places without coordinates can't be placed in a cell and are dropped.
    """
    by_place = {state.place_id: state for state in states}
    heat_places = []
    for data in inputs:
        place = data.place
        state = by_place.get(place.id)
        if state is None or place.latitude is None or place.longitude is None:
            continue
        heat_places.append(PlaceForHeatmap(
            id=place.id,
            latitude=place.latitude,
            longitude=place.longitude,
            intensity=state.intensity,
            nature=state.nature,
        ))
    return heat_places


@mlflow.trace(name="run_compute", span_type=SpanType.CHAIN)
def run_compute(
    inputs: Sequence[TransformationInput],
    resolution: int | None = None,
    today: date | None = None,
    track: bool = False,
) -> ComputeResult:
    """Compute states for all places, then their heatmap cells.

    Args:
        inputs: Every place with its full current event set.
        resolution: H3 resolution. Defaults to ``settings.heatmap_resolution``.
        today: Reference date shared by the whole batch. Defaults to today.
        track: Log a summary run to MLflow.
    """
    resolution = settings.heatmap_resolution if resolution is None else resolution
    today = today or date.today()

    token = None
    if not correlation_id.get():
        token = correlation_id.set(f"compute-{uuid.uuid4().hex[:12]}")

    try:
        logger.info("Computing transformations for %d places...", len(inputs),
                    extra={"count": len(inputs)})

        states: list[TransformationState] = []
        with log_step(logger, "transformation_states", count=len(inputs)):
            for processed, data in enumerate(inputs, start=1):
                states.append(compute_transformation_state(data, today=today))
                if processed % settings.progress_log_interval == 0:
                    logger.info("  Processed %d/%d places...", processed, len(inputs))

        heat_places = places_for_heatmap(inputs, states)
        with log_step(logger, "heatmap_cells", resolution=resolution):
            cells = compute_heatmap_cells(heat_places, resolution)

        logger.info(
            "Computed %d states and %d heatmap cells (%d places without coordinates)",
            len(states), len(cells), len(inputs) - len(heat_places),
        )

        result = ComputeResult(states=states, cells=cells, resolution=resolution)
        if track:
            log_compute_run(result, today)
        return result
    finally:
        if token is not None:
            correlation_id.reset(token)


def summarize(result: ComputeResult) -> dict[str, float]:
    """Summary metrics for a compute run."""
    states = result.states
    metrics: dict[str, float] = {
        "places": len(states),
        "cells": len(result.cells),
        "places_with_events": sum(1 for s in states if s.event_count > 0),
        "mean_intensity": (sum(s.intensity for s in states) / len(states)) if states else 0.0,
        "estimated_starts": sum(1 for s in states if s.is_estimated_start),
    }
    for status, count in Counter(s.project_status for s in states).items():
        metrics[f"status_{status.value}"] = count
    return metrics


def log_compute_run(result: ComputeResult, today: date) -> None:
    """Record a compute run's parameters and summary metrics in MLflow."""
    mlflow.set_tracking_uri(settings.mlflow_tracking_uri)
    mlflow.set_experiment(settings.mlflow_experiment_name)

    with mlflow.start_run(run_name=f"compute_{today.isoformat()}"):
        mlflow.log_params({
            "resolution": result.resolution,
            "reference_date": today.isoformat(),
        })
        mlflow.log_metrics(summarize(result))
        mlflow.set_tag("correlation_id", correlation_id.get())
