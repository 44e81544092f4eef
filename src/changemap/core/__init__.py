"""Core domain types shared across all changemap modules."""

from changemap.core.types import (
    PERMIT_EVENT_TYPES,
    Certainty,
    EventSource,
    EventType,
    HeatmapCell,
    ImpactPhases,
    Narratives,
    Nature,
    Place,
    PlaceForHeatmap,
    ProjectStatus,
    RawEvent,
    TransformationInput,
    TransformationState,
)

__all__ = [
    "PERMIT_EVENT_TYPES",
    "Certainty",
    "EventSource",
    "EventType",
    "HeatmapCell",
    "ImpactPhases",
    "Narratives",
    "Nature",
    "Place",
    "PlaceForHeatmap",
    "ProjectStatus",
    "RawEvent",
    "TransformationInput",
    "TransformationState",
]
