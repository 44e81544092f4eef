"""Domain types for the changemap transformation engine.

All shared enums and dataclasses live here to prevent circular imports
and establish a single source of truth for the domain model. Every
compute module imports from here.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any


# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------

class EventSource(StrEnum):
    """Municipal dataset an event was normalized from."""

    DOB = "dob"
    DOB_NOW = "dob-now"
    DOB_VIOLATIONS = "dob-violations"
    DOB_COMPLAINTS = "dob-complaints"
    ZAP = "zap"
    CAPITAL = "capital"
    CEQR = "ceqr"


class EventType(StrEnum):
    # DOB permit job types
    NEW_BUILDING = "new_building"
    MAJOR_ALTERATION = "major_alteration"
    MINOR_ALTERATION = "minor_alteration"
    DEMOLITION = "demolition"
    SCAFFOLD = "scaffold"
    EQUIPMENT_WORK = "equipment_work"
    PLUMBING = "plumbing"
    MECHANICAL = "mechanical"
    # Zoning applications (ZAP / ULURP)
    ULURP_FILED = "ulurp_filed"
    ULURP_APPROVED = "ulurp_approved"
    ULURP_DENIED = "ulurp_denied"
    ZAP_FILED = "zap_filed"
    ZAP_APPROVED = "zap_approved"
    # Environmental review (CEQR)
    CEQR_EAS = "ceqr_eas"
    CEQR_EIS_DRAFT = "ceqr_eis_draft"
    CEQR_EIS_FINAL = "ceqr_eis_final"
    CEQR_COMPLETED = "ceqr_completed"
    # Other
    CAPITAL_PROJECT = "capital_project"
    CONSTRUCTION_STARTED = "construction_started"
    CONSTRUCTION_COMPLETED = "construction_completed"
    OTHER = "other"


class Certainty(StrEnum):
    """How likely the change is to happen. Ordered weakest to strongest."""

    DISCUSSION = "discussion"
    PROBABLE = "probable"
    CERTAIN = "certain"


class Nature(StrEnum):
    DENSIFICATION = "densification"
    RENOVATION = "renovation"
    INFRASTRUCTURE = "infrastructure"
    DEMOLITION = "demolition"
    MIXED = "mixed"


class ProjectStatus(StrEnum):
    PLANNING = "planning"
    APPROVED = "approved"
    ACTIVE = "active"
    STALLED = "stalled"
    COMPLETED = "completed"


# Job types that prove a building permit exists for the place
PERMIT_EVENT_TYPES: tuple[EventType, ...] = (
    EventType.NEW_BUILDING,
    EventType.MAJOR_ALTERATION,
    EventType.DEMOLITION,
)


# ---------------------------------------------------------------------------
# Inputs supplied by ingestion collaborators
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RawEvent:
    """A single dated, typed occurrence normalized from a municipal dataset.

    ``event_type`` and ``source`` are plain strings so that values outside
    the closed enums survive normalization; they simply carry no signal.
    ``event_date`` may arrive as a date, datetime or ISO-like string.
    """

    place_id: str
    source: str
    event_type: str
    event_date: date | datetime | str | None
    source_id: str | None = None
    raw_data: dict[str, Any] | None = None


@dataclass
class Place:
    """A stable real-world location tracked by the system."""

    id: str
    latitude: float | None = None
    longitude: float | None = None
    address: str = ""
    borough: str = ""
    bin: str = ""       # Building Identification Number
    bbl: str = ""       # Borough-Block-Lot
    nta_code: str = ""  # Neighborhood Tabulation Area
    nta_name: str = ""


# ---------------------------------------------------------------------------
# Derived per-place state
# ---------------------------------------------------------------------------

@dataclass
class ImpactPhases:
    """When a place will feel its transformation, with data-quality flags.

    ``is_estimated_start`` / ``is_estimated_end`` are False whenever the
    matching date is None or was read from a field that documents the
    milestone directly.
    """

    disruption_start: date | None = None
    disruption_end: date | None = None
    visible_change_date: date | None = None
    usage_change_date: date | None = None
    is_estimated_start: bool = False
    is_estimated_end: bool = False
    approval_date: date | None = None
    permit_expiration: date | None = None
    project_status: ProjectStatus = ProjectStatus.PLANNING


@dataclass
class Narratives:
    headline: str
    one_liner: str
    disruption_summary: str | None = None


@dataclass
class TransformationState:
    """Full projection of a place's event set. Recomputed, never patched."""

    place_id: str
    intensity: int = 0
    nature: Nature = Nature.MIXED
    certainty: Certainty = Certainty.DISCUSSION
    headline: str | None = None
    one_liner: str | None = None
    disruption_summary: str | None = None
    disruption_start: date | None = None
    disruption_end: date | None = None
    visible_change_date: date | None = None
    usage_change_date: date | None = None
    is_estimated_start: bool = False
    is_estimated_end: bool = False
    approval_date: date | None = None
    permit_expiration: date | None = None
    project_status: ProjectStatus = ProjectStatus.PLANNING
    event_count: int = 0
    first_activity: date | None = None
    last_activity: date | None = None


@dataclass
class TransformationInput:
    """One place together with its full current event set."""

    place: Place
    events: list[RawEvent] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Heatmap types
# ---------------------------------------------------------------------------

@dataclass
class PlaceForHeatmap:
    """Already-computed per-place values needed for spatial aggregation."""

    id: str
    latitude: float
    longitude: float
    intensity: int
    nature: Nature


@dataclass
class HeatmapCell:
    """Aggregate of all places falling in one hexagonal cell."""

    h3_index: str
    resolution: int
    center_lat: float
    center_lng: float
    boundary: list[list[float]]  # [lng, lat] vertices, GeoJSON order
    avg_intensity: int
    max_intensity: int
    place_count: int
    dominant_nature: Nature
