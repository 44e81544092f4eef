"""Pydantic record models handed to storage and serving collaborators.

These are the persistence/serving contract, decoupled from the internal
domain dataclasses. Dates serialize as ISO ``YYYY-MM-DD`` strings via
``model_dump(mode="json")``.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from changemap.core.types import Certainty, Nature, ProjectStatus


class TransformationStateRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    place_id: str
    intensity: int = Field(ge=0, le=100)
    nature: Nature
    certainty: Certainty
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
    event_count: int = Field(default=0, ge=0)
    first_activity: date | None = None
    last_activity: date | None = None


class HeatmapCellRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    h3_index: str
    resolution: int = Field(ge=0, le=15)
    center_lat: float
    center_lng: float
    boundary: list[list[float]]
    avg_intensity: int = Field(ge=0, le=100)
    max_intensity: int = Field(ge=0, le=100)
    place_count: int = Field(ge=1)
    dominant_nature: Nature
