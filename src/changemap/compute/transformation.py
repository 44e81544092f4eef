"""Transformation state computation.

Combines intensity, certainty, nature, impact phases and narratives into
one state per place. The state is a pure projection of the full event
set: recomputing from the same events (and reference date) yields an
identical result.
"""

import dataclasses
from collections.abc import Iterable
from datetime import date

import mlflow
from mlflow.entities import SpanType

from changemap.compute.certainty import derive_certainty
from changemap.compute.dates import parse_date
from changemap.compute.intensity import compute_intensity
from changemap.compute.narratives import generate_narratives
from changemap.compute.nature import NATURE_AMBIGUITY_MARGIN, derive_nature
from changemap.compute.phases import estimate_impact_phases
from changemap.core.schemas import TransformationStateRecord
from changemap.core.types import TransformationInput, TransformationState


@mlflow.trace(name="compute_transformation_state", span_type=SpanType.CHAIN)
def compute_transformation_state(
    data: TransformationInput,
    today: date | None = None,
    nature_margin: int = NATURE_AMBIGUITY_MARGIN,
) -> TransformationState:
    """Compute the complete transformation state for one place.

    Args:
        data: The place and its full current event set.
        today: Reference date for status and disruption wording.
            Defaults to the current date.
        nature_margin: Ambiguity margin passed to the nature classifier.
    """
    events = list(data.events)
    if not events:
        return TransformationState(place_id=data.place.id)

    today = today or date.today()

    intensity = compute_intensity(events)
    certainty = derive_certainty(events)
    nature = derive_nature(events, margin=nature_margin)
    phases = estimate_impact_phases(events, today=today)
    narratives = generate_narratives(events, nature, certainty, phases, today=today)

    dated = [d for d in (parse_date(e.event_date) for e in events) if d is not None]

    return TransformationState(
        place_id=data.place.id,
        intensity=intensity,
        nature=nature,
        certainty=certainty,
        headline=narratives.headline,
        one_liner=narratives.one_liner,
        disruption_summary=narratives.disruption_summary,
        disruption_start=phases.disruption_start,
        disruption_end=phases.disruption_end,
        visible_change_date=phases.visible_change_date,
        usage_change_date=phases.usage_change_date,
        is_estimated_start=phases.is_estimated_start,
        is_estimated_end=phases.is_estimated_end,
        approval_date=phases.approval_date,
        permit_expiration=phases.permit_expiration,
        project_status=phases.project_status,
        event_count=len(events),
        first_activity=min(dated, default=None),
        last_activity=max(dated, default=None),
    )


def compute_transformation_states(
    inputs: Iterable[TransformationInput],
    today: date | None = None,
) -> list[TransformationState]:
    """Compute states for many places against a single reference date."""
    today = today or date.today()
    return [compute_transformation_state(data, today=today) for data in inputs]


def to_record(state: TransformationState) -> TransformationStateRecord:
    """Convert a computed state to its storage/serving record."""
    return TransformationStateRecord(**dataclasses.asdict(state))
