"""Impact phases: when disruption starts and ends, and where the project stands.

Only dates present in source data are used. A date read from a field that
documents the milestone itself is real; a date inferred from a weaker
proxy (permit issued, permit filed) is flagged as estimated.

Source-specific date fields:
- Capital projects: ``mindate`` (start) and ``maxdate`` (end) are real.
- DOB permits: ``job_start_date`` is a real start; ``issuance_date`` only
  proves the permit was granted. Completion comes from sign-off fields.
- DOB NOW: ``first_permit_date`` proves a permit, not construction.
- ZAP: ``completed_date`` is the zoning approval, not construction end.
- DOB / DOB NOW: ``expiration_date`` on each permit.

End dates are never estimated. Without a real completion signal the end
stays None.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType

from changemap.compute.dates import parse_date, raw_field_date
from changemap.core.types import (
    PERMIT_EVENT_TYPES,
    EventSource,
    EventType,
    ImpactPhases,
    ProjectStatus,
    RawEvent,
)

logger = logging.getLogger(__name__)

PROJECT_STATUS_LABELS = MappingProxyType({
    ProjectStatus.PLANNING: "Planning",
    ProjectStatus.APPROVED: "Approved",
    ProjectStatus.ACTIVE: "In progress",
    ProjectStatus.STALLED: "Stalled",
    ProjectStatus.COMPLETED: "Completed",
})

PROJECT_STATUS_DESCRIPTIONS = MappingProxyType({
    ProjectStatus.PLANNING: "The project is in its planning phase",
    ProjectStatus.APPROVED: "The project is approved but work has not started",
    ProjectStatus.ACTIVE: "Work is in progress",
    ProjectStatus.STALLED: "The permit expired before the work was completed",
    ProjectStatus.COMPLETED: "Work is completed",
})


@dataclass(frozen=True)
class ExtractedDate:
    date: date
    is_estimated: bool
    source: str


@dataclass(frozen=True)
class DateRule:
    """One step of a first-match-wins date cascade.

    ``extract`` returns the candidate date for an event, or None when the
    event does not carry this signal.
    """

    name: str
    extract: Callable[[RawEvent], date | None]
    is_estimated: bool = False


def _event_date_of(event_type: EventType) -> Callable[[RawEvent], date | None]:
    def extract(event: RawEvent) -> date | None:
        if event.event_type != event_type:
            return None
        return parse_date(event.event_date)
    return extract


def _source_fields(fields: dict[EventSource, tuple[str, ...]]) -> Callable[[RawEvent], date | None]:
    """Extractor reading the first parseable field listed for the event's source."""
    def extract(event: RawEvent) -> date | None:
        for key in fields.get(event.source, ()):
            value = raw_field_date(event.raw_data, key)
            if value is not None:
                return value
        return None
    return extract


def _permit_event_date(event: RawEvent) -> date | None:
    if event.event_type not in PERMIT_EVENT_TYPES:
        return None
    return parse_date(event.event_date)


START_DATE_RULES: tuple[DateRule, ...] = (
    DateRule("construction_started event", _event_date_of(EventType.CONSTRUCTION_STARTED)),
    DateRule(
        "source start field",
        _source_fields({
            EventSource.CAPITAL: ("mindate",),
            EventSource.DOB: ("job_start_date",),
        }),
    ),
    DateRule(
        "permit issuance field",
        _source_fields({
            EventSource.DOB: ("issuance_date",),
            EventSource.DOB_NOW: ("first_permit_date",),
        }),
        is_estimated=True,
    ),
    DateRule("permit event date", _permit_event_date, is_estimated=True),
)

END_DATE_RULES: tuple[DateRule, ...] = (
    DateRule("construction_completed event", _event_date_of(EventType.CONSTRUCTION_COMPLETED)),
    DateRule(
        "source completion field",
        _source_fields({
            EventSource.CAPITAL: ("maxdate",),
            EventSource.DOB: (
                "fully_permitted_date",
                "certificate_of_occupancy_date",
                "signoff_date",
            ),
        }),
    ),
)

_approval_date = _source_fields({EventSource.ZAP: ("completed_date",)})
_permit_expiration = _source_fields({
    EventSource.DOB: ("expiration_date",),
    EventSource.DOB_NOW: ("expiration_date",),
})


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def estimate_impact_phases(
    events: Iterable[RawEvent],
    today: date | None = None,
) -> ImpactPhases:
    """Extract impact phases, milestone dates and project status from events.

    Args:
        events: The place's full event set, in any order.
        today: Reference date for the project status. Defaults to the
            current date.
    """
    today = today or date.today()
    ordered = chronological(events)
    phases = ImpactPhases()
    if not ordered:
        return phases

    start = first_match(START_DATE_RULES, ordered)
    if start is not None:
        phases.disruption_start = start.date
        phases.is_estimated_start = start.is_estimated

    end = first_match(END_DATE_RULES, ordered)
    if end is not None:
        phases.disruption_end = end.date
        phases.visible_change_date = end.date
        phases.is_estimated_end = end.is_estimated

    phases.approval_date = next(
        (d for d in map(_approval_date, ordered) if d is not None), None,
    )
    phases.permit_expiration = max(
        (d for d in map(_permit_expiration, ordered) if d is not None), default=None,
    )

    has_permit = any(e.event_type in PERMIT_EVENT_TYPES for e in ordered)
    phases.project_status = derive_project_status(phases, has_permit, today)
    return phases


def chronological(events: Iterable[RawEvent]) -> list[RawEvent]:
    """Sort events by event date, keeping input order among equal dates.

    Events whose date can't be parsed go last, still in input order.
    """
    keyed = [(parse_date(e.event_date), e) for e in events]
    keyed.sort(key=lambda item: (item[0] is None, item[0] or date.min))
    return [e for _, e in keyed]


def first_match(rules: Iterable[DateRule], events: list[RawEvent]) -> ExtractedDate | None:
    """Evaluate a date cascade: first rule with any matching event wins."""
    for rule in rules:
        for event in events:
            found = rule.extract(event)
            if found is not None:
                logger.debug("Date from %s (estimated=%s): %s", rule.name, rule.is_estimated, found)
                return ExtractedDate(date=found, is_estimated=rule.is_estimated, source=rule.name)
    return None


# ---------------------------------------------------------------------------
# Project status
# ---------------------------------------------------------------------------

def _is_completed(p: ImpactPhases, has_permit: bool, today: date) -> bool:
    return p.disruption_end is not None and p.disruption_end <= today


def _is_stalled(p: ImpactPhases, has_permit: bool, today: date) -> bool:
    # Permit lapsed with no completion evidence
    return (
        p.permit_expiration is not None
        and p.permit_expiration < today
        and p.disruption_end is None
    )


def _is_active(p: ImpactPhases, has_permit: bool, today: date) -> bool:
    return (
        p.disruption_start is not None
        and p.disruption_start <= today
        and (p.disruption_end is None or p.disruption_end > today)
    )


def _is_approved(p: ImpactPhases, has_permit: bool, today: date) -> bool:
    return p.approval_date is not None or has_permit


STATUS_RULES: tuple[tuple[ProjectStatus, Callable[[ImpactPhases, bool, date], bool]], ...] = (
    (ProjectStatus.COMPLETED, _is_completed),
    (ProjectStatus.STALLED, _is_stalled),
    (ProjectStatus.ACTIVE, _is_active),
    (ProjectStatus.APPROVED, _is_approved),
)


def derive_project_status(phases: ImpactPhases, has_permit: bool, today: date) -> ProjectStatus:
    """Place the project in its lifecycle. First matching rule wins."""
    for status, matches in STATUS_RULES:
        if matches(phases, has_permit, today):
            return status
    return ProjectStatus.PLANNING


# ---------------------------------------------------------------------------
# Phase utilities
# ---------------------------------------------------------------------------

def is_in_disruption_period(day: date, phases: ImpactPhases) -> bool:
    """True if ``day`` falls inside a fully known disruption window."""
    if phases.disruption_start is None or phases.disruption_end is None:
        return False
    return phases.disruption_start <= day <= phases.disruption_end


def phase_at_date(day: date, phases: ImpactPhases) -> str:
    if phases.disruption_start is None:
        return "Unknown"
    if day < phases.disruption_start:
        return "Before works"
    # An unknown end never reads as completed
    if phases.disruption_end is None or day <= phases.disruption_end:
        return "Under works"
    return "Completed"
