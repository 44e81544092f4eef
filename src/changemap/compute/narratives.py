"""Human-readable summaries for a transformation state.

Users should understand a place at a glance, so narratives avoid agency
acronyms (NB, A1, ULURP) and speak in plain counts and years.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from changemap.core.types import Certainty, EventType, ImpactPhases, Narratives, Nature, RawEvent

GENERIC_ACTIVITY = "Transformation activity"
ONE_LINER_SEPARATOR = " + "

# Progress-toned wording rewritten for projects still under discussion
REVIEW_PHRASES: tuple[tuple[str, str], ...] = (
    ("in progress", "under review"),
    ("in development", "under review"),
)


@dataclass
class EventCounts:
    new_buildings: int = 0
    demolitions: int = 0
    major_works: int = 0
    minor_works: int = 0
    capital_projects: int = 0


_COUNTED_TYPES = {
    EventType.NEW_BUILDING: "new_buildings",
    EventType.DEMOLITION: "demolitions",
    EventType.MAJOR_ALTERATION: "major_works",
    EventType.MINOR_ALTERATION: "minor_works",
    EventType.CAPITAL_PROJECT: "capital_projects",
}

# Headline priority: (count attribute, singular headline, plural headline)
_HEADLINES: tuple[tuple[str, str, str], ...] = (
    ("new_buildings", "New building in progress", "{n} new buildings in progress"),
    ("demolitions", "Demolition in progress", "{n} demolitions in progress"),
    ("major_works", "Major renovation in progress", "{n} major renovations in progress"),
    ("capital_projects", "Public project in development", "{n} public projects in development"),
    ("minor_works", "Renovation work", "{n} renovation projects"),
)

# One-liner fragments: (count attribute, singular noun)
_FRAGMENTS: tuple[tuple[str, str], ...] = (
    ("new_buildings", "building"),
    ("demolitions", "demolition"),
    ("major_works", "major renovation"),
    ("capital_projects", "public project"),
)


def format_count(count: int, singular: str, plural: str | None = None) -> str:
    noun = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {noun}"


def count_event_types(events: Iterable[RawEvent]) -> EventCounts:
    counts = EventCounts()
    for event in events:
        attr = _COUNTED_TYPES.get(event.event_type)
        if attr is not None:
            setattr(counts, attr, getattr(counts, attr) + 1)
    return counts


def generate_narratives(
    events: Iterable[RawEvent],
    nature: Nature,
    certainty: Certainty,
    phases: ImpactPhases,
    today: date | None = None,
) -> Narratives:
    """Build the headline, one-liner and disruption summary for a place."""
    counts = count_event_types(events)
    return Narratives(
        headline=generate_headline(counts, certainty),
        one_liner=generate_one_liner(counts),
        disruption_summary=generate_disruption_summary(phases, today),
    )


def generate_headline(counts: EventCounts, certainty: Certainty) -> str:
    """Short headline for the most significant kind of work present."""
    headline = None
    for attr, singular, plural in _HEADLINES:
        n = getattr(counts, attr)
        if n > 0:
            headline = singular if n == 1 else plural.format(n=n)
            break

    if headline is None:
        headline = GENERIC_ACTIVITY

    if certainty == Certainty.DISCUSSION:
        for progress, review in REVIEW_PHRASES:
            headline = headline.replace(progress, review)

    return headline


def generate_one_liner(counts: EventCounts) -> str:
    """Factual count summary, e.g. "2 buildings + 1 demolition"."""
    parts = [
        format_count(getattr(counts, attr), noun)
        for attr, noun in _FRAGMENTS
        if getattr(counts, attr) > 0
    ]
    if parts:
        return ONE_LINER_SEPARATOR.join(parts)
    if counts.minor_works > 0:
        return format_count(counts.minor_works, "minor renovation")
    return GENERIC_ACTIVITY


def generate_disruption_summary(phases: ImpactPhases, today: date | None = None) -> str | None:
    """Describe the disruption window. None unless both ends are known."""
    start, end = phases.disruption_start, phases.disruption_end
    if start is None or end is None:
        return None

    today = today or date.today()

    if end <= today:
        return f"Completed in {end.year}"

    if start <= today:
        if start.year == end.year:
            return f"In progress until late {end.year}"
        return f"In progress until {end.year}"

    if start.year == end.year:
        return f"Expected disruption in {start.year}"
    return f"Expected disruption {start.year}–{end.year}"


def generate_full_narrative(
    events: Iterable[RawEvent],
    nature: Nature,
    certainty: Certainty,
    phases: ImpactPhases,
    today: date | None = None,
) -> str:
    """Join the narrative parts into one paragraph for display."""
    narratives = generate_narratives(events, nature, certainty, phases, today)

    sentences = [narratives.headline]
    if narratives.one_liner and narratives.one_liner != narratives.headline:
        sentences.append(narratives.one_liner)
    if narratives.disruption_summary:
        sentences.append(narratives.disruption_summary)

    return ". ".join(sentences) + "."
