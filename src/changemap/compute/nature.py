"""Transformation nature derivation: what kind of change is happening.

Each event type maps to one substantive nature or to None (neutral).
When several natures are present, occurrence counts are weighted by
significance; if the two best scores are closer than the ambiguity
margin, the place is reported as mixed.
"""

from collections import Counter
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from changemap.core.types import EventType, Nature, RawEvent

# Minimum lead the top weighted score needs over the runner-up
NATURE_AMBIGUITY_MARGIN = 3

NATURE_MAPPING: Mapping[EventType, Nature | None] = MappingProxyType({
    EventType.NEW_BUILDING: Nature.DENSIFICATION,
    EventType.DEMOLITION: Nature.DEMOLITION,
    EventType.MAJOR_ALTERATION: Nature.RENOVATION,
    EventType.MINOR_ALTERATION: Nature.RENOVATION,
    EventType.MECHANICAL: Nature.RENOVATION,
    EventType.PLUMBING: Nature.RENOVATION,
    EventType.CAPITAL_PROJECT: Nature.INFRASTRUCTURE,
    # Neutral
    EventType.SCAFFOLD: None,
    EventType.EQUIPMENT_WORK: None,
    EventType.ULURP_FILED: None,
    EventType.ULURP_APPROVED: None,
    EventType.ULURP_DENIED: None,
    EventType.ZAP_FILED: None,
    EventType.ZAP_APPROVED: None,
    EventType.CEQR_EAS: None,
    EventType.CEQR_EIS_DRAFT: None,
    EventType.CEQR_EIS_FINAL: None,
    EventType.CEQR_COMPLETED: None,
    EventType.CONSTRUCTION_STARTED: None,
    EventType.CONSTRUCTION_COMPLETED: None,
    EventType.OTHER: None,
})

NATURE_WEIGHTS: Mapping[Nature, int] = MappingProxyType({
    Nature.DENSIFICATION: 5,
    Nature.DEMOLITION: 4,
    Nature.INFRASTRUCTURE: 3,
    Nature.RENOVATION: 2,
    Nature.MIXED: 1,
})

NATURE_LABELS: Mapping[Nature, str] = MappingProxyType({
    Nature.DENSIFICATION: "Densification",
    Nature.RENOVATION: "Renovation",
    Nature.DEMOLITION: "Demolition",
    Nature.INFRASTRUCTURE: "Infrastructure",
    Nature.MIXED: "Mixed",
})

NATURE_ICONS: Mapping[Nature, str] = MappingProxyType({
    Nature.DENSIFICATION: "building",
    Nature.RENOVATION: "wrench",
    Nature.DEMOLITION: "trash",
    Nature.INFRASTRUCTURE: "road",
    Nature.MIXED: "layers",
})


def weighted_scores(counts: Mapping[Nature, int]) -> list[tuple[Nature, int]]:
    """Rank natures by count x significance weight, best first.

    Equal scores are ordered by significance so the ranking never depends
    on the order in which natures were first seen.
    """
    scored = [(nature, count * NATURE_WEIGHTS[nature]) for nature, count in counts.items() if count > 0]
    return sorted(scored, key=lambda item: (-item[1], -NATURE_WEIGHTS[item[0]]))


def derive_nature(
    events: Iterable[RawEvent],
    margin: int = NATURE_AMBIGUITY_MARGIN,
) -> Nature:
    """Return the dominant nature of change signalled by ``events``."""
    counts: Counter[Nature] = Counter()
    for event in events:
        nature = NATURE_MAPPING.get(event.event_type)
        if nature is not None:
            counts[nature] += 1

    if not counts:
        return Nature.MIXED
    if len(counts) == 1:
        return next(iter(counts))

    ranked = weighted_scores(counts)
    (top_nature, top_score), (_, runner_up) = ranked[0], ranked[1]
    if top_score - runner_up < margin:
        return Nature.MIXED
    return top_nature
