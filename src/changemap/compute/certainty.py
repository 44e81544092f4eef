"""Certainty derivation: could it happen, is it likely, is it happening.

Hierarchy is certain > probable > discussion. The strongest tier with
any matching event wins.
"""

from collections.abc import Iterable

from changemap.core.types import Certainty, EventType, RawEvent

CERTAIN_EVENTS = frozenset({
    EventType.CONSTRUCTION_STARTED,
    EventType.CONSTRUCTION_COMPLETED,
})

# Approved but not started
PROBABLE_EVENTS = frozenset({
    EventType.NEW_BUILDING,
    EventType.MAJOR_ALTERATION,
    EventType.DEMOLITION,
    EventType.ZAP_APPROVED,
    EventType.ULURP_APPROVED,
    EventType.CEQR_EIS_FINAL,
    EventType.CEQR_COMPLETED,
})

# Filed but not approved
DISCUSSION_EVENTS = frozenset({
    EventType.ULURP_FILED,
    EventType.ZAP_FILED,
    EventType.CEQR_EAS,
    EventType.CEQR_EIS_DRAFT,
})

CERTAINTY_TIERS: tuple[tuple[Certainty, frozenset[EventType]], ...] = (
    (Certainty.CERTAIN, CERTAIN_EVENTS),
    (Certainty.PROBABLE, PROBABLE_EVENTS),
    (Certainty.DISCUSSION, DISCUSSION_EVENTS),
)

_OPACITY = {
    Certainty.DISCUSSION: 0.4,
    Certainty.PROBABLE: 0.7,
    Certainty.CERTAIN: 1.0,
}


def derive_certainty(events: Iterable[RawEvent]) -> Certainty:
    """Return the strongest certainty tier signalled by ``events``.

    Unknown or unlisted types give no signal; the default is discussion.
    """
    event_types = {event.event_type for event in events}

    for certainty, signals in CERTAINTY_TIERS:
        if not event_types.isdisjoint(signals):
            return certainty

    return Certainty.DISCUSSION


def certainty_opacity(certainty: Certainty) -> float:
    return _OPACITY[certainty]


def shows_dashed_border(certainty: Certainty) -> bool:
    """Projects still under discussion render with a dashed outline."""
    return certainty == Certainty.DISCUSSION
