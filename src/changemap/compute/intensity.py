"""Transformation intensity score.

Pure function over a place's events. Each event type carries a fixed
weight; repeated filings of the same kind count once, except minor
alterations, which accumulate. The sum is capped at MAX_INTENSITY.
"""

from collections.abc import Iterable
from types import MappingProxyType

from changemap.core.types import EventType, RawEvent

MAX_INTENSITY = 100

# Only this type adds its weight on every occurrence
CUMULATIVE_EVENT_TYPE = EventType.MINOR_ALTERATION

INTENSITY_WEIGHTS = MappingProxyType({
    # Minor works
    EventType.SCAFFOLD: 3,
    EventType.EQUIPMENT_WORK: 3,
    EventType.PLUMBING: 5,
    EventType.MECHANICAL: 5,
    # Alterations
    EventType.MINOR_ALTERATION: 10,
    EventType.MAJOR_ALTERATION: 30,
    # Major transformations
    EventType.DEMOLITION: 35,
    EventType.NEW_BUILDING: 50,
    # Planning signals
    EventType.ZAP_FILED: 8,
    EventType.ZAP_APPROVED: 20,
    EventType.ULURP_FILED: 10,
    EventType.ULURP_APPROVED: 25,
    EventType.ULURP_DENIED: 0,
    # Environmental review
    EventType.CEQR_EAS: 12,
    EventType.CEQR_EIS_DRAFT: 18,
    EventType.CEQR_EIS_FINAL: 22,
    EventType.CEQR_COMPLETED: 15,
    # Public projects
    EventType.CAPITAL_PROJECT: 25,
    # Status changes are already counted through their permit
    EventType.CONSTRUCTION_STARTED: 0,
    EventType.CONSTRUCTION_COMPLETED: 0,
    EventType.OTHER: 0,
})

# (upper bound exclusive, label, hex color)
MATURITY_LEVELS: tuple[tuple[int, str, str], ...] = (
    (20, "Stable", "#94a3b8"),
    (50, "Frictions", "#fbbf24"),
    (80, "Transformation", "#f97316"),
    (MAX_INTENSITY + 1, "Mutation", "#dc2626"),
)


def compute_intensity(events: Iterable[RawEvent]) -> int:
    """Score a place's change activity in [0, MAX_INTENSITY].

    Unknown event types weigh 0. The cap is applied once, on the total.
    """
    score = 0
    seen_types: set[str] = set()

    for event in events:
        weight = INTENSITY_WEIGHTS.get(event.event_type, 0)
        if event.event_type == CUMULATIVE_EVENT_TYPE:
            score += weight
        elif event.event_type not in seen_types:
            score += weight
            seen_types.add(event.event_type)

    return max(0, min(score, MAX_INTENSITY))


def intensity_label(intensity: int) -> str:
    if intensity < 20:
        return "Low"
    if intensity < 50:
        return "Moderate"
    if intensity < 80:
        return "High"
    return "Very high"


def intensity_color(intensity: int) -> str:
    if intensity < 30:
        return "#94a3b8"  # slate-400
    if intensity < 60:
        return "#fbbf24"  # amber-400
    if intensity < 80:
        return "#f97316"  # orange-500
    return "#dc2626"  # red-600


def maturity_level(intensity: int) -> tuple[str, str]:
    """Return (label, color) of the maturity band containing ``intensity``."""
    for upper, label, color in MATURITY_LEVELS:
        if intensity < upper:
            return label, color
    _, label, color = MATURITY_LEVELS[-1]
    return label, color
