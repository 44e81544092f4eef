"""Tests for the intensity scorer."""

import pytest

from changemap.compute.intensity import (
    INTENSITY_WEIGHTS,
    MAX_INTENSITY,
    compute_intensity,
    intensity_color,
    intensity_label,
    maturity_level,
)
from changemap.core.types import EventType


class TestComputeIntensity:
    def test_empty_events(self):
        assert compute_intensity([]) == 0

    @pytest.mark.parametrize(
        ("event_type", "expected"),
        [("new_building", 50), ("demolition", 35), ("major_alteration", 30), ("scaffold", 3)],
    )
    def test_single_event_weight(self, make_event, event_type, expected):
        assert compute_intensity([make_event(event_type)]) == expected

    def test_combines_different_types(self, make_event):
        events = [make_event("new_building"), make_event("demolition")]
        assert compute_intensity(events) == 85

    def test_same_type_counted_once(self, make_event):
        """Three new_building filings weigh the same as one."""
        events = [make_event("new_building") for _ in range(3)]
        assert compute_intensity(events) == compute_intensity([make_event("new_building")])

    def test_minor_alteration_accumulates(self, make_event):
        events = [make_event("minor_alteration") for _ in range(4)]
        assert compute_intensity(events) == 4 * INTENSITY_WEIGHTS[EventType.MINOR_ALTERATION]

    def test_caps_at_max(self, make_event):
        events = [make_event(t) for t in ("new_building", "demolition", "major_alteration", "capital_project")]
        assert compute_intensity(events) == MAX_INTENSITY

    def test_cap_applies_to_total_not_per_step(self, make_event):
        """Cumulative minor work beyond the cap still clamps to 100."""
        events = [make_event("minor_alteration") for _ in range(15)]
        assert compute_intensity(events) == MAX_INTENSITY

    def test_unknown_type_weighs_zero(self, make_event):
        events = [make_event("unknown_type"), make_event("scaffold")]
        assert compute_intensity(events) == 3

    def test_status_events_weigh_zero(self, make_event):
        events = [make_event("construction_started"), make_event("construction_completed")]
        assert compute_intensity(events) == 0

    def test_order_independent(self, make_event):
        events = [make_event("minor_alteration"), make_event("new_building"), make_event("minor_alteration")]
        assert compute_intensity(events) == compute_intensity(list(reversed(events))) == 70

    def test_weight_table_covers_every_event_type(self):
        assert set(INTENSITY_WEIGHTS) == set(EventType)
        assert all(0 <= w <= 50 for w in INTENSITY_WEIGHTS.values())


class TestIntensityDisplay:
    @pytest.mark.parametrize(
        ("intensity", "label"),
        [(0, "Low"), (19, "Low"), (20, "Moderate"), (49, "Moderate"), (50, "High"), (80, "Very high"), (100, "Very high")],
    )
    def test_label(self, intensity, label):
        assert intensity_label(intensity) == label

    def test_color_bands(self):
        assert intensity_color(10) == "#94a3b8"
        assert intensity_color(45) == "#fbbf24"
        assert intensity_color(70) == "#f97316"
        assert intensity_color(95) == "#dc2626"

    def test_maturity_levels(self):
        assert maturity_level(0) == ("Stable", "#94a3b8")
        assert maturity_level(20)[0] == "Frictions"
        assert maturity_level(79)[0] == "Transformation"
        assert maturity_level(100)[0] == "Mutation"
