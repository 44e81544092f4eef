"""Tests for certainty classification."""

import pytest

from changemap.compute.certainty import certainty_opacity, derive_certainty, shows_dashed_border
from changemap.core.types import Certainty


class TestDeriveCertainty:
    def test_empty_events(self):
        assert derive_certainty([]) == Certainty.DISCUSSION

    @pytest.mark.parametrize("event_type", ["construction_started", "construction_completed"])
    def test_certain_signals(self, make_event, event_type):
        assert derive_certainty([make_event(event_type)]) == Certainty.CERTAIN

    @pytest.mark.parametrize(
        "event_type",
        ["new_building", "major_alteration", "demolition", "zap_approved",
         "ulurp_approved", "ceqr_eis_final", "ceqr_completed"],
    )
    def test_probable_signals(self, make_event, event_type):
        assert derive_certainty([make_event(event_type)]) == Certainty.PROBABLE

    @pytest.mark.parametrize("event_type", ["ulurp_filed", "zap_filed", "ceqr_eas", "ceqr_eis_draft"])
    def test_discussion_signals(self, make_event, event_type):
        assert derive_certainty([make_event(event_type)]) == Certainty.DISCUSSION

    def test_certain_beats_probable(self, make_event):
        events = [make_event("new_building"), make_event("construction_started")]
        assert derive_certainty(events) == Certainty.CERTAIN

    def test_probable_beats_discussion(self, make_event):
        events = [make_event("zap_filed", source="zap"), make_event("zap_approved", source="zap")]
        assert derive_certainty(events) == Certainty.PROBABLE

    def test_certain_beats_discussion(self, make_event):
        events = [make_event("ulurp_filed", source="zap"), make_event("construction_completed")]
        assert derive_certainty(events) == Certainty.CERTAIN

    def test_unknown_types_default_to_discussion(self, make_event):
        events = [make_event("scaffold"), make_event("something_new")]
        assert derive_certainty(events) == Certainty.DISCUSSION

    def test_denied_application_gives_no_signal(self, make_event):
        assert derive_certainty([make_event("ulurp_denied", source="zap")]) == Certainty.DISCUSSION


class TestCertaintyDisplay:
    def test_opacity_grows_with_certainty(self):
        assert certainty_opacity(Certainty.DISCUSSION) == 0.4
        assert certainty_opacity(Certainty.PROBABLE) == 0.7
        assert certainty_opacity(Certainty.CERTAIN) == 1.0

    def test_dashed_border_only_for_discussion(self):
        assert shows_dashed_border(Certainty.DISCUSSION)
        assert not shows_dashed_border(Certainty.PROBABLE)
        assert not shows_dashed_border(Certainty.CERTAIN)
