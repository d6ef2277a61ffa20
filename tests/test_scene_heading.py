"""Tests for the scene heading matcher."""

from collections.abc import Iterator

import pytest

from parsers.scene_heading import (
    HeadingKind,
    count_scene_markers,
    find_heading_matches,
    is_transition,
    iter_heading_matches,
    looks_like_heading,
)


class TestHeadingForms:
    """Single-line heading recognition."""

    def test_standard_with_time(self):
        [match] = find_heading_matches("INT. KITCHEN - DAY")

        assert match.kind == HeadingKind.STANDARD_WITH_TIME
        assert match.location == "KITCHEN"
        assert match.time_of_day == "DAY"
        assert match.matched_text == "INT. KITCHEN - DAY"
        assert match.offset == 0

    def test_time_without_dash(self):
        [match] = find_heading_matches("EXT. STREET NIGHT")

        assert match.location == "STREET"
        assert match.time_of_day == "NIGHT"

    def test_int_ext_combined(self):
        [match] = find_heading_matches("INT./EXT. CAR - MOMENTS LATER")

        assert match.location == "CAR"
        assert match.time_of_day == "MOMENTS LATER"

    def test_bare_upper_case_prefix(self):
        [match] = find_heading_matches("INTERIOR HOUSE - NIGHT")

        assert match.location == "HOUSE"
        assert match.time_of_day == "NIGHT"

    def test_bare_prefix_short_location(self):
        [match] = find_heading_matches("INT KITCHEN")

        assert match.kind == HeadingKind.STANDARD
        assert match.location == "KITCHEN"
        assert match.time_of_day is None

    def test_bare_prefix_in_action_block(self):
        text = "INT. CASTLE - NIGHT\n\nEXTERIOR WALLS CRUMBLE INTO DUST.\n\nEXT COURTYARD\nSilence."

        matches = find_heading_matches(text)

        assert [m.location for m in matches] == ["CASTLE", "COURTYARD"]

    def test_lower_case_dotted_prefix(self):
        [match] = find_heading_matches("int. kitchen - day")

        assert match.location == "kitchen"
        assert match.time_of_day == "DAY"

    def test_heading_without_time(self):
        [match] = find_heading_matches("INT. OFFICE")

        assert match.kind == HeadingKind.STANDARD
        assert match.location == "OFFICE"
        assert match.time_of_day is None

    def test_leading_scene_number(self):
        [match] = find_heading_matches("12 INT. OFFICE - NIGHT")

        assert match.kind == HeadingKind.STANDARD_WITH_TIME
        assert match.scene_number == "12"
        assert match.location == "OFFICE"

    def test_numbered_heading(self):
        [match] = find_heading_matches("12. THE ROOFTOP")

        assert match.kind == HeadingKind.NUMBERED
        assert match.scene_number == "12"
        assert match.location == "THE ROOFTOP"

    def test_numbered_int_heading_matched_once(self):
        matches = find_heading_matches("12. INT. OFFICE - NIGHT")

        assert len(matches) == 1
        assert matches[0].kind == HeadingKind.STANDARD_WITH_TIME

    @pytest.mark.parametrize(
        "line",
        [
            "Interior design is hard.",
            "INTO THE WOODS",
            "EXTRA! EXTRA!",
            "EXTERIOR WALLS CRUMBLE INTO DUST.",
            "INT ERROR HANDLING IS BROKEN",
            "EXT",
            "He walks into INT. KITCHEN - DAY",
            "John enters.",
            "",
        ],
    )
    def test_non_headings(self, line):
        assert find_heading_matches(line) == []
        assert looks_like_heading(line) is False


class TestIterHeadingMatches:
    """Scanning whole texts."""

    TEXT = (
        "FADE IN:\n\n"
        "INT. HOUSE - DAY\nWords.\n\n"
        "5. THE GARDEN\nMore.\n\n"
        "EXT. ROAD\nEnd."
    )

    def test_ordered_and_non_overlapping(self):
        matches = find_heading_matches(self.TEXT)

        assert [m.location for m in matches] == ["HOUSE", "THE GARDEN", "ROAD"]
        assert [m.kind for m in matches] == [
            HeadingKind.STANDARD_WITH_TIME,
            HeadingKind.NUMBERED,
            HeadingKind.STANDARD,
        ]
        offsets = [m.offset for m in matches]
        assert offsets == sorted(offsets)
        for previous, current in zip(matches, matches[1:]):
            assert previous.end <= current.offset

    def test_offsets_point_at_heading_text(self):
        for match in find_heading_matches(self.TEXT):
            assert self.TEXT[match.offset :].startswith(match.matched_text)

    def test_returns_lazy_iterator(self):
        assert isinstance(iter_heading_matches(self.TEXT), Iterator)

    def test_iterators_are_independent(self):
        first = iter_heading_matches(self.TEXT)
        second = iter_heading_matches(self.TEXT)

        a1 = next(first)
        a2 = next(first)
        b1 = next(second)

        assert a1 == b1
        assert a2.offset > b1.offset
        assert len(list(second)) == 2

    def test_repeated_scans_agree(self):
        assert find_heading_matches(self.TEXT) == find_heading_matches(self.TEXT)


class TestTransitions:
    @pytest.mark.parametrize("line", ["CUT TO:", "FADE IN:", "fade out.", "SMASH CUT TO:", "DISSOLVE TO:"])
    def test_transitions(self, line):
        assert is_transition(line) is True

    @pytest.mark.parametrize("line", ["CUT THE ROPE", "INT. HOUSE - DAY", "ANNA"])
    def test_not_transitions(self, line):
        assert is_transition(line) is False

    def test_count_scene_markers(self, short_script):
        # 4 headings + FADE IN + CUT TO
        assert count_scene_markers(short_script) == 6
