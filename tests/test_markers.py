"""Tests for inline style markers and color safety."""
from __future__ import annotations

import pytest

from smooth_scrub.markers import (
    color_at,
    format_marker,
    inject_markers,
    inject_spans,
    parse_line,
)
from smooth_scrub.theme import CSS_NAMED_COLORS, is_safe_color
from smooth_scrub.types import StyleMarker


def make_marker(kind="color", value="red", column=0) -> StyleMarker:
    return StyleMarker(kind=kind, value=value, column=column)


# ============================================================================
# Color safety
# ============================================================================


class TestIsSafeColor:
    @pytest.mark.parametrize("value", ["#abc", "#ABC", "#a0b1c2", "#FFFFFF"])
    def test_accepts_hex_colors(self, value):
        assert is_safe_color(value)

    @pytest.mark.parametrize("value", sorted(CSS_NAMED_COLORS))
    def test_accepts_every_named_color(self, value):
        assert is_safe_color(value)

    def test_named_colors_are_case_insensitive(self):
        assert is_safe_color("Red")

    @pytest.mark.parametrize(
        "value",
        [
            "url(#x)",
            "red;",
            "rgb(1,2,3)",
            "red)",
            "{red}",
            "#abc;",
            "url(javascript:alert(1))",
        ],
    )
    def test_rejects_anything_with_call_or_block_syntax(self, value):
        assert not is_safe_color(value)

    @pytest.mark.parametrize("value", ["#ab", "#abcd", "#ggg", "notacolor", ""])
    def test_rejects_malformed_or_unknown_values(self, value):
        assert not is_safe_color(value)


# ============================================================================
# Parsing
# ============================================================================


class TestParseLine:
    def test_marker_free_line_is_returned_untouched(self):
        parsed = parse_line("| plain {text} |")
        assert parsed.clean_line == "| plain {text} |"
        assert parsed.markers == []
        assert parsed.had_markers is False

    def test_strips_marker_and_records_its_column(self):
        parsed = parse_line("| {#color:red}API |")
        assert parsed.clean_line == "| API |"
        assert parsed.markers == [make_marker("color", "red", 2)]
        assert parsed.had_markers is True

    def test_bg_key_maps_to_background_kind(self):
        parsed = parse_line("|{#bg:#f5f5f5} |")
        assert parsed.markers == [make_marker("background", "#f5f5f5", 1)]

    def test_stroke_marker(self):
        parsed = parse_line("+-{#stroke:blue}-+")
        assert parsed.clean_line == "+--+"
        assert parsed.markers == [make_marker("stroke", "blue", 2)]

    def test_columns_count_graphemes_not_code_points(self):
        parsed = parse_line("e\u0301{#color:red}x")
        assert parsed.markers[0].column == 1

    def test_unknown_kind_is_stripped_without_a_marker(self):
        parsed = parse_line("{#foo:red}A")
        assert parsed.clean_line == "A"
        assert parsed.markers == []
        assert parsed.had_markers is True

    @pytest.mark.parametrize(
        "raw",
        ["{#bg:url(js)}A", "{#color:rgb(1,2,3)}A", "{#stroke:red;}A"],
    )
    def test_unsafe_values_are_stripped_without_a_marker(self, raw):
        parsed = parse_line(raw)
        assert parsed.clean_line == "A"
        assert parsed.markers == []

    def test_marker_revealed_by_inner_strip_is_also_stripped(self):
        parsed = parse_line("{#co{#color:red}lor:blue}X")
        assert parsed.clean_line == "X"
        assert [m.value for m in parsed.markers] == ["red", "blue"]
        assert all(m.column == 0 for m in parsed.markers)

    @pytest.mark.parametrize(
        "raw",
        [
            "{#color:red}Hello",
            "{#co{#color:red}lor:blue}X",
            "a{#bg:{#bg:red}}b",
            "{#{#foo:x}color:red}z",
        ],
    )
    def test_stripping_is_idempotent(self, raw):
        once = parse_line(raw).clean_line
        assert parse_line(once).clean_line == once
        assert parse_line(once).had_markers is False


# ============================================================================
# Formatting and lookup
# ============================================================================


class TestInjectMarkers:
    def test_format_marker_uses_the_short_key(self):
        assert format_marker(make_marker("background", "#fff", 0)) == "{#bg:#fff}"

    def test_inject_restores_the_raw_line(self):
        raw = "| {#color:red}API{#bg:#eee} |"
        parsed = parse_line(raw)
        assert inject_markers(parsed.clean_line, parsed.markers) == raw

    def test_columns_past_the_end_are_appended(self):
        assert inject_markers("ab", [make_marker(column=10)]) == "ab{#color:red}"


class TestInjectSpans:
    def test_inject_restores_the_raw_line(self):
        raw = "| {#color:red}API{#bg:#eee} |"
        parsed = parse_line(raw)
        assert inject_spans(parsed.clean_line, parsed.spans) == raw

    def test_rejected_markers_keep_their_source_text(self):
        raw = "{#foo:red}A{#bg:url(js)}"
        parsed = parse_line(raw)
        assert parsed.markers == []
        assert parsed.spans == [(0, "{#foo:red}"), (1, "{#bg:url(js)}")]
        assert inject_spans(parsed.clean_line, parsed.spans) == raw

    def test_columns_past_the_end_are_appended(self):
        assert inject_spans("ab", [(10, "{#color:red}")]) == "ab{#color:red}"

    def test_shared_columns_keep_their_order(self):
        assert inject_spans("ab", [(1, "{#foo:x}"), (1, "{#color:red}")]) == (
            "a{#foo:x}{#color:red}b"
        )


class TestColorAt:
    def test_falls_back_to_default_before_any_marker(self):
        markers = [make_marker(column=3)]
        assert color_at(markers, 2, "#444") == "#444"

    def test_latest_marker_at_or_before_column_wins(self):
        markers = [make_marker(value="red", column=0), make_marker(value="blue", column=4)]
        assert color_at(markers, 3, "#444") == "red"
        assert color_at(markers, 4, "#444") == "blue"

    def test_ignores_box_markers(self):
        markers = [make_marker(kind="background", value="blue", column=0)]
        assert color_at(markers, 5, "#444") == "#444"
