"""Tests for the auto-format pass."""
from __future__ import annotations

import pytest

from smooth_scrub.normalize import auto_format


def fmt(*lines: str) -> list[str]:
    return auto_format("\n".join(lines)).split("\n")


class TestPassThrough:
    def test_already_aligned_box_is_unchanged(self):
        lines = ["+-------+", "| Hello |", "+-------+"]
        assert fmt(*lines) == lines

    def test_connector_stub_keeps_its_indentation(self):
        lines = ["+----+", "|Box |", "+-+--+", "  |", "  +--+"]
        out = fmt(*lines)
        assert out[3] == "  |"
        assert out == lines

    def test_structure_only_lines_are_never_stretched(self):
        lines = ["+--v--+", "| a much longer line |", "+-----+"]
        assert fmt(*lines) == lines

    def test_prose_is_never_reflowed(self):
        lines = ["+--------------+", "plain words", "+--------------+"]
        assert fmt(*lines) == lines

    def test_indented_nested_box_line_is_unchanged(self):
        lines = ["+--------------+", "| ^Title^      |", "  | ^Bottom  |"]
        assert fmt(*lines)[2] == "  | ^Bottom  |"

    def test_indented_nested_box_under_a_wide_anchor_is_unchanged(self):
        lines = [
            "+--------------------+----------------+",
            "| very long anchor row to force width |",
            "+--------------------------------------+",
            "        +----v-----+",
            "        | ^Bottom  |",
            "        +----------+",
        ]
        out = fmt(*lines)
        assert out[4] == "        | ^Bottom  |"
        assert out[3:] == lines[3:]

    def test_indented_nested_text_line_is_unchanged(self):
        lines = ["+----------------+", "| Outer title    |", "  | API |"]
        assert fmt(*lines)[2] == "  | API |"

    def test_rich_walled_lines_are_never_stretched(self):
        lines = ["┌──────────┐", "│ short │"]
        assert fmt(*lines) == lines

    def test_shorter_text_line_without_centering_is_unchanged(self):
        lines = ["+-----------+", "| short |"]
        assert fmt(*lines) == lines

    @pytest.mark.parametrize("text", ["", "^", "^^", "{#", "{#color:red}", "|", "\n\n"])
    def test_odd_inputs_never_raise(self, text):
        assert isinstance(auto_format(text), str)


class TestBlocks:
    def test_blank_lines_separate_independent_blocks(self):
        text = "+--+\n| ^a^ |\n\n+------+\n| ^b^ |"
        out = auto_format(text).split("\n")
        assert out[2] == ""
        assert out[1] == "| ^a^ |"
        assert out[4] == "| ^b^  |"

    def test_whitespace_only_lines_become_empty(self):
        assert auto_format("a\n   \nb") == "a\n\nb"


class TestCentering:
    def test_recenters_to_the_block_width(self):
        lines = ["+--------------+", "| ^Title^      |"]
        assert fmt(*lines)[1] == "|   ^Title^    |"

    def test_pads_short_centered_line_to_block_width(self):
        lines = ["+----------+", "|^Hi^|"]
        assert fmt(*lines)[1] == "|   ^Hi^   |"

    def test_odd_padding_puts_the_extra_space_on_the_right(self):
        lines = ["+-----------+", "|^Hi^|"]
        assert fmt(*lines)[1] == "|   ^Hi^    |"

    def test_unbounded_marker_is_centered_too(self):
        lines = ["+----------+", "| ^Hi |"]
        assert fmt(*lines)[1] == "|   ^Hi    |"

    def test_color_marker_follows_the_content(self):
        lines = ["+----------+", "|{#color:red}^Hi^|"]
        assert fmt(*lines)[1] == "|   {#color:red}^Hi^   |"

    def test_marker_after_the_suffix_stays_after_it(self):
        lines = ["+----------+", "|^Hi^|{#bg:red}"]
        assert fmt(*lines)[1] == "|   ^Hi^   |{#bg:red}"

    def test_markers_do_not_count_towards_width(self):
        lines = ["+------+", "|{#color:red}^Hi^ |"]
        assert fmt(*lines)[1] == "| {#color:red}^Hi^ |"

    def test_rejected_marker_text_survives_recentering(self):
        lines = ["+----------+", "|{#foo:red}^Hi^|"]
        assert fmt(*lines)[1] == "|   {#foo:red}^Hi^   |"


class TestRuleExtension:
    def test_extends_a_rule_with_its_own_glyph(self):
        lines = ["+--^--+", "| wide text here |"]
        assert fmt(*lines)[0] == "+--^--" + "-" * 11 + "+"

    def test_marker_on_the_suffix_moves_with_it(self):
        lines = ["+--^--{#stroke:red}+", "| wide text here |"]
        assert fmt(*lines)[0] == "+--^--" + "-" * 11 + "{#stroke:red}+"

    def test_marker_after_the_line_stays_at_the_end(self):
        lines = ["+--^--+{#stroke:red}", "| wide text here |"]
        assert fmt(*lines)[0] == "+--^--" + "-" * 11 + "+{#stroke:red}"

    def test_unsafe_marker_text_moves_with_the_suffix(self):
        lines = ["+--^--{#stroke:url(x)}+", "| wide text here |"]
        assert fmt(*lines)[0] == "+--^--" + "-" * 11 + "{#stroke:url(x)}+"

    def test_double_rules_extend_with_double_lines(self):
        lines = ["══^══┐", "│ wide text │"]
        assert fmt(*lines)[0] == "══^══" + "═" * 7 + "┐"


class TestIdempotence:
    @pytest.mark.parametrize(
        "text",
        [
            "+--------------+\n| ^Title^      |\n+--------------+",
            "+----------+\n|^Hi^|",
            "+--^--+\n| wide text here |",
        ],
    )
    def test_formatting_twice_changes_nothing_more(self, text):
        once = auto_format(text)
        assert auto_format(once) == once
