"""Tests for mode detection and structural glyph classification."""
from __future__ import annotations

import pytest

from smooth_scrub.classify import Classifier, detect_rich_mode, glyph_traits


class TestDetectRichMode:
    def test_plain_ascii_art_is_not_rich(self):
        assert detect_rich_mode("+--+\n|  |\n+--+") is False

    @pytest.mark.parametrize("glyph", list("─│┌┐└┘├┤┬┴┼║"))
    def test_any_box_drawing_glyph_switches_to_rich(self, glyph):
        assert detect_rich_mode(f"text {glyph} more") is True

    def test_double_rule_alone_does_not_switch_mode(self):
        assert detect_rich_mode("═══") is False


class TestAsciiClassifier:
    def setup_method(self):
        self.c = Classifier(rich=False)

    def test_punctuation_structure(self):
        for ch in "|_=/\\*+-v<>":
            assert self.c.is_structure(ch), ch

    def test_caret_is_never_structure(self):
        assert not self.c.is_structure("^")

    def test_letters_are_not_structure(self):
        assert not self.c.is_structure("a")
        assert not self.c.is_structure("V")

    def test_pipe_is_a_vertical_wall(self):
        assert self.c.is_vertical_wall("|")
        assert not self.c.is_vertical_wall("+")

    def test_plus_pipe_and_v_link_vertically(self):
        for ch in "|+v":
            assert self.c.connects_down(ch)
            assert self.c.connects_up(ch)
        assert not self.c.connects_down("-")

    def test_arrowheads_end_at_center(self):
        assert self.c.ends_at_center("^")
        assert self.c.ends_at_center("v")
        assert not self.c.ends_at_center("|")

    def test_plus_is_every_kind_of_box_corner(self):
        traits = self.c.traits("+")
        assert traits.top_left and traits.top_right
        assert traits.bottom_left and traits.bottom_right


class TestRichClassifier:
    def setup_method(self):
        self.c = Classifier(rich=True)

    def test_ascii_punctuation_is_text_in_rich_mode(self):
        assert not self.c.is_structure("|")
        assert not self.c.is_structure("-")
        assert not self.c.is_structure("+")

    def test_box_glyphs_are_structure(self):
        for ch in "─│┌┐└┘├┤┬┴┼║":
            assert self.c.is_structure(ch), ch

    def test_horizontal_rules_never_link_vertically(self):
        assert not self.c.connects_down("─")
        assert not self.c.connects_up("─")

    def test_corners_link_in_their_open_direction(self):
        assert self.c.connects_down("┌")
        assert not self.c.connects_up("┌")
        assert self.c.connects_up("└")
        assert not self.c.connects_down("└")

    def test_corners_start_and_end_at_center(self):
        assert self.c.starts_at_center("┌")
        assert self.c.ends_at_center("┘")
        assert not self.c.starts_at_center("│")

    def test_junctions_are_corners_and_walls_are_not(self):
        assert self.c.is_corner("┼")
        assert not self.c.is_corner("│")
        assert self.c.is_vertical_wall("║")

    def test_tee_glyphs_open_boxes_on_their_side(self):
        assert self.c.traits("├").top_left
        assert self.c.traits("├").bottom_left
        assert not self.c.traits("├").top_right


class TestGlyphTraits:
    def test_same_input_returns_cached_traits(self):
        assert glyph_traits("+", False) is glyph_traits("+", False)

    def test_for_document_picks_mode_from_text(self):
        assert Classifier.for_document("┌┐").rich is True
        assert Classifier.for_document("+-+").rich is False

    def test_repr_names_the_mode(self):
        assert repr(Classifier(True)) == "Classifier(rich=True)"
