from __future__ import annotations

# ============================================================================
# Mode detection and structural glyph classification
#
# Rich mode is chosen once per document, when any Unicode box-drawing glyph
# is present; otherwise the document is read as ASCII art. Every component
# that needs to know whether a glyph is structure (run detection, walls,
# box detection, the normalizer) asks a Classifier built for that mode, so
# they cannot disagree.
# ============================================================================

from dataclasses import dataclass
from functools import lru_cache

RICH_MODE_GLYPHS = "─│┌┐└┘├┤┬┴┼║"

_RICH_STRUCTURE = frozenset(RICH_MODE_GLYPHS)
# `^` is deliberately absent: it is the centering marker.
_ASCII_STRUCTURE = _RICH_STRUCTURE | frozenset("|_=/\\*+-v<>")

_RICH_VERTICAL = frozenset("│║")
_ASCII_VERTICAL = frozenset("│║|")
_CORNERS = frozenset("┌┐└┘├┤┬┴┼")

_RICH_RULES = frozenset("─═")
_ASCII_RULES = frozenset("-=_")

_RICH_DOWN = frozenset("│║┌┐├┤┬┼╔╗╠╣╦╬╓╖╒╕╥╤╫")
_RICH_UP = frozenset("│║└┘├┤┴┼╚╝╠╣╩╬╙╜╘╛╨╧╫")
_ASCII_LINKS = frozenset("|+v")

_RICH_START_CENTER = frozenset("┌┐┬╔╗╦╓╖╥╒╕╤┼╠╣╬╟╢╫╞╡╪├┤")
_RICH_END_CENTER = frozenset("└┘┴╚╝╩╙╜╨╘╛╧┼╠╣╬╟╢╫╞╡╪├┤")
_ASCII_START_CENTER = frozenset("+v")
_ASCII_END_CENTER = frozenset("+v^")

# Box perimeter roles.
_RICH_H_EDGE = frozenset("─┬┴┼")
_RICH_V_EDGE = frozenset("│║├┤┼")
_RICH_TOP_LEFT = frozenset("┌├┬┼")
_RICH_TOP_RIGHT = frozenset("┐┤┬┼")
_RICH_BOTTOM_LEFT = frozenset("└├┴┼")
_RICH_BOTTOM_RIGHT = frozenset("┘┤┴┼")
_ASCII_H_EDGE = frozenset("-=+v")
_ASCII_V_EDGE = frozenset("|+")
_ASCII_CORNER = frozenset("+")


def detect_rich_mode(document: str) -> bool:
    """True when the document contains any Unicode box-drawing glyph."""
    return any(ch in _RICH_STRUCTURE for ch in document)


@dataclass(slots=True, frozen=True)
class GlyphTraits:
    structure: bool = False
    vertical_wall: bool = False
    corner: bool = False
    rule: bool = False
    connects_down: bool = False
    connects_up: bool = False
    starts_at_center: bool = False
    ends_at_center: bool = False
    horizontal_edge: bool = False
    vertical_edge: bool = False
    top_left: bool = False
    top_right: bool = False
    bottom_left: bool = False
    bottom_right: bool = False


@lru_cache(maxsize=1024)
def glyph_traits(char: str, rich: bool) -> GlyphTraits:
    """Classify one grapheme under the given mode."""
    if rich:
        rule = char in _RICH_RULES
        return GlyphTraits(
            structure=char in _RICH_STRUCTURE,
            vertical_wall=char in _RICH_VERTICAL,
            corner=char in _CORNERS,
            rule=rule,
            connects_down=not rule and char in _RICH_DOWN,
            connects_up=not rule and char in _RICH_UP,
            starts_at_center=char in _RICH_START_CENTER,
            ends_at_center=char in _RICH_END_CENTER,
            horizontal_edge=char in _RICH_H_EDGE,
            vertical_edge=char in _RICH_V_EDGE,
            top_left=char in _RICH_TOP_LEFT,
            top_right=char in _RICH_TOP_RIGHT,
            bottom_left=char in _RICH_BOTTOM_LEFT,
            bottom_right=char in _RICH_BOTTOM_RIGHT,
        )

    rule = char in _ASCII_RULES
    corner = char in _ASCII_CORNER
    return GlyphTraits(
        structure=char in _ASCII_STRUCTURE,
        vertical_wall=char in _ASCII_VERTICAL,
        corner=char in _CORNERS,
        rule=rule,
        connects_down=not rule and char in _ASCII_LINKS,
        connects_up=not rule and char in _ASCII_LINKS,
        starts_at_center=char in _ASCII_START_CENTER,
        ends_at_center=char in _ASCII_END_CENTER,
        horizontal_edge=char in _ASCII_H_EDGE,
        vertical_edge=char in _ASCII_V_EDGE,
        top_left=corner,
        top_right=corner,
        bottom_left=corner,
        bottom_right=corner,
    )


class Classifier:
    """Structural predicates bound to one document mode."""

    __slots__ = ("rich",)

    def __init__(self, rich: bool) -> None:
        self.rich = rich

    @classmethod
    def for_document(cls, document: str) -> Classifier:
        return cls(detect_rich_mode(document))

    def traits(self, char: str) -> GlyphTraits:
        return glyph_traits(char, self.rich)

    def is_structure(self, char: str) -> bool:
        return glyph_traits(char, self.rich).structure

    def is_vertical_wall(self, char: str) -> bool:
        return glyph_traits(char, self.rich).vertical_wall

    def is_corner(self, char: str) -> bool:
        return glyph_traits(char, self.rich).corner

    def connects_down(self, char: str) -> bool:
        return glyph_traits(char, self.rich).connects_down

    def connects_up(self, char: str) -> bool:
        return glyph_traits(char, self.rich).connects_up

    def starts_at_center(self, char: str) -> bool:
        return glyph_traits(char, self.rich).starts_at_center

    def ends_at_center(self, char: str) -> bool:
        return glyph_traits(char, self.rich).ends_at_center

    def __repr__(self) -> str:
        return f"Classifier(rich={self.rich})"
