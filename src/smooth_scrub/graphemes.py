from __future__ import annotations

# ============================================================================
# Grapheme & width model
#
# Splits lines into user-perceived characters and assigns each a column
# width of 1 or 2. Every other component measures text through here, so
# the grid, the box detector and the normalizer agree on columns.
# ============================================================================

import re

import regex
from wcwidth import wcwidth

_GRAPHEME_RE = regex.compile(r"\X")

# Emoji, misc symbols/dingbats and CJK unified ideographs.
_WIDE_RE = re.compile("[\U0001F300-\U0001F9FF\u2600-\u27BF\u4E00-\u9FFF]")

_EMOJI_PRESENTATION = "\uFE0F"


def split_graphemes(text: str) -> list[str]:
    """Split text into extended grapheme clusters."""
    return _GRAPHEME_RE.findall(text)


def display_width(grapheme: str, rich: bool) -> int:
    """Column width (1 or 2) of a single grapheme.

    Unknown or zero-width graphemes count as one column so every cell
    occupies space on the grid.
    """
    if not grapheme:
        return 1
    if not rich and len(grapheme) == 1 and ord(grapheme) < 127:
        return 1
    if _WIDE_RE.search(grapheme):
        return 2
    if rich and _EMOJI_PRESENTATION in grapheme:
        return 2
    if wcwidth(grapheme[0]) == 2:
        return 2
    return 1


def text_width(text: str, rich: bool) -> int:
    """Total column width of a string."""
    return sum(display_width(g, rich) for g in split_graphemes(text))
