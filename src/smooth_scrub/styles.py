from __future__ import annotations

import re

# ============================================================================
# Typography -- text node metrics relative to the cell size.
# ============================================================================

# Baseline offset of a text node inside its row, as a fraction of cell height.
TEXT_BASELINE_RATIO = 0.7

FONT_SIZE_RATIOS = {
    # Multiplied by cell width.
    "text": 1.35,
    # Multiplied by cell height; emoji glyphs need the taller box.
    "emoji": 0.75,
}

FONT_WEIGHT = "bold"

_EMOJI_RE = re.compile("[\U0001F300-\U0001F9FF]")

# ============================================================================
# Path styling
# ============================================================================

PATH_ATTRIBUTES = {
    "fill": "none",
    "stroke-linecap": "butt",
    "stroke-linejoin": "round",
}

# Two cells touch horizontally when the gap between them is below this.
HORIZONTAL_TOUCH_GAP = 2

# Intermediate vertical joints closer than this to a run end are skipped.
JOINT_EPSILON = 0.01


def estimate_font_size(text: str, cell_width: float, cell_height: float) -> float:
    """Font size for a text node given the cell geometry."""
    if _EMOJI_RE.search(text):
        return cell_height * FONT_SIZE_RATIOS["emoji"]
    return cell_width * FONT_SIZE_RATIOS["text"]
