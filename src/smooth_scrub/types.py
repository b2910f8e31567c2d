from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Literal

from .theme import DEFAULTS

# ============================================================================
# Character grid -- cells laid out from marker-stripped lines
# ============================================================================

TextAnchor = Literal["start", "middle", "end"]

MarkerKind = Literal["color", "background", "stroke"]


@dataclass(slots=True, frozen=True)
class Cell:
    """One display grapheme placed on the pixel grid."""

    char: str
    # Top-left x of the cell.
    x: float
    # Row origin y of the cell.
    y: float
    cx: float
    cy: float
    # Pixel width (cols * cell width).
    w: float
    # Logical column width, 1 for narrow and 2 for wide graphemes.
    cols: int
    # Grapheme index within the row.
    index: int
    # Display column where the cell starts.
    column: int


Row = list[Cell]


@dataclass(slots=True)
class Grid:
    rows: list[Row]
    width: float
    height: float


@dataclass(slots=True)
class Zone:
    """Text-bearing span between two walls in one row."""

    start: int
    # Exclusive.
    end: int
    left_x: float
    right_x: float


# ============================================================================
# Structural runs
# ============================================================================


@dataclass(slots=True)
class VerticalRun:
    cx: float
    cells: list[Cell]


@dataclass(slots=True)
class HorizontalRun:
    cy: float
    cells: list[Cell]


# ============================================================================
# Inline style markers and the boxes they style
# ============================================================================


@dataclass(slots=True, frozen=True)
class StyleMarker:
    kind: MarkerKind
    value: str
    # Grapheme index in the clean (marker-stripped) line.
    column: int


@dataclass(slots=True)
class ParsedLine:
    clean_line: str
    markers: list[StyleMarker] = field(default_factory=list)
    had_markers: bool = False
    # Source text of every stripped marker, accepted or not, by column.
    spans: list[tuple[int, str]] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class DetectedBox:
    """Perimeter-validated rectangle in (row, display column) space."""

    top: int
    left: int
    bottom: int
    right: int

    @property
    def area(self) -> int:
        return (self.right - self.left) * (self.bottom - self.top)

    def contains(self, row: int, column: int) -> bool:
        return self.top <= row <= self.bottom and self.left <= column <= self.right

    def on_perimeter(self, row: int, column: int) -> bool:
        if not self.contains(row, column):
            return False
        return row in (self.top, self.bottom) or column in (self.left, self.right)


@dataclass(slots=True)
class BoxStyle:
    fill: str | None = None
    stroke: str | None = None


# ============================================================================
# Positioned text -- after zone layout, ready for emission
# ============================================================================


@dataclass(slots=True)
class PlacedText:
    text: str
    x: float
    y: float
    anchor: TextAnchor
    fill: str
    font_size: float
    preserve: bool = False


# ============================================================================
# Render options -- construction-time configuration
# ============================================================================


@dataclass(slots=True)
class ScrubOptions:
    # Width of one monospace cell in output units.
    cell_width: float = 12
    # Height of one monospace cell in output units.
    cell_height: float = 24
    # Stroke color for structural paths.
    color: str = DEFAULTS["stroke"]
    stroke_width: float = 2.5
    # Default fill for text nodes.
    text_color: str = DEFAULTS["text"]
    font_family: str = "monospace"
    # Optional full-canvas background fill.
    background: str | None = None
    # Vertical neighbor search tolerances, in cell widths.
    tight_tolerance: float = 0.5
    relaxed_tolerance: float = 2.0
    # Inset for edge-aligned text, in cell widths.
    text_inset: float = 0.8
    # Builds the drawing surface from (width, height). None means SvgSurface.
    surface_factory: Callable[[float, float], Any] | None = None
