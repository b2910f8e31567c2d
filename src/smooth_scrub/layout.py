from __future__ import annotations

# ============================================================================
# Zone & text layout
#
# Each row is cut into zones between wall glyphs. Zone text is tokenized and
# placed according to the alignment markers:
#
#   ^Centered text^   whole zone centered (also ^Centered, but not ^^)
#   ^word             token centered in the zone
#   >word  word>      token right-aligned against the zone's right wall
#   <word             token left-aligned against the zone's left wall
#   word              token at its own column
#
# Color markers recorded for the row split tokens into differently filled runs.
# ============================================================================

import re
from itertools import pairwise

from .classify import Classifier
from .connectors import Owned, is_zone_connector
from .grid import char_at
from .markers import color_at
from .styles import TEXT_BASELINE_RATIO, estimate_font_size
from .types import (
    Cell,
    Grid,
    ParsedLine,
    PlacedText,
    Row,
    ScrubOptions,
    StyleMarker,
    TextAnchor,
    Zone,
)

_TOKEN_RE = re.compile(r"\S+(?: \S+)*")
_MULTI_SPACE_RE = re.compile(r"\s{2,}")

_PLUS_SIDE_NEIGHBORS = frozenset("-+")
_PLUS_END_NEIGHBORS = frozenset("|+")


# ============================================================================
# Walls and zones
# ============================================================================


def find_walls(rows: list[Row], r: int, classifier: Classifier) -> list[int]:
    """Grapheme indices of the wall cells in a row."""
    walls: list[int] = []
    for cell in rows[r]:
        i = cell.index
        is_wall = classifier.is_vertical_wall(cell.char) or classifier.is_corner(cell.char)

        if not is_wall and not classifier.rich and cell.char == "+":
            is_wall = (
                char_at(rows, r, i - 1) in _PLUS_SIDE_NEIGHBORS
                or char_at(rows, r, i + 1) in _PLUS_SIDE_NEIGHBORS
                or char_at(rows, r - 1, i) in _PLUS_END_NEIGHBORS
                or char_at(rows, r + 1, i) in _PLUS_END_NEIGHBORS
            )

        if is_wall:
            walls.append(i)
    return walls


def compute_zones(
    row: Row, walls: list[int], canvas_width: float, options: ScrubOptions
) -> list[Zone]:
    """Zones between adjacent walls, or the whole row when walls are missing."""
    if len(walls) < 2:
        return [
            Zone(
                start=0,
                end=len(row),
                left_x=options.cell_width,
                right_x=canvas_width - options.cell_width,
            )
        ]

    return [
        Zone(
            start=a + 1,
            end=b,
            left_x=row[a].x + row[a].w,
            right_x=row[b].x,
        )
        for a, b in pairwise(walls)
    ]


# ============================================================================
# Text placement
# ============================================================================


def _split_at_colors(cells: list[Cell], color_columns: list[int]) -> list[list[Cell]]:
    """Split a cell run wherever a color marker column falls inside it."""
    segments: list[list[Cell]] = [[cells[0]]]
    for prev, cell in pairwise(cells):
        if any(prev.index < column <= cell.index for column in color_columns):
            segments.append([])
        segments[-1].append(cell)
    return segments


def _place(
    cells: list[Cell],
    anchor: TextAnchor,
    x: float,
    y: float,
    preserve: bool,
    markers: list[StyleMarker],
    options: ScrubOptions,
) -> list[PlacedText]:
    """Emit one node, or one node per color run anchored from the same origin."""
    color_columns = [m.column for m in markers if m.kind == "color"]
    segments = _split_at_colors(cells, color_columns)

    def node(segment: list[Cell], node_x: float, node_anchor: TextAnchor) -> PlacedText:
        text = "".join(c.char for c in segment)
        return PlacedText(
            text=text,
            x=node_x,
            y=y,
            anchor=node_anchor,
            fill=color_at(markers, segment[0].index, options.text_color),
            font_size=estimate_font_size(text, options.cell_width, options.cell_height),
            preserve=preserve or bool(_MULTI_SPACE_RE.search(text)),
        )

    if len(segments) == 1:
        return [node(cells, x, anchor)]

    span = cells[-1].x + cells[-1].w - cells[0].x
    if anchor == "middle":
        origin = x - span / 2
    elif anchor == "end":
        origin = x - span
    else:
        origin = x
    return [node(segment, origin + (segment[0].x - cells[0].x), "start") for segment in segments]


def layout_zone(
    rows: list[Row],
    r: int,
    zone: Zone,
    markers: list[StyleMarker],
    classifier: Classifier,
    options: ScrubOptions,
    owned: Owned,
) -> list[PlacedText]:
    row = rows[r]
    cells = [
        row[k]
        for k in range(zone.start, min(zone.end, len(row)))
        if not is_zone_connector(rows, r, k, classifier, options) and (r, k) not in owned
    ]
    raw = "".join(c.char for c in cells)
    trimmed = raw.strip()
    if not trimmed:
        return []

    baseline = options.cell_height * TEXT_BASELINE_RATIO
    zone_center = (zone.left_x + zone.right_x) / 2
    pad = options.cell_width * options.text_inset

    # Whole-zone centering keeps internal spacing verbatim.
    bounded = trimmed.startswith("^") and trimmed.endswith("^") and len(trimmed) > 2
    unbounded = trimmed.startswith("^") and len(trimmed) > 1 and trimmed != "^^"
    if bounded or unbounded:
        first = next(k for k, c in enumerate(cells) if not c.char.isspace())
        last = max(k for k, c in enumerate(cells) if not c.char.isspace())
        content = cells[first + 1 : last if bounded else last + 1]
        if not content:
            return []
        y = cells[first].y + baseline
        return _place(content, "middle", zone_center, y, True, markers, options)

    # Cell position for every code point of raw.
    owners: list[int] = []
    for pos, cell in enumerate(cells):
        owners.extend([pos] * len(cell.char))

    placed: list[PlacedText] = []
    for match in _TOKEN_RE.finditer(raw):
        token = cells[owners[match.start()] : owners[match.end() - 1] + 1]
        text = match.group(0)
        lo, hi = 0, len(token)
        anchor: TextAnchor = "start"
        left_marker = False

        if token[0].char == "^" and token[-1].char == "^" and len(text) > 2:
            anchor = "middle"
            lo, hi = 1, hi - 1
        elif token[0].char == "^" and len(text) > 1 and text != "^^":
            anchor = "middle"
            lo = 1
        elif token[0].char == ">":
            anchor = "end"
            lo = 1
        elif token[0].char == "<":
            left_marker = True
            lo = 1
        if hi > lo and token[hi - 1].char == ">":
            anchor = "end"
            hi -= 1

        content = token[lo:hi]
        if not content:
            continue

        if anchor == "middle":
            x = zone_center
        elif anchor == "end":
            x = zone.right_x - pad
        elif left_marker:
            x = zone.left_x + pad
        else:
            x = token[0].x

        placed.extend(_place(content, anchor, x, token[0].y + baseline, False, markers, options))

    return placed


def layout_text(
    grid: Grid,
    parsed_lines: list[ParsedLine],
    classifier: Classifier,
    options: ScrubOptions,
    owned: Owned,
) -> list[PlacedText]:
    """Place every text node of the diagram, row by row."""
    placed: list[PlacedText] = []
    for r, row in enumerate(grid.rows):
        if not row:
            continue
        markers = parsed_lines[r].markers if r < len(parsed_lines) else []
        walls = find_walls(grid.rows, r, classifier)
        for zone in compute_zones(row, walls, grid.width, options):
            placed.extend(layout_zone(grid.rows, r, zone, markers, classifier, options, owned))
    return placed
