from __future__ import annotations

# ============================================================================
# Rectangular box detection and box styling
#
# Boxes are found on the clean lines expanded to display columns, so a
# wide grapheme inside a box does not shift its right wall. Background and
# stroke markers style the innermost box that encloses them.
# ============================================================================

import logging

from .classify import Classifier
from .graphemes import display_width, split_graphemes
from .grid import expand_columns
from .types import BoxStyle, DetectedBox, ParsedLine, Row, ScrubOptions

logger = logging.getLogger(__name__)


def _at(columns: list[list[str]], r: int, c: int) -> str:
    if 0 <= r < len(columns) and 0 <= c < len(columns[r]):
        return columns[r][c]
    return ""


def _edge_between(
    columns: list[list[str]], classifier: Classifier, r: int, left: int, right: int
) -> bool:
    return all(
        classifier.traits(_at(columns, r, c)).horizontal_edge for c in range(left + 1, right)
    )


def detect_boxes(lines: list[str], classifier: Classifier) -> list[DetectedBox]:
    """Find every axis-aligned rectangle whose whole perimeter is structural.

    For each top-left corner, the top edge is followed to every top-right
    corner it reaches; each such pair is then extended downward while both
    columns stay on a vertical edge, and every row where both columns are
    bottom corners joined by a horizontal edge closes a box. Nested and
    overlapping boxes are all kept.

    Worst case O(rows^2 * cols^2); diagrams are tens of rows and columns,
    so this is not optimized further.
    """
    columns = [expand_columns(line, classifier.rich) for line in lines]
    boxes: list[DetectedBox] = []

    for top, row in enumerate(columns):
        for left, char in enumerate(row):
            if not classifier.traits(char).top_left:
                continue

            for right in range(left + 1, len(row)):
                traits = classifier.traits(row[right])
                if traits.top_right:
                    boxes.extend(_close_boxes(columns, classifier, top, left, right))
                if not traits.horizontal_edge:
                    break

    logger.debug(f"Detected {len(boxes)} boxes")
    return boxes


def _close_boxes(
    columns: list[list[str]],
    classifier: Classifier,
    top: int,
    left: int,
    right: int,
) -> list[DetectedBox]:
    found: list[DetectedBox] = []
    for bottom in range(top + 1, len(columns)):
        left_traits = classifier.traits(_at(columns, bottom, left))
        right_traits = classifier.traits(_at(columns, bottom, right))
        if (
            left_traits.bottom_left
            and right_traits.bottom_right
            and _edge_between(columns, classifier, bottom, left, right)
        ):
            found.append(DetectedBox(top=top, left=left, bottom=bottom, right=right))
        if not (left_traits.vertical_edge and right_traits.vertical_edge):
            break
    return found


def innermost_box(boxes: list[DetectedBox], row: int, column: int) -> DetectedBox | None:
    """Smallest-area box enclosing the point, perimeter included.

    Equal areas resolve to the box detected first.
    """
    enclosing = [box for box in boxes if box.contains(row, column)]
    if not enclosing:
        return None
    return min(enclosing, key=lambda box: box.area)


def _display_column(clean_line: str, index: int, rich: bool) -> int:
    graphemes = split_graphemes(clean_line)
    return sum(display_width(g, rich) for g in graphemes[:index])


def resolve_box_styles(
    boxes: list[DetectedBox],
    parsed_lines: list[ParsedLine],
    rich: bool,
) -> dict[DetectedBox, BoxStyle]:
    """Assign background and stroke markers to their innermost boxes.

    Markers outside every box are dropped. A later marker of the same kind
    for the same box wins.
    """
    styles: dict[DetectedBox, BoxStyle] = {}
    for r, parsed in enumerate(parsed_lines):
        for marker in parsed.markers:
            if marker.kind == "color":
                continue
            column = _display_column(parsed.clean_line, marker.column, rich)
            box = innermost_box(boxes, r, column)
            if box is None:
                logger.debug(f"No box encloses {marker.kind} marker at row {r}, column {column}")
                continue
            style = styles.setdefault(box, BoxStyle())
            if marker.kind == "background":
                style.fill = marker.value
            else:
                style.stroke = marker.value
    return styles


def stroked_perimeter(
    styles: dict[DetectedBox, BoxStyle],
    rows: list[Row],
) -> frozenset[tuple[int, int]]:
    """(row, grapheme index) of every perimeter cell of a stroked box."""
    owned: set[tuple[int, int]] = set()
    for box, style in styles.items():
        if not style.stroke:
            continue
        for r in range(box.top, min(box.bottom, len(rows) - 1) + 1):
            for cell in rows[r]:
                if box.on_perimeter(r, cell.column):
                    owned.add((r, cell.index))
    return frozenset(owned)


def box_bounds(box: DetectedBox, options: ScrubOptions) -> tuple[float, float, float, float]:
    """(x, y, width, height) of a box drawn through its border cell centers."""
    cw = options.cell_width
    ch = options.cell_height
    x = cw + box.left * cw + cw / 2
    y = box.top * ch + ch + ch / 2
    return x, y, (box.right - box.left) * cw, (box.bottom - box.top) * ch
