from __future__ import annotations

# ============================================================================
# Connector runs
#
# Horizontal runs are maximal chains of touching structural cells in a row.
# Vertical runs are chains of cells linked row to row by a nearest-neighbor
# search. Both feed one SVG path.
#
# ASCII `v` doubles as an arrowhead and a letter. Whether a given `v` is
# structure is decided by is_ascii_v_connector(); zone text only drops a `v`
# that also passes the stricter _is_zone_arrowhead() test.
# ============================================================================

import logging
import re

from .classify import Classifier
from .grid import cell_at, char_at
from .styles import HORIZONTAL_TOUCH_GAP, JOINT_EPSILON
from .surface import fmt_number
from .types import Cell, HorizontalRun, Row, ScrubOptions, VerticalRun

logger = logging.getLogger(__name__)

# (row, grapheme index) of cells owned by a stroked box perimeter.
Owned = frozenset[tuple[int, int]]

_NO_OWNED: Owned = frozenset()

_WORD_CHAR_RE = re.compile(r"[A-Za-z0-9]")

_V_SIDE_NEIGHBORS = frozenset("-+")
_V_ABOVE_NEIGHBORS = frozenset("|+")
_HORIZONTAL_ZONE_CHARS = frozenset("-+=_")
_VERTICAL_ZONE_CHARS = frozenset("|+")


# ============================================================================
# Vertical neighbor search
# ============================================================================


def find_vertical_neighbor(
    cell: Cell,
    next_row: Row,
    classifier: Classifier,
    options: ScrubOptions,
) -> Cell | None:
    """Nearest cell in the next row this cell connects down into.

    A tight x-tolerance is tried first so adjacent columns never merge;
    the relaxed tolerance catches slightly uneven indentation.
    """
    if not classifier.connects_down(cell.char):
        return None

    candidates = [c for c in next_row if classifier.connects_up(c.char)]
    for tolerance in (options.tight_tolerance, options.relaxed_tolerance):
        limit = options.cell_width * tolerance
        near = [c for c in candidates if abs(c.cx - cell.cx) < limit]
        if near:
            return min(near, key=lambda c: abs(c.cx - cell.cx))
    return None


def _is_word_char(char: str) -> bool:
    return bool(_WORD_CHAR_RE.fullmatch(char))


def is_ascii_v_connector(
    rows: list[Row],
    r: int,
    i: int,
    classifier: Classifier,
    options: ScrubOptions,
) -> bool:
    """True when the `v` at (r, i) is an arrowhead rather than a letter."""
    cell = cell_at(rows, r, i)
    if cell is None:
        return False

    left = char_at(rows, r, i - 1)
    right = char_at(rows, r, i + 1)
    if left in _V_SIDE_NEIGHBORS or right in _V_SIDE_NEIGHBORS:
        return True

    if r > 0 and any(
        prev.char in _V_ABOVE_NEIGHBORS
        and find_vertical_neighbor(prev, rows[r], classifier, options) is cell
        for prev in rows[r - 1]
    ):
        return True

    return not (_is_word_char(left) and _is_word_char(right))


def is_active_structure(
    rows: list[Row],
    r: int,
    i: int,
    classifier: Classifier,
    options: ScrubOptions,
) -> bool:
    """Structural glyph test with the ASCII arrowhead rule applied."""
    char = char_at(rows, r, i)
    if not classifier.is_structure(char):
        return False
    if not classifier.rich and char == "v":
        return is_ascii_v_connector(rows, r, i, classifier, options)
    return True


def _can_link(char: str, classifier: Classifier) -> bool:
    return classifier.connects_down(char) or classifier.connects_up(char)


def _is_vertical_candidate(
    rows: list[Row],
    r: int,
    cell: Cell,
    classifier: Classifier,
    options: ScrubOptions,
) -> bool:
    if not _can_link(cell.char, classifier):
        return False
    if not classifier.rich and cell.char == "v":
        return is_ascii_v_connector(rows, r, cell.index, classifier, options)
    return True


def _both_owned(owned: Owned, upper: tuple[int, int], lower: tuple[int, int]) -> bool:
    return upper in owned and lower in owned


# ============================================================================
# Run detection
# ============================================================================


def detect_vertical_runs(
    rows: list[Row],
    classifier: Classifier,
    options: ScrubOptions,
    owned: Owned = _NO_OWNED,
) -> list[VerticalRun]:
    """Top-to-bottom chains of linked cells, each reported once.

    A run starts only at a cell with no incoming link from the row above.
    A link between two cells that both belong to a stroked box perimeter
    does not count; the box rectangle draws that edge instead.
    """
    runs: list[VerticalRun] = []

    def has_incoming(r: int, cell: Cell) -> bool:
        if r == 0:
            return False
        for prev in rows[r - 1]:
            if not _is_vertical_candidate(rows, r - 1, prev, classifier, options):
                continue
            if find_vertical_neighbor(prev, rows[r], classifier, options) is not cell:
                continue
            if _both_owned(owned, (r - 1, prev.index), (r, cell.index)):
                continue
            return True
        return False

    for r, row in enumerate(rows):
        for cell in row:
            if not _is_vertical_candidate(rows, r, cell, classifier, options):
                continue
            if has_incoming(r, cell):
                continue

            cells = [cell]
            current = cell
            current_row = r
            while current_row < len(rows) - 1:
                nxt = find_vertical_neighbor(current, rows[current_row + 1], classifier, options)
                if nxt is None:
                    break
                if _both_owned(owned, (current_row, current.index), (current_row + 1, nxt.index)):
                    break
                cells.append(nxt)
                current = nxt
                current_row += 1

            if len(cells) > 1:
                runs.append(VerticalRun(cx=cells[0].cx, cells=cells))

    return runs


def detect_horizontal_runs(
    rows: list[Row],
    classifier: Classifier,
    options: ScrubOptions,
    owned: Owned = _NO_OWNED,
) -> list[HorizontalRun]:
    """Maximal chains of touching structural cells, row by row."""
    runs: list[HorizontalRun] = []

    for r, row in enumerate(rows):

        def touches(left: Cell, right: Cell) -> bool:
            if not is_active_structure(rows, r, left.index, classifier, options):
                return False
            if not is_active_structure(rows, r, right.index, classifier, options):
                return False
            if _both_owned(owned, (r, left.index), (r, right.index)):
                return False
            return abs(right.x - (left.x + left.w)) < HORIZONTAL_TOUCH_GAP

        i = 0
        while i < len(row) - 1:
            if not touches(row[i], row[i + 1]):
                i += 1
                continue
            j = i
            while j < len(row) - 1 and touches(row[j], row[j + 1]):
                j += 1
            runs.append(HorizontalRun(cy=row[i].cy, cells=row[i : j + 1]))
            i = j

    return runs


# ============================================================================
# Path assembly
# ============================================================================


def build_path_data(
    horizontal: list[HorizontalRun],
    vertical: list[VerticalRun],
    classifier: Classifier,
    options: ScrubOptions,
) -> str:
    """Serialize runs as SVG move/line commands.

    Vertical runs start at the first cell's top edge and end at the last
    cell's bottom edge, or at the cell center for corners and junctions so
    T and L joints meet the horizontal stroke exactly.
    """
    half = options.cell_height / 2
    parts: list[str] = []

    for run in horizontal:
        first = run.cells[0]
        parts.append(f"M {fmt_number(first.cx)},{fmt_number(first.cy)}")
        for cell in run.cells[1:]:
            parts.append(f"L {fmt_number(cell.cx)},{fmt_number(cell.cy)}")

    for run in vertical:
        first = run.cells[0]
        last = run.cells[-1]
        start_y = first.cy if classifier.starts_at_center(first.char) else first.cy - half
        end_y = last.cy if classifier.ends_at_center(last.char) else last.cy + half
        x = fmt_number(run.cx)
        parts.append(f"M {x},{fmt_number(start_y)} L {x},{fmt_number(end_y)}")

        # Zero-length marks at interior joints keep round joins visible.
        for cell in run.cells[1:-1]:
            mid = cell.cy
            if abs(mid - start_y) > JOINT_EPSILON and abs(mid - end_y) > JOINT_EPSILON:
                parts.append(f"M {x},{fmt_number(mid)} L {x},{fmt_number(mid)}")

    logger.debug(
        f"Assembled path from {len(horizontal)} horizontal and {len(vertical)} vertical runs"
    )
    return " ".join(parts)


# ============================================================================
# Text suppression
# ============================================================================


def _is_zone_arrowhead(
    rows: list[Row],
    r: int,
    i: int,
    classifier: Classifier,
    options: ScrubOptions,
) -> bool:
    """A `v` drawn as an arrowhead inside zone text.

    Besides being an arrowhead with no word character beside it, it needs a
    vertical neighbor or rule glyphs on both sides.
    """
    if char_at(rows, r, i) != "v" or not is_ascii_v_connector(rows, r, i, classifier, options):
        return False
    left = char_at(rows, r, i - 1)
    right = char_at(rows, r, i + 1)
    if _is_word_char(left) or _is_word_char(right):
        return False
    between_rules = left in _HORIZONTAL_ZONE_CHARS and right in _HORIZONTAL_ZONE_CHARS
    has_vertical = (
        char_at(rows, r - 1, i) in _VERTICAL_ZONE_CHARS
        or char_at(rows, r + 1, i) in _VERTICAL_ZONE_CHARS
    )
    return between_rules or has_vertical


def is_zone_connector(
    rows: list[Row],
    r: int,
    i: int,
    classifier: Classifier,
    options: ScrubOptions,
) -> bool:
    """Glyphs inside a text zone that are drawn as structure.

    These are skipped when collecting zone text so a connector crossing a
    zone is never emitted as a character. Box-drawing glyphs are never text
    in rich mode; ASCII punctuation only counts when it touches more of the
    same.
    """
    char = char_at(rows, r, i)
    if classifier.rich:
        return classifier.is_structure(char)

    if char == "v":
        return _is_zone_arrowhead(rows, r, i, classifier, options)
    if char not in ("-", "|", "+"):
        return False

    def horizontal_at(ii: int) -> bool:
        return char_at(rows, r, ii) in _HORIZONTAL_ZONE_CHARS

    def vertical_at(rr: int) -> bool:
        return char_at(rows, rr, i) in _VERTICAL_ZONE_CHARS

    has_horizontal = horizontal_at(i - 1) or horizontal_at(i + 1)
    has_vertical = vertical_at(r - 1) or vertical_at(r + 1)

    if char == "-":
        return (
            has_horizontal
            or _is_zone_arrowhead(rows, r, i - 1, classifier, options)
            or _is_zone_arrowhead(rows, r, i + 1, classifier, options)
        )
    if char == "|":
        return has_vertical
    return has_horizontal and has_vertical
