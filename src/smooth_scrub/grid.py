from __future__ import annotations

# ============================================================================
# Grid builder
#
# Lays out marker-stripped lines as rows of cells. The first cell of every
# row starts one cell width in from the left edge and the first row starts
# one cell height down, leaving a margin on every side of the canvas.
# ============================================================================

from .graphemes import display_width, split_graphemes
from .types import Cell, Grid, Row, ScrubOptions


def build_grid(lines: list[str], rich: bool, options: ScrubOptions) -> Grid:
    """Place every grapheme of every line on the pixel grid.

    Rows keep their own length; nothing pads short lines.
    """
    cw = options.cell_width
    ch = options.cell_height
    rows: list[Row] = []
    max_pixel_width = 0.0

    for r, line in enumerate(lines):
        row: Row = []
        x = cw
        y = r * ch + ch
        column = 0
        for index, grapheme in enumerate(split_graphemes(line)):
            units = display_width(grapheme, rich)
            w = units * cw
            row.append(
                Cell(
                    char=grapheme,
                    x=x,
                    y=y,
                    cx=x + w / 2,
                    cy=y + ch / 2,
                    w=w,
                    cols=units,
                    index=index,
                    column=column,
                )
            )
            x += w
            column += units
        rows.append(row)
        max_pixel_width = max(max_pixel_width, x)

    return Grid(
        rows=rows,
        width=max_pixel_width + cw,
        height=len(lines) * ch + ch * 2,
    )


def cell_at(rows: list[Row], r: int, i: int) -> Cell | None:
    """Cell at (row, grapheme index), or None outside the ragged grid."""
    if r < 0 or r >= len(rows) or i < 0:
        return None
    row = rows[r]
    return row[i] if i < len(row) else None


def char_at(rows: list[Row], r: int, i: int) -> str:
    cell = cell_at(rows, r, i)
    return cell.char if cell is not None else ""


def expand_columns(line: str, rich: bool) -> list[str]:
    """One entry per display column; a wide grapheme's second column is ""."""
    columns: list[str] = []
    for grapheme in split_graphemes(line):
        columns.append(grapheme)
        columns.extend([""] * (display_width(grapheme, rich) - 1))
    return columns
