from __future__ import annotations

# ============================================================================
# Inline style markers
#
# Syntax:   {#color:red}   {#bg:#f5f5f5}   {#stroke:#a0a}
#
# Markers are stripped before anything else sees a line. Accepted markers
# are recorded against the grapheme index of the clean line where they
# occurred; unknown kinds and unsafe values never style anything, but their
# source text is kept in the spans so auto-format can write it back.
# ============================================================================

import logging
import re

from .graphemes import split_graphemes
from .theme import is_safe_color
from .types import MarkerKind, ParsedLine, StyleMarker

logger = logging.getLogger(__name__)

_MARKER_RE = re.compile(r"\{#([A-Za-z]+):([^{}]*)\}")

_KIND_BY_KEY: dict[str, MarkerKind] = {
    "color": "color",
    "bg": "background",
    "stroke": "stroke",
}

_KEY_BY_KIND: dict[MarkerKind, str] = {kind: key for key, kind in _KIND_BY_KEY.items()}


def parse_line(raw_line: str) -> ParsedLine:
    """Strip style markers from a line.

    Stripping works on the output buffer: whenever a closing brace completes
    a marker at the end of the buffer, that marker is removed. A marker that
    only appears once an inner one is removed is therefore stripped too, and
    the clean line never contains marker syntax.
    """
    if "{#" not in raw_line:
        return ParsedLine(clean_line=raw_line)

    buffer = ""
    markers: list[StyleMarker] = []
    spans: list[tuple[int, str]] = []
    had_markers = False

    for ch in raw_line:
        buffer += ch
        if ch != "}":
            continue
        start = buffer.rfind("{")
        match = _MARKER_RE.fullmatch(buffer, start) if start >= 0 else None
        if match is None:
            continue

        had_markers = True
        source = buffer[start:]
        buffer = buffer[:start]
        column = len(split_graphemes(buffer))
        # A marker spanning earlier markers pulls them back to its start.
        markers = [
            m if m.column <= column else StyleMarker(kind=m.kind, value=m.value, column=column)
            for m in markers
        ]
        spans = [(min(c, column), text) for c, text in spans]
        spans.append((column, source))

        kind = _KIND_BY_KEY.get(match.group(1).lower())
        value = match.group(2).strip()
        if kind is None:
            logger.debug(f"Ignoring unknown marker kind '{match.group(1)}'")
            continue
        if not is_safe_color(value):
            logger.debug(f"Ignoring unsafe {kind} value '{value}'")
            continue
        markers.append(StyleMarker(kind=kind, value=value, column=column))

    return ParsedLine(clean_line=buffer, markers=markers, had_markers=had_markers, spans=spans)


def format_marker(marker: StyleMarker) -> str:
    return f"{{#{_KEY_BY_KIND[marker.kind]}:{marker.value}}}"


def inject_spans(clean_line: str, spans: list[tuple[int, str]]) -> str:
    """Insert raw text into a clean line at grapheme columns.

    Spans sharing a column keep their list order; columns past the end
    of the line are appended.
    """
    if not spans:
        return clean_line

    graphemes = split_graphemes(clean_line)
    by_column: dict[int, list[str]] = {}
    for column, text in spans:
        by_column.setdefault(min(max(column, 0), len(graphemes)), []).append(text)

    parts: list[str] = []
    for i, grapheme in enumerate(graphemes):
        parts.extend(by_column.get(i, ()))
        parts.append(grapheme)
    parts.extend(by_column.get(len(graphemes), ()))
    return "".join(parts)


def inject_markers(clean_line: str, markers: list[StyleMarker]) -> str:
    """Insert canonical marker text back into a clean line at the recorded columns."""
    return inject_spans(clean_line, [(m.column, format_marker(m)) for m in markers])


def color_at(markers: list[StyleMarker], column: int, default: str) -> str:
    """Most recent color marker at or before a column, else the default."""
    color = default
    for marker in markers:
        if marker.kind == "color" and marker.column <= column:
            color = marker.value
    return color
