from __future__ import annotations

# ============================================================================
# Auto-format
#
# Aligns box borders and balances centered text before rendering. The input
# is split into blocks of consecutive non-blank lines; inside a block every
# line is measured without its style markers and, where it is safe, padded
# to the block's widest line. Anything ambiguous is left exactly as written.
#
# Structural tests go through the same Classifier the renderer uses, so a
# line is only reshaped along boundaries the renderer will also see.
# ============================================================================

import logging
import re
from collections.abc import Callable

from .classify import Classifier
from .graphemes import split_graphemes, text_width
from .markers import inject_spans, parse_line
from .types import ParsedLine

logger = logging.getLogger(__name__)

_CONNECTOR_STUB_RE = re.compile(r"^\s+[|+]\s*$")
_RULE_RE = re.compile(r"^[-─═]+$")
# Arrowheads, junctions and walls that may sit inside a rule line.
_RULE_DECORATION_RE = re.compile(r"[+v^<>|]")
_JUNCTIONS = frozenset("+┌┐└┘├┤┬┴┼")


def auto_format(text: str) -> str:
    """Normalize block widths of a text diagram. Never raises."""
    classifier = Classifier.for_document(text)

    blocks: list[list[str]] = []
    current: list[str] = []
    for line in text.split("\n"):
        if line.strip() == "":
            if current:
                blocks.append(current)
            blocks.append([])
            current = []
        else:
            current.append(line)
    if current:
        blocks.append(current)

    out: list[str] = []
    for block in blocks:
        if not block:
            out.append("")
        else:
            out.extend(_format_block(block, classifier))
    return "\n".join(out)


def _format_block(block: list[str], classifier: Classifier) -> list[str]:
    parsed = [parse_line(line) for line in block]
    widths = [text_width(p.clean_line, classifier.rich) for p in parsed]
    max_width = max(widths)

    formatted = [
        _format_line(raw, p, width, max_width, classifier)
        for raw, p, width in zip(block, parsed, widths)
    ]
    changed = sum(1 for before, after in zip(block, formatted) if before != after)
    if changed:
        logger.debug(f"Reformatted {changed} of {len(block)} lines in block (width {max_width})")
    return formatted


def _is_centered(content: str) -> bool:
    if content.startswith("^") and content.endswith("^") and len(content) > 2:
        return True
    return content.startswith("^") and len(content) > 1 and content != "^^"


def _format_line(
    raw: str,
    parsed: ParsedLine,
    width: int,
    max_width: int,
    classifier: Classifier,
) -> str:
    clean = parsed.clean_line
    rich = classifier.rich

    # Connector stubs hang below a box edge at a fixed column.
    if _CONNECTOR_STUB_RE.match(clean):
        return raw

    glyphs = split_graphemes(clean)
    if clean.strip() and all(g == " " or classifier.is_structure(g) for g in glyphs):
        return raw

    body = clean.lstrip()
    indentation = clean[: len(clean) - len(body)]
    graphemes = split_graphemes(body)
    first = graphemes[0] if graphemes else ""
    last = graphemes[-1] if graphemes else ""

    # Prose outside boxes is never reflowed.
    if not (classifier.is_structure(first) or classifier.is_structure(last)) and "^" not in body:
        return raw

    prefix = ""
    suffix = ""
    middle = graphemes
    if middle and classifier.is_structure(middle[0]):
        prefix = middle[0]
        middle = middle[1:]
    if middle and classifier.is_structure(middle[-1]):
        suffix = middle[-1]
        middle = middle[:-1]

    diff = max_width - width

    # Walled lines in indented (or Unicode) diagrams are usually nested boxes
    # drawn narrower on purpose.
    if prefix and suffix and diff > 0 and (indentation or rich):
        return raw

    middle_text = "".join(middle)
    content = middle_text.strip()
    head = len(split_graphemes(indentation)) + (1 if prefix else 0)

    if _is_centered(content):
        available = max_width - text_width(indentation + prefix + suffix, rich)
        total_padding = max(0, available - text_width(content, rich))
        left_pad = total_padding // 2
        right_pad = total_padding - left_pad
        new_clean = indentation + prefix + " " * left_pad + content + " " * right_pad + suffix

        leading = len(middle) - len(split_graphemes(middle_text.lstrip()))
        content_len = len(split_graphemes(content))
        old_len = len(split_graphemes(clean))
        new_len = len(split_graphemes(new_clean))

        def recenter(column: int) -> int:
            offset = column - head
            if offset < 0:
                return column
            if offset <= leading:
                return head + left_pad
            if offset <= leading + content_len:
                return head + left_pad + (offset - leading)
            if offset < len(middle):
                return head + left_pad + content_len
            return column + (new_len - old_len)

        return _rebuild(new_clean, parsed.spans, recenter)

    if suffix and diff > 0:
        core = _RULE_DECORATION_RE.sub("", middle_text)
        is_rule = bool(_RULE_RE.match(core))
        is_empty_junction = not middle and prefix in _JUNCTIONS and suffix in _JUNCTIONS
        if not (is_rule or is_empty_junction):
            return raw

        if "═" in middle_text or prefix == "═":
            fill = "═"
        elif "─" in middle_text or prefix == "─":
            fill = "─"
        else:
            fill = "-"
        new_clean = indentation + prefix + middle_text + fill * diff + suffix
        boundary = head + len(middle)

        def extend(column: int) -> int:
            return column + diff if column >= boundary else column

        return _rebuild(new_clean, parsed.spans, extend)

    return raw


def _rebuild(
    clean: str, spans: list[tuple[int, str]], remap: Callable[[int], int]
) -> str:
    # Every stripped marker, accepted or rejected, is written back.
    return inject_spans(clean, [(remap(column), text) for column, text in spans])
