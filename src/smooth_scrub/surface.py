from __future__ import annotations

# ============================================================================
# Drawing surface -- a small SVG element tree.
#
# The renderer only needs to create path/rect/text/group primitives, set
# attributes and append them to a tree. Keeping the tree as plain objects
# lets callers inspect the output before serializing it.
# ============================================================================

from collections.abc import Iterator
from dataclasses import dataclass, field

SVG_NAMESPACE = "http://www.w3.org/2000/svg"

AttrValue = str | int | float


def fmt_number(value: float) -> str:
    """Format a coordinate without a trailing `.0` for whole numbers."""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(round(number, 4))


def _attr_text(value: AttrValue) -> str:
    if isinstance(value, str):
        return value
    return fmt_number(value)


@dataclass(slots=True, eq=False)
class SvgElement:
    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    text: str | None = None
    children: list[SvgElement] = field(default_factory=list)

    def set(self, name: str, value: AttrValue) -> None:
        self.attrs[name] = _attr_text(value)

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attrs.get(name, default)

    def append(self, child: SvgElement) -> SvgElement:
        self.children.append(child)
        return child

    def iter(self, tag: str | None = None) -> Iterator[SvgElement]:
        """Depth-first walk over this element and its descendants."""
        if tag is None or self.tag == tag:
            yield self
        for child in self.children:
            yield from child.iter(tag)

    def find_all(self, tag: str) -> list[SvgElement]:
        return list(self.iter(tag))

    def find(self, tag: str) -> SvgElement | None:
        return next(self.iter(tag), None)

    def to_svg(self) -> str:
        attrs = "".join(f' {name}="{escape_xml(value)}"' for name, value in self.attrs.items())
        if self.text is not None:
            return f"<{self.tag}{attrs}>{escape_xml(self.text)}</{self.tag}>"
        if not self.children:
            return f"<{self.tag}{attrs} />"
        inner = "\n".join(child.to_svg() for child in self.children)
        return f"<{self.tag}{attrs}>\n{inner}\n</{self.tag}>"


def _element(tag: str, attrs: dict[str, AttrValue] | None) -> SvgElement:
    element = SvgElement(tag=tag)
    for name, value in (attrs or {}).items():
        element.set(name, value)
    return element


class SvgSurface:
    """Drawing surface producing a standalone SVG document."""

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self.root = _element(
            "svg",
            {
                "xmlns": SVG_NAMESPACE,
                "width": width,
                "height": height,
                "viewBox": f"0 0 {fmt_number(width)} {fmt_number(height)}",
            },
        )

    # --- primitives (created detached; append() places them) ---

    def create_path(self, attrs: dict[str, AttrValue] | None = None) -> SvgElement:
        return _element("path", attrs)

    def create_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        attrs: dict[str, AttrValue] | None = None,
    ) -> SvgElement:
        rect = _element("rect", {"x": x, "y": y, "width": width, "height": height})
        for name, value in (attrs or {}).items():
            rect.set(name, value)
        return rect

    def create_text(
        self,
        content: str,
        x: float,
        y: float,
        attrs: dict[str, AttrValue] | None = None,
    ) -> SvgElement:
        text = _element("text", {"x": x, "y": y})
        for name, value in (attrs or {}).items():
            text.set(name, value)
        text.text = content
        return text

    def create_group(self, attrs: dict[str, AttrValue] | None = None) -> SvgElement:
        return _element("g", attrs)

    def append(self, element: SvgElement, parent: SvgElement | None = None) -> SvgElement:
        return (parent or self.root).append(element)

    # --- queries ---

    def find_all(self, tag: str) -> list[SvgElement]:
        return self.root.find_all(tag)

    def find(self, tag: str) -> SvgElement | None:
        return self.root.find(tag)

    def to_svg(self) -> str:
        return self.root.to_svg()


# ============================================================================
# Utilities
# ============================================================================


def escape_xml(text: str) -> str:
    """Escape special XML characters in text content."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )
