from __future__ import annotations

# ============================================================================
# Render pipeline
#
# text -> parsed lines -> grid -> boxes / runs / placed text -> surface
#
# Everything derived from the text is rebuilt on every call; a SmoothScrub
# instance holds nothing but its options.
# ============================================================================

import logging
from dataclasses import fields
from typing import Any

from .boxes import box_bounds, detect_boxes, resolve_box_styles, stroked_perimeter
from .classify import Classifier
from .connectors import build_path_data, detect_horizontal_runs, detect_vertical_runs
from .errors import SurfaceUnavailableError
from .grid import build_grid
from .layout import layout_text
from .markers import parse_line
from .normalize import auto_format
from .styles import FONT_WEIGHT, PATH_ATTRIBUTES
from .surface import SvgSurface
from .types import BoxStyle, DetectedBox, Grid, PlacedText, ScrubOptions

logger = logging.getLogger(__name__)


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def normalize_options(options: ScrubOptions | dict[str, Any] | None) -> ScrubOptions:
    """Accept a ScrubOptions, None, or a dict with snake_case or camelCase keys."""
    if options is None:
        return ScrubOptions()
    if not isinstance(options, dict):
        return options

    defaults = ScrubOptions()
    values = {}
    for f in fields(ScrubOptions):
        default = getattr(defaults, f.name)
        values[f.name] = options.get(f.name, options.get(_camel_case(f.name), default))
    return ScrubOptions(**values)


class SmoothScrub:
    """Renders plain-text box diagrams as SVG."""

    def __init__(self, options: ScrubOptions | dict[str, Any] | None = None) -> None:
        self.options = normalize_options(options)

    def render(self, text: str) -> Any:
        """Render a text diagram onto a fresh drawing surface.

        Returns whatever the configured surface factory builds (an
        SvgSurface by default). Raises SurfaceUnavailableError when the
        factory fails or yields nothing.
        """
        options = self.options
        classifier = Classifier.for_document(text)
        parsed_lines = [parse_line(line) for line in text.split("\n")]
        clean_lines = [p.clean_line for p in parsed_lines]
        logger.debug(f"Rendering {len(clean_lines)} lines with {classifier!r}")

        grid = build_grid(clean_lines, classifier.rich, options)

        boxes = detect_boxes(clean_lines, classifier)
        box_styles = resolve_box_styles(boxes, parsed_lines, classifier.rich)
        owned = stroked_perimeter(box_styles, grid.rows)

        surface = self._create_surface(grid)

        if options.background:
            surface.append(
                surface.create_rect(0, 0, grid.width, grid.height, {"fill": options.background})
            )
        self._draw_boxes(surface, box_styles)

        vertical = detect_vertical_runs(grid.rows, classifier, options, owned)
        horizontal = detect_horizontal_runs(grid.rows, classifier, options, owned)
        logger.debug(f"Found {len(horizontal)} horizontal and {len(vertical)} vertical runs")
        path_data = build_path_data(horizontal, vertical, classifier, options)
        surface.append(
            surface.create_path(
                {
                    "stroke": options.color,
                    "stroke-width": options.stroke_width,
                    **PATH_ATTRIBUTES,
                    "d": path_data,
                }
            )
        )

        placed = layout_text(grid, parsed_lines, classifier, options, owned)
        self._draw_text(surface, placed)
        return surface

    def auto_format(self, text: str) -> str:
        """Align box borders and centered labels in a text diagram."""
        return auto_format(text)

    # --- internals ---

    def _create_surface(self, grid: Grid) -> Any:
        factory = self.options.surface_factory or SvgSurface
        try:
            surface = factory(grid.width, grid.height)
        except Exception as e:
            raise SurfaceUnavailableError(f"Could not create a drawing surface: {e}") from e
        if surface is None:
            raise SurfaceUnavailableError("Surface factory returned no surface")
        return surface

    def _draw_boxes(self, surface: Any, box_styles: dict[DetectedBox, BoxStyle]) -> None:
        for box, style in box_styles.items():
            x, y, width, height = box_bounds(box, self.options)
            attrs: dict[str, Any] = {
                "fill": style.fill or "none",
                "stroke": style.stroke or "none",
            }
            if style.stroke:
                attrs["stroke-width"] = self.options.stroke_width
            surface.append(surface.create_rect(x, y, width, height, attrs))

    def _draw_text(self, surface: Any, placed: list[PlacedText]) -> None:
        group = surface.append(surface.create_group())
        for node in placed:
            attrs: dict[str, Any] = {
                "text-anchor": node.anchor,
                "fill": node.fill,
                "font-family": self.options.font_family,
                "font-weight": FONT_WEIGHT,
                "font-size": node.font_size,
            }
            if node.preserve:
                attrs["xml:space"] = "preserve"
            surface.append(surface.create_text(node.text, node.x, node.y, attrs), group)
