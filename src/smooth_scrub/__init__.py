"""smooth-scrub — Render plain-text box diagrams as smooth SVG line art."""

from __future__ import annotations

from typing import Any

from .errors import SurfaceUnavailableError
from .renderer import SmoothScrub
from .surface import SvgElement, SvgSurface
from .theme import DEFAULTS
from .types import ScrubOptions

__all__ = [
    "SmoothScrub",
    "render_text",
    "render_svg",
    "auto_format",
    "ScrubOptions",
    "SvgSurface",
    "SvgElement",
    "SurfaceUnavailableError",
    "DEFAULTS",
]


def render_text(
    text: str,
    options: ScrubOptions | dict[str, Any] | None = None,
) -> Any:
    """Render a text diagram and return the drawing surface.

    Args:
        text: Diagram text in ASCII or Unicode box-drawing art, optionally
            carrying ``{#color:...}``, ``{#bg:...}`` and ``{#stroke:...}``
            markers.
        options: A ``ScrubOptions`` instance or a plain dict with the same
            keys (snake_case or camelCase).

    Example::

        surface = render_text("+-----+\\n| API |\\n+-----+")
        svg = surface.to_svg()
    """
    return SmoothScrub(options).render(text)


def render_svg(
    text: str,
    options: ScrubOptions | dict[str, Any] | None = None,
) -> str:
    """Render a text diagram to an SVG string."""
    return render_text(text, options).to_svg()


def auto_format(
    text: str,
    options: ScrubOptions | dict[str, Any] | None = None,
) -> str:
    """Align box borders and centered labels without rendering."""
    return SmoothScrub(options).auto_format(text)
