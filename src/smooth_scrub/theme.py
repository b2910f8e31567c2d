from __future__ import annotations

import re

# ============================================================================
# Defaults
# ============================================================================

DEFAULTS = {"stroke": "#333", "text": "#444"}

# ============================================================================
# Color safety -- values that may be written into SVG attributes verbatim
# ============================================================================

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

# Anything that could open a function call, a CSS block or a declaration.
_UNSAFE_FRAGMENTS = ("url(", "(", ")", "{", "}", ";")

CSS_NAMED_COLORS: frozenset[str] = frozenset(
    """
    aliceblue antiquewhite aqua aquamarine azure beige bisque black
    blanchedalmond blue blueviolet brown burlywood cadetblue chartreuse
    chocolate coral cornflowerblue cornsilk crimson cyan darkblue darkcyan
    darkgoldenrod darkgray darkgreen darkgrey darkkhaki darkmagenta
    darkolivegreen darkorange darkorchid darkred darksalmon darkseagreen
    darkslateblue darkslategray darkslategrey darkturquoise darkviolet
    deeppink deepskyblue dimgray dimgrey dodgerblue firebrick floralwhite
    forestgreen fuchsia gainsboro ghostwhite gold goldenrod gray green
    greenyellow grey honeydew hotpink indianred indigo ivory khaki lavender
    lavenderblush lawngreen lemonchiffon lightblue lightcoral lightcyan
    lightgoldenrodyellow lightgray lightgreen lightgrey lightpink
    lightsalmon lightseagreen lightskyblue lightslategray lightslategrey
    lightsteelblue lightyellow lime limegreen linen magenta maroon
    mediumaquamarine mediumblue mediumorchid mediumpurple mediumseagreen
    mediumslateblue mediumspringgreen mediumturquoise mediumvioletred
    midnightblue mintcream mistyrose moccasin navajowhite navy oldlace olive
    olivedrab orange orangered orchid palegoldenrod palegreen paleturquoise
    palevioletred papayawhip peachpuff peru pink plum powderblue purple
    rebeccapurple red rosybrown royalblue saddlebrown salmon sandybrown
    seagreen seashell sienna silver skyblue slateblue slategray slategrey
    snow springgreen steelblue tan teal thistle tomato turquoise violet
    wheat white whitesmoke yellow yellowgreen transparent
    """.split()
)


def is_safe_color(value: str) -> bool:
    """True for #rgb / #rrggbb hex colors and allow-listed CSS color names."""
    lowered = value.strip().lower()
    if any(fragment in lowered for fragment in _UNSAFE_FRAGMENTS):
        return False
    if _HEX_COLOR_RE.match(lowered):
        return True
    return lowered in CSS_NAMED_COLORS
