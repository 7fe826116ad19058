"""
colors.py — Colour strings to RGBA tuples.

Card models keep colours as the caller wrote them ("#0CA7FF", "rgb(12, 167, 255)",
"rgba(0, 0, 0, 0.5)"); they are only parsed when the surface paints with them.
"""

import re
from typing import Union

from PIL import ImageColor

Color = Union[str, tuple]
RGBA = tuple[int, int, int, int]

_RGBA_RE = re.compile(
    r"rgba\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)(%?)\s*\)",
    re.IGNORECASE,
)


def _channel(value: str) -> int:
    return max(0, min(255, round(float(value))))


def parse_color(color: Color) -> RGBA:
    """
    Parse any supported colour form into (r, g, b, a), a in 0-255.
    rgba() takes a CSS alpha (0-1 or a percentage), unlike Pillow's 0-255 form.
    """
    if isinstance(color, tuple):
        if len(color) == 3:
            return (*(int(c) for c in color), 255)
        if len(color) == 4:
            return tuple(int(c) for c in color)
        raise ValueError(f"Unsupported colour tuple: {color!r}")

    text = str(color).strip()
    m = _RGBA_RE.fullmatch(text)
    if m:
        r, g, b = (_channel(v) for v in m.groups()[:3])
        alpha = float(m.group(4))
        if m.group(5):
            alpha /= 100
        alpha = max(0.0, min(1.0, alpha))
        return (r, g, b, round(alpha * 255))

    try:
        return ImageColor.getcolor(text, "RGBA")
    except ValueError as e:
        raise ValueError(f"Unsupported colour: {color!r}") from e


def with_alpha(color: Color, alpha: float) -> RGBA:
    """Replace the alpha channel of a colour (alpha in 0-1)."""
    r, g, b, _ = parse_color(color)
    alpha = max(0.0, min(1.0, alpha))
    return (r, g, b, round(alpha * 255))
