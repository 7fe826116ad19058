"""
surface.py — A small 2D drawing context over a Pillow RGBA image.

The card engines are written against a canvas-style API: a current fill
style, global alpha, font and text alignment, an intersecting clip region and
a save()/restore() stack. DrawContext provides exactly that on top of Pillow.
Every paint operation builds a coverage mask, scales it by the global alpha
and the fill colour's alpha, intersects it with the clip and composites the
result source-over onto the image.
"""

import math
from typing import Optional

from PIL import Image, ImageChops, ImageDraw

from .colors import Color, parse_color
from .config import SUPERSAMPLE
from .fonts import FontSpec, get_font, parse_font
from .geometry import Rect

RANK_CARD_SIZE = (1000, 250)
BASE_CARD_SIZE = (800, 350)

TEXT_ALIGNS = ("left", "right", "center")


def _scale_mask(mask: Image.Image, factor: float) -> Image.Image:
    if factor >= 1:
        return mask
    return mask.point(lambda v: round(v * factor))


class DrawContext:
    """Canvas-like drawing state bound to one RGBA image."""

    def __init__(self, image: Image.Image, supersample: int = SUPERSAMPLE):
        if image.mode != "RGBA":
            raise ValueError("DrawContext needs an RGBA image")
        self.image = image
        self.width, self.height = image.size
        self.supersample = supersample
        self.fill_style: Color = "#000000"
        self.global_alpha: float = 1.0
        self.text_align: str = "left"
        self._font = FontSpec(family="sans-serif", size=10)
        self._clip: Optional[Image.Image] = None
        self._stack: list[tuple] = []

    # ── State ──

    @property
    def font(self) -> str:
        return self._font.descriptor()

    @font.setter
    def font(self, descriptor: str):
        self._font = parse_font(descriptor)

    def save(self):
        self._stack.append((self.fill_style, self.global_alpha, self.text_align,
                            self._font, self._clip))

    def restore(self):
        if not self._stack:
            return
        (self.fill_style, self.global_alpha, self.text_align,
         self._font, self._clip) = self._stack.pop()

    def clip(self, shape):
        """Intersect the clip region with a shape."""
        mask = shape.mask(self.image.size, self.supersample)
        self._clip = mask if self._clip is None else ImageChops.multiply(self._clip, mask)

    # ── Painting ──

    def _paint(self, coverage: Image.Image):
        r, g, b, a = parse_color(self.fill_style)
        alpha = max(0.0, min(1.0, self.global_alpha)) * a / 255
        if alpha <= 0:
            return
        coverage = _scale_mask(coverage, alpha)
        if self._clip is not None:
            coverage = ImageChops.multiply(coverage, self._clip)
        layer = Image.new("RGBA", self.image.size, (r, g, b, 0))
        layer.putalpha(coverage)
        self.image.alpha_composite(layer)

    def fill(self, shape):
        self._paint(shape.mask(self.image.size, self.supersample))

    def fill_rect(self, x: float, y: float, w: float, h: float):
        self.fill(Rect(x, y, x + w, y + h))

    def draw_image(self, img: Image.Image, dx: float, dy: float, dw: float, dh: float,
                   source: Optional[tuple[float, float, float, float]] = None):
        """
        Draw `img` (or the `source` x, y, w, h sub-rectangle of it) scaled into
        the destination rectangle. The image itself is never modified.
        """
        w, h = round(dw), round(dh)
        if w <= 0 or h <= 0:
            return
        if img.mode != "RGBA":
            img = img.convert("RGBA")
        box = None
        if source is not None:
            sx, sy, sw, sh = source
            box = (max(sx, 0), max(sy, 0),
                   min(sx + sw, img.width), min(sy + sh, img.height))
        scaled = img.resize((w, h), Image.Resampling.LANCZOS, box=box)

        layer = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
        layer.paste(scaled, (round(dx), round(dy)))
        alpha = _scale_mask(layer.getchannel("A"), max(0.0, min(1.0, self.global_alpha)))
        if self._clip is not None:
            alpha = ImageChops.multiply(alpha, self._clip)
        layer.putalpha(alpha)
        self.image.alpha_composite(layer)

    # ── Text ──

    def measure_text(self, text: str) -> float:
        return get_font(self._font).getlength(text)

    def fill_text(self, text: str, x: float, y: float, max_width: Optional[float] = None):
        """
        Paint text with its alphabetic baseline at y. `x` is the left edge,
        right edge or centre depending on text_align. Text wider than
        max_width is condensed horizontally to fit.
        """
        if max_width is not None and (math.isnan(max_width) or max_width <= 0):
            return
        if not text:
            return
        font = get_font(self._font)
        ascent, descent = font.getmetrics()
        width = font.getlength(text)
        left, top, right, bottom = font.getbbox(text)
        pad = 2
        mask_w = math.ceil(max(right, width)) + pad * 2
        mask_h = max(ascent + descent, math.ceil(bottom)) + pad
        mask = Image.new("L", (mask_w, mask_h), 0)
        ImageDraw.Draw(mask).text((pad, 0), text, font=font, fill=255)

        if max_width is not None and width > max_width:
            squeeze = max_width / width
            mask = mask.resize((max(1, round(mask_w * squeeze)), mask_h),
                               Image.Resampling.LANCZOS)
            pad *= squeeze
            width = max_width

        if self.text_align == "right":
            x -= width
        elif self.text_align == "center":
            x -= width / 2

        coverage = Image.new("L", self.image.size, 0)
        coverage.paste(mask, (round(x - pad), round(y - ascent)))
        self._paint(coverage)


# ── Surface factory ──────────────────────────────────────────────────────────

def create_surface(width: int, height: int,
                   supersample: int = SUPERSAMPLE) -> tuple[Image.Image, DrawContext]:
    """Allocate a transparent RGBA surface and a drawing context for it."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Surface size must be positive, got {width}x{height}")
    image = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    return image, DrawContext(image, supersample=supersample)
