"""
geometry.py — Shapes the drawing context can fill and clip with.

Coordinates follow the raster convention: origin top-left, y grows down, and
angles are in radians measured clockwise from the +x axis. Arcs use the same
start/end/anticlockwise rules as an HTML canvas arc(), so literal card
geometry can be written down as-is.

Every shape can rasterise itself into an "L" coverage mask. Masks are drawn
`scale` times larger and box-filtered down to get anti-aliased edges.
"""

import math
from dataclasses import dataclass
from typing import Union

from PIL import Image, ImageDraw

TAU = math.pi * 2

# Points per full turn when flattening arcs into polygons
ARC_SEGMENTS = 96

Point = tuple[float, float]


# ── Primitives ───────────────────────────────────────────────────────────────

class Primitive:
    """Something that can draw itself onto an ImageDraw with a given fill."""

    def render(self, draw: ImageDraw.ImageDraw, scale: int, fill: int):
        raise NotImplementedError

    def mask(self, size: tuple[int, int], scale: int = 1) -> Image.Image:
        return Shape((self,)).mask(size, scale)


@dataclass(frozen=True)
class Circle(Primitive):
    cx: float
    cy: float
    r: float

    def render(self, draw, scale, fill):
        if self.r <= 0:
            return
        s = scale
        draw.ellipse(((self.cx - self.r) * s, (self.cy - self.r) * s,
                      (self.cx + self.r) * s - 1, (self.cy + self.r) * s - 1),
                     fill=fill)


@dataclass(frozen=True)
class Rect(Primitive):
    x0: float
    y0: float
    x1: float
    y1: float

    def render(self, draw, scale, fill):
        if self.x1 <= self.x0 or self.y1 <= self.y0:
            return
        s = scale
        draw.rectangle((self.x0 * s, self.y0 * s, self.x1 * s - 1, self.y1 * s - 1),
                       fill=fill)


@dataclass(frozen=True)
class RoundedRect(Primitive):
    x0: float
    y0: float
    x1: float
    y1: float
    radius: float

    def render(self, draw, scale, fill):
        if self.x1 <= self.x0 or self.y1 <= self.y0:
            return
        s = scale
        draw.rounded_rectangle((self.x0 * s, self.y0 * s, self.x1 * s - 1, self.y1 * s - 1),
                               radius=self.radius * s, fill=fill)


@dataclass(frozen=True)
class Polygon(Primitive):
    points: tuple[Point, ...]

    def render(self, draw, scale, fill):
        if len(self.points) < 3:
            return
        draw.polygon([(x * scale, y * scale) for x, y in self.points], fill=fill)

    def bounds(self) -> tuple[float, float, float, float]:
        xs = [p[0] for p in self.points]
        ys = [p[1] for p in self.points]
        return min(xs), min(ys), max(xs), max(ys)


# ── Arcs and paths ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Arc:
    """One arc segment of a path, with canvas arc() semantics."""
    cx: float
    cy: float
    r: float
    start: float
    end: float
    anticlockwise: bool = False

    def sweep(self) -> float:
        if not self.anticlockwise:
            if self.end - self.start >= TAU:
                return TAU
            return (self.end - self.start) % TAU
        if self.start - self.end >= TAU:
            return -TAU
        return -((self.start - self.end) % TAU)

    def points(self) -> list[Point]:
        sweep = self.sweep()
        n = max(2, math.ceil(abs(sweep) / TAU * ARC_SEGMENTS))
        out = []
        for i in range(n + 1):
            a = self.start + sweep * i / n
            out.append((self.cx + self.r * math.cos(a), self.cy + self.r * math.sin(a)))
        return out


def path(*segments: Union[Arc, Point]) -> Polygon:
    """
    Join arcs and bare points into one closed polygon, the way consecutive
    arc()/lineTo() calls build a single canvas subpath.
    """
    points: list[Point] = []
    for seg in segments:
        if isinstance(seg, Arc):
            points.extend(seg.points())
        else:
            points.append((float(seg[0]), float(seg[1])))
    return Polygon(tuple(points))


def pill(left_cx: float, right_cx: float, cy: float, r: float) -> Polygon:
    """Two opposed semicircular caps joined by straight edges."""
    return path(
        Arc(right_cx, cy, r, math.pi * 1.5, math.pi * 0.5),
        Arc(left_cx, cy, r, math.pi * 0.5, math.pi * 1.5),
    )


# ── Compound shapes ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Shape:
    """
    Union of `add` primitives with every `cut` primitive removed from it.
    Cut-outs apply after all additions regardless of order.
    """
    add: tuple[Primitive, ...]
    cut: tuple[Primitive, ...] = ()

    def mask(self, size: tuple[int, int], scale: int = 1) -> Image.Image:
        w, h = size
        hi = Image.new("L", (w * scale, h * scale), 0)
        draw = ImageDraw.Draw(hi)
        for prim in self.add:
            prim.render(draw, scale, 255)
        for prim in self.cut:
            prim.render(draw, scale, 0)
        if scale == 1:
            return hi
        return hi.resize((w, h), Image.Resampling.BOX)
