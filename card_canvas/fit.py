"""
fit.py — Where an image lands when it is drawn into a box.

FILL stretches the whole image over the box. COVER keeps the aspect ratio and
crops, the way CSS object-fit: cover does, anchored at a normalised offset
(0.5, 0.5 = centre).
"""

from dataclasses import dataclass
from enum import Enum

from .errors import InvalidImage

Rect4 = tuple[float, float, float, float]   # x, y, w, h


class ObjectFit(str, Enum):
    FILL = "fill"
    COVER = "cover"


@dataclass(frozen=True)
class FitResult:
    source: Rect4   # sub-rectangle of the image
    dest: Rect4     # always the full destination box


def _check(iw, ih, bw, bh):
    if iw <= 0 or ih <= 0:
        raise InvalidImage(f"Image has no pixels ({iw}x{ih})")
    if bw <= 0 or bh <= 0:
        raise InvalidImage(f"Destination box is empty ({bw}x{bh})")


def fill(iw: float, ih: float, bw: float, bh: float) -> FitResult:
    _check(iw, ih, bw, bh)
    return FitResult(source=(0, 0, iw, ih), dest=(0, 0, bw, bh))


def cover(iw: float, ih: float, bw: float, bh: float,
          offset_x: float = 0.5, offset_y: float = 0.5) -> FitResult:
    """
    Source crop that fills a bw x bh box from an iw x ih image without
    distortion. The crop always lies inside the image.
    """
    _check(iw, ih, bw, bh)

    offset_x = min(max(offset_x, 0.0), 1.0)
    offset_y = min(max(offset_y, 0.0), 1.0)

    r = min(bw / iw, bh / ih)
    nw, nh = iw * r, ih * r
    ar = 1.0

    # Decide which gap to fill
    if nw < bw:
        ar = bw / nw
    if abs(ar - 1) < 1e-14 and nh < bh:
        ar = bh / nh
    nw *= ar
    nh *= ar

    cw = min(iw / (nw / bw), iw)
    ch = min(ih / (nh / bh), ih)

    cx = min(max((iw - cw) * offset_x, 0.0), iw - cw)
    cy = min(max((ih - ch) * offset_y, 0.0), ih - ch)

    return FitResult(source=(cx, cy, cw, ch), dest=(0, 0, bw, bh))


def resolve(mode: ObjectFit, iw: float, ih: float, bw: float, bh: float) -> FitResult:
    if ObjectFit(mode) is ObjectFit.COVER:
        return cover(iw, ih, bw, bh)
    return fill(iw, ih, bw, bh)
