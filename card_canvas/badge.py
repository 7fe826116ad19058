"""
badge.py — The status badge painted on the avatar's bottom-right edge.

Each status has its own fixed shape and colour. Anything that is not a
known status is drawn as offline.
"""

import math
from dataclasses import dataclass

from .geometry import Arc, Circle, Polygon, Shape, path

BADGE_CX, BADGE_CY = 159, 179
BADGE_R = 17

_DISC = Circle(BADGE_CX, BADGE_CY, BADGE_R)
_PI = math.pi


@dataclass(frozen=True)
class Badge:
    shape: Shape
    color: str


_ONLINE = Badge(Shape((_DISC,)), "#57F287")

# Crescent: the disc's outer edge, then back along a second disc shifted up-left
_IDLE = Badge(Shape((path(
    Arc(159, 179, 17, _PI * 0.9, _PI * 1.6, anticlockwise=True),
    Arc(148, 168, 17, _PI * 1.9, _PI * 0.6),
),)), "#faa61a")

# Ring with a horizontal bar cut out
_DND = Badge(Shape((_DISC,), cut=(path(
    Arc(151, 179, 3.5, _PI * 1.5, _PI * 0.5, anticlockwise=True),
    Arc(167, 179, 3.5, _PI * 0.5, _PI * 1.5, anticlockwise=True),
),)), "#ed4245")

# Ring with a play triangle cut out
_STREAMING = Badge(Shape((_DISC,), cut=(
    Polygon(((168, 179), (154.5, 170), (154.5, 188))),
)), "#593695")

# Ring with a small dot cut out
_OFFLINE = Badge(Shape((_DISC,), cut=(Circle(159, 179, 9),)), "#747f8d")

_BADGES = {
    "online": _ONLINE,
    "idle": _IDLE,
    "dnd": _DND,
    "streaming": _STREAMING,
}


def status_badge(status) -> Badge:
    """Badge for a UserStatus or status string. Never fails."""
    key = getattr(status, "value", status)
    if not isinstance(key, str):
        return _OFFLINE
    return _BADGES.get(key.lower(), _OFFLINE)
