"""
rank_card.py — Renders 1000x250 rank cards.

A render is a fixed sequence of passes:

  background → avatarBorder → avatar → progressBar → xp → nickname → rank → lvl

Each pass reads the card, paints onto the drawing context and hands on a
Cursor. The cursor carries the two right-to-left text positions: the xp pass
moves `xp` left past the "<current> / <required> xp" block and the nickname
is squeezed into whatever remains; rank and lvl share `rank`. Because of that
hand-off the order is fixed; RankRenderOptions.only can switch passes off but
never reorder them.

There is no layout engine: every position below is either a literal or the
result of measuring text drawn earlier in the same render.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from PIL import Image

from .badge import status_badge
from .colors import with_alpha
from .config import IMAGE_TIMEOUT
from .errors import ImageLoadError, InvalidCardError
from .fit import ObjectFit, cover
from .fonts import font_descriptor, is_valid_weight
from .geometry import Circle, RoundedRect, Shape, pill
from .images import ImageCache, load_image, load_image_safe
from .models import RankCard, resolve_style
from .surface import RANK_CARD_SIZE, create_surface

logger = logging.getLogger(__name__)

PASS_NAMES = ("background", "avatarBorder", "avatar", "progressBar",
              "xp", "nickname", "rank", "lvl")

# ── Layout constants ─────────────────────────────────────────────────────────

CORNER_R = 30
RIGHT_MARGIN = 30           # right edge of every right-aligned text block

# Decorative bubbles: (x, y, radius, alpha)
BUBBLES = (
    (153, 225, 10, 0.31),
    (213, 81, 10, 0.07),
    (238, 16, 10, 0.6),
    (486, 148, 40, 0.1),
    (396.5, 33.5, 7.5, 0.05),
    (515.5, 38.5, 12.5, 0.43),
    (572, 257, 30, 1),
    (782.5, 226.5, 8.5, 0.15),
    (1000, 101, 10, 0.63),
)

AVATAR_BORDER = Circle(88, 101, 75)
AVATAR_CLIP = Shape((Circle(105, 125, 75),), cut=(Circle(159, 179, 23.5),))
AVATAR_BOX = (30, 50, 150, 150)

BAR_LEFT = 210              # left edge of the progress track
BAR_CY = 182.5
BAR_R = 17.5
BAR_TRACK_ALPHA = 0.5

TEXT_WEIGHT = "600"
XP_FONT_SIZE = 35
XP_Y = 150
XP_SLASH_GAP = 3            # space on each side of "/"

NICKNAME_X = 210
NICKNAME_MARGIN = 15        # gap kept between nickname and the xp block
NICKNAME_SIZE = 35

HEADER_Y = 75               # baseline of the rank / level line
NUMBER_SIZE = 60
PREFIX_SIZE = 35


# ── Options and cursor ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class RankRenderOptions:
    only: Optional[frozenset] = None        # pass names to run; None = all
    object_fit: ObjectFit = ObjectFit.FILL  # background image fit
    timeout: Optional[float] = IMAGE_TIMEOUT
    image_cache: Optional[ImageCache] = field(default=None, compare=False)

    def __post_init__(self):
        if self.only is not None:
            names = frozenset(self.only)
            unknown = names.difference(PASS_NAMES)
            if unknown:
                raise InvalidCardError(f"Unknown pass name(s): {', '.join(sorted(unknown))}")
            object.__setattr__(self, "only", names)
        try:
            object.__setattr__(self, "object_fit", ObjectFit(self.object_fit))
        except ValueError as e:
            raise InvalidCardError(f"Unknown object fit: {self.object_fit!r}") from e

    def wants(self, name: str) -> bool:
        return self.only is None or name in self.only


@dataclass(frozen=True)
class Cursor:
    xp: float       # left edge of the xp block, read by the nickname pass
    rank: float     # left edge of the rank/level line so far


@dataclass(frozen=True)
class _Frame:
    width: int
    height: int
    options: RankRenderOptions


# ── Helpers ──────────────────────────────────────────────────────────────────

def format_number(value) -> str:
    """100.0 -> '100', 2.5 -> '2.5', 7 -> '7'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def progress_percent(current_xp: float, required_xp: float) -> int:
    """Whole percent of the level reached, clamped to 0-100."""
    percent = math.floor(current_xp / required_xp * 100)
    return max(0, min(100, percent))


def one_percent_bar(width: float) -> float:
    return (width - RIGHT_MARGIN - BAR_LEFT) / 100


def progress_track(width: float):
    return pill(BAR_LEFT + BAR_R, width - RIGHT_MARGIN - BAR_R, BAR_CY, BAR_R)


def progress_front(width: float, percent: int):
    """Filled part of the bar, or None below 1%."""
    if percent < 1:
        return None
    px = one_percent_bar(width) * percent
    return pill(BAR_LEFT + BAR_R, BAR_LEFT - BAR_R + px, BAR_CY, BAR_R)


def validate(card: RankCard):
    """Reject numbers and font weights the layout cannot draw. Called before any painting."""
    if not isinstance(card.nickname.content, str):
        raise InvalidCardError("nickname content must be a string")
    req = card.required_xp
    if req is None or not math.isfinite(req) or req <= 0:
        raise InvalidCardError(f"required_xp must be a positive number, got {req!r}")
    cur = card.current_xp
    if cur is None or not math.isfinite(cur) or cur < 0:
        raise InvalidCardError(f"current_xp must be a non-negative number, got {cur!r}")
    if card.level is None or card.level < 0:
        raise InvalidCardError(f"level must be >= 0, got {card.level!r}")
    if card.rank is None or card.rank < 0:
        raise InvalidCardError(f"rank must be >= 0, got {card.rank!r}")
    for label, styled in (("nickname", card.nickname),
                          ("level_prefix", card.level_prefix),
                          ("rank_prefix", card.rank_prefix),
                          ("level_number_format", card.level_number_format),
                          ("rank_number_format", card.rank_number_format)):
        weight = getattr(styled, "weight", None)
        if not is_valid_weight(weight):
            raise InvalidCardError(f"{label} weight must be a keyword or 1-1000, got {weight!r}")


# ── Passes ───────────────────────────────────────────────────────────────────

async def _background(ctx, card: RankCard, frame: _Frame, cursor: Cursor) -> Cursor:
    w, h = frame.width, frame.height
    img = None
    if card.background_image:
        try:
            img = await load_image(card.background_image, cache=frame.options.image_cache,
                                   timeout=frame.options.timeout)
        except ImageLoadError as e:
            raise e.as_role("background image") from e

    ctx.save()
    ctx.clip(RoundedRect(0, 0, w, h, CORNER_R))
    if img is not None:
        if frame.options.object_fit is ObjectFit.COVER:
            fit = cover(img.width, img.height, w, h)
            ctx.draw_image(img, *fit.dest, source=fit.source)
        else:
            ctx.draw_image(img, 0, 0, w, h)
    else:
        ctx.fill_style = card.background_color.background
        ctx.fill_rect(0, 0, w, h)
        bubbles = card.background_color.bubbles
        if bubbles:
            # each bubble painted once at its own alpha; no shared path between them
            for x, y, r, alpha in BUBBLES:
                ctx.fill_style = with_alpha(bubbles, alpha)
                ctx.fill(Circle(x, y, r))
    ctx.restore()
    return cursor


async def _avatar_border(ctx, card: RankCard, frame: _Frame, cursor: Cursor) -> Cursor:
    if card.avatar_background_enabled:
        ctx.fill_style = card.avatar_background_color
        ctx.fill(AVATAR_BORDER)
    return cursor


async def _avatar(ctx, card: RankCard, frame: _Frame, cursor: Cursor) -> Cursor:
    if not card.avatar_image:
        return cursor
    img = await load_image_safe(card.avatar_image, cache=frame.options.image_cache,
                                timeout=frame.options.timeout)
    if img is None:
        raise ImageLoadError(card.avatar_image, "could not be loaded", role="avatar image")

    ctx.save()
    ctx.clip(AVATAR_CLIP)
    ctx.draw_image(img, *AVATAR_BOX)
    ctx.restore()

    badge = status_badge(card.status)
    ctx.fill_style = badge.color
    ctx.fill(badge.shape)
    return cursor


async def _progress_bar(ctx, card: RankCard, frame: _Frame, cursor: Cursor) -> Cursor:
    track = progress_track(frame.width)
    ctx.save()
    ctx.global_alpha = BAR_TRACK_ALPHA
    ctx.fill_style = card.progress_bar_color
    ctx.fill(track)
    ctx.clip(track)

    front = progress_front(frame.width, progress_percent(card.current_xp, card.required_xp))
    if front is not None:
        ctx.global_alpha = 1
        ctx.fill(front)
    ctx.restore()
    return cursor


async def _xp(ctx, card: RankCard, frame: _Frame, cursor: Cursor) -> Cursor:
    x = cursor.xp
    required = f"{format_number(card.required_xp)} xp"
    current = format_number(card.current_xp)

    ctx.save()
    ctx.font = font_descriptor(TEXT_WEIGHT, XP_FONT_SIZE, card.default_font)
    ctx.text_align = "right"
    ctx.fill_style = card.required_xp_color
    ctx.fill_text(required, x, XP_Y)
    x -= ctx.measure_text(required) + XP_SLASH_GAP
    ctx.fill_text("/", x, XP_Y)
    x -= ctx.measure_text("/") + XP_SLASH_GAP
    ctx.fill_style = card.current_xp_color
    ctx.fill_text(current, x, XP_Y)
    x -= ctx.measure_text(current)
    ctx.restore()
    return replace(cursor, xp=x)


def nickname_width(cursor: Cursor) -> float:
    """Room left for the nickname once the xp block is placed."""
    return cursor.xp - NICKNAME_X - NICKNAME_MARGIN


async def _nickname(ctx, card: RankCard, frame: _Frame, cursor: Cursor) -> Cursor:
    style = resolve_style(card.nickname, color=card.default_text_color,
                          font=card.default_font, size=NICKNAME_SIZE, weight=TEXT_WEIGHT)
    ctx.save()
    ctx.font = font_descriptor(style.weight, style.size, style.font)
    ctx.fill_style = style.color
    ctx.text_align = "left"
    ctx.fill_text(card.nickname.content, NICKNAME_X, XP_Y, nickname_width(cursor))
    ctx.restore()
    return cursor


def _labelled_number(ctx, card: RankCard, x: float, number, number_fmt,
                     prefix, label: str) -> float:
    """Right-aligned "<label> <number>" ending at x; returns the new left edge."""
    num_style = resolve_style(number_fmt, color=card.default_text_color,
                              font=card.default_font, size=NUMBER_SIZE, weight=TEXT_WEIGHT)
    ctx.fill_style = num_style.color
    ctx.font = font_descriptor(num_style.weight, num_style.size, num_style.font)
    text = format_number(number)
    ctx.fill_text(text, x, HEADER_Y)
    x -= ctx.measure_text(text)

    pre_style = resolve_style(prefix, color=card.default_text_color,
                              font=card.default_font, size=PREFIX_SIZE, weight=TEXT_WEIGHT)
    ctx.fill_style = pre_style.color
    ctx.font = font_descriptor(pre_style.weight, pre_style.size, pre_style.font)
    ctx.fill_text(label, x, HEADER_Y)
    x -= ctx.measure_text(label)
    return x


async def _rank(ctx, card: RankCard, frame: _Frame, cursor: Cursor) -> Cursor:
    content = (card.rank_prefix.content if card.rank_prefix else None) or "RANK"
    ctx.save()
    ctx.text_align = "right"
    x = _labelled_number(ctx, card, cursor.rank, card.rank, card.rank_number_format,
                         card.rank_prefix, f" {content} ")
    ctx.restore()
    return replace(cursor, rank=x)


async def _lvl(ctx, card: RankCard, frame: _Frame, cursor: Cursor) -> Cursor:
    content = (card.level_prefix.content if card.level_prefix else None) or "LVL"
    ctx.save()
    ctx.text_align = "right"
    x = _labelled_number(ctx, card, cursor.rank, card.level, card.level_number_format,
                         card.level_prefix, f"{content} ")
    ctx.restore()
    return replace(cursor, rank=x)


RANK_PASSES = (
    ("background", _background),
    ("avatarBorder", _avatar_border),
    ("avatar", _avatar),
    ("progressBar", _progress_bar),
    ("xp", _xp),
    ("nickname", _nickname),
    ("rank", _rank),
    ("lvl", _lvl),
)


# ── Public API ───────────────────────────────────────────────────────────────

def _coerce_options(options) -> RankRenderOptions:
    if options is None:
        return RankRenderOptions()
    if isinstance(options, RankRenderOptions):
        return options
    raise InvalidCardError(f"Expected RankRenderOptions, got {type(options).__name__}")


async def draw_rank_card(ctx, card: RankCard, width: int, height: int,
                         options: Optional[RankRenderOptions] = None) -> Cursor:
    """
    Run the enabled passes in order against `ctx`. Returns the final cursor.
    Raises InvalidCardError for unusable numbers and ImageLoadError when the
    background or avatar cannot be loaded; the surface is then incomplete and
    must be discarded.
    """
    options = _coerce_options(options)
    validate(card)
    frame = _Frame(width=width, height=height, options=options)
    cursor = Cursor(xp=width - RIGHT_MARGIN, rank=width - RIGHT_MARGIN)

    enabled = [name for name, _ in RANK_PASSES if options.wants(name)]
    logger.debug("[rank_card] Drawing passes: %s", ", ".join(enabled))
    for name, step in RANK_PASSES:
        if options.wants(name):
            cursor = await step(ctx, card, frame, cursor)
    return cursor


async def build_rank_card(card: RankCard,
                          options: Optional[RankRenderOptions] = None) -> Image.Image:
    """Render a rank card onto a fresh 1000x250 RGBA surface."""
    image, ctx = create_surface(*RANK_CARD_SIZE)
    await draw_rank_card(ctx, card, image.width, image.height, options)
    return image


def render_options(only: Optional[Iterable[str]] = None,
                   object_fit=ObjectFit.FILL, **kwargs) -> RankRenderOptions:
    """Keyword shortcut: render_options(only=["xp", "nickname"], object_fit="cover")."""
    return RankRenderOptions(only=frozenset(only) if only is not None else None,
                             object_fit=object_fit, **kwargs)
