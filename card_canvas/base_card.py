"""
base_card.py — Renders 800x350 base cards (welcome / leave greetings).

Layout, top to bottom: a round avatar with a solid ring, then up to three
centred text lines (main, nickname, second). Each line has a fixed size and a
maximum length; longer content is cut and ends in "...". Main text is always
upper-case.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image

from .config import IMAGE_TIMEOUT
from .errors import ImageLoadError, InvalidCardError
from .fonts import font_descriptor, is_valid_weight
from .geometry import Circle
from .images import ImageCache, load_image
from .models import BaseCard, TextSpec, resolve_style
from .surface import BASE_CARD_SIZE, create_surface

logger = logging.getLogger(__name__)

ELLIPSIS = "..."

AVATAR_RING = Circle(400, 100, 80)
AVATAR_CLIP = Circle(400, 100, 75)
AVATAR_BOX = (325, 25, 150, 150)
AVATAR_PLACEHOLDER = "#7F8384"     # disc colour when the card has no avatar

TEXT_CENTER_X = 400
TEXT_MAX_WIDTH = 800


@dataclass(frozen=True)
class _FieldLayout:
    size: int
    max_length: int
    y: float
    upper: bool = False


FIELD_LAYOUTS = {
    "main": _FieldLayout(size=48, max_length=40, y=225, upper=True),
    "nickname": _FieldLayout(size=35, max_length=60, y=265),
    "second": _FieldLayout(size=33, max_length=65, y=310),
}


def truncate(content: str, max_length: int) -> str:
    """Cut to max_length characters, the last three being '...'."""
    if len(content) > max_length:
        return content[:max_length - len(ELLIPSIS)] + ELLIPSIS
    return content


def field_text(text: TextSpec, kind: str) -> str:
    layout = FIELD_LAYOUTS[kind]
    content = text.content.upper() if layout.upper else text.content
    return truncate(content, layout.max_length)


def _draw_field(ctx, card: BaseCard, text: Optional[TextSpec], kind: str):
    if text is None:
        return
    layout = FIELD_LAYOUTS[kind]
    # size is fixed per line; only colour, font and weight follow the text
    style = resolve_style(text, color=card.default_text_color, font=card.default_font,
                          size=layout.size, weight="normal")
    ctx.save()
    ctx.font = font_descriptor(style.weight, layout.size, style.font)
    ctx.fill_style = style.color
    ctx.text_align = "center"
    ctx.fill_text(field_text(text, kind), TEXT_CENTER_X, layout.y, TEXT_MAX_WIDTH)
    ctx.restore()


async def draw_base_card(ctx, card: BaseCard, width: int, height: int, *,
                         timeout: Optional[float] = IMAGE_TIMEOUT,
                         image_cache: Optional[ImageCache] = None):
    for label, text in (("main_text", card.main_text), ("nickname", card.nickname),
                        ("second_text", card.second_text)):
        if text is not None and not is_valid_weight(text.weight):
            raise InvalidCardError(f"{label} weight must be a keyword or 1-1000, got {text.weight!r}")

    background = avatar = None
    if card.background_image:
        try:
            background = await load_image(card.background_image, cache=image_cache,
                                          timeout=timeout)
        except ImageLoadError as e:
            raise e.as_role("background image") from e
    if card.avatar_image:
        try:
            avatar = await load_image(card.avatar_image, cache=image_cache, timeout=timeout)
        except ImageLoadError as e:
            raise e.as_role("avatar image") from e

    # Background
    if background is not None:
        ctx.draw_image(background, 0, 0, width, height)
    else:
        ctx.fill_style = card.background_color
        ctx.fill_rect(0, 0, width, height)

    _draw_field(ctx, card, card.main_text, "main")
    _draw_field(ctx, card, card.nickname, "nickname")
    _draw_field(ctx, card, card.second_text, "second")

    # Avatar ring, then the avatar clipped to the inner disc
    ctx.fill_style = card.avatar_border_color
    ctx.fill(AVATAR_RING)
    ctx.save()
    ctx.clip(AVATAR_CLIP)
    if avatar is not None:
        ctx.draw_image(avatar, *AVATAR_BOX)
    else:
        ctx.fill_style = AVATAR_PLACEHOLDER
        ctx.fill(AVATAR_CLIP)
    ctx.restore()


async def build_base_card(card: BaseCard, *, timeout: Optional[float] = IMAGE_TIMEOUT,
                          image_cache: Optional[ImageCache] = None) -> Image.Image:
    """Render a base card onto a fresh 800x350 RGBA surface."""
    image, ctx = create_surface(*BASE_CARD_SIZE)
    logger.debug("[base_card] Rendering card for %s",
                 card.nickname.content if card.nickname else "<no nickname>")
    await draw_base_card(ctx, card, image.width, image.height,
                         timeout=timeout, image_cache=image_cache)
    return image
