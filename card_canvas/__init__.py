"""
card_canvas — Rank, welcome and leave card images rendered with Pillow.
"""

import logging

from .base_card import build_base_card, draw_base_card
from .config import __version__
from .errors import (CardError, FontRegistrationError, ImageLoadError, InvalidCardError,
                     InvalidImage)
from .fit import ObjectFit, cover
from .fonts import FontDescriptor, register_font, register_fonts
from .images import DEFAULT_IMAGE_CACHE, ImageCache, load_image, load_image_safe
from .models import (LEAVE_PRESET, WELCOME_PRESET, BaseCard, CardPreset, PrefixSpec,
                     RankBackground, RankCard, TextFormat, TextSpec, UserStatus, leave_card,
                     welcome_card)
from .output import to_discord_file, to_png_bytes
from .rank_card import RankRenderOptions, build_rank_card, draw_rank_card, render_options
from .surface import BASE_CARD_SIZE, RANK_CARD_SIZE, DrawContext, create_surface

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BASE_CARD_SIZE", "BaseCard", "CardError", "CardPreset", "DEFAULT_IMAGE_CACHE",
    "DrawContext", "FontDescriptor", "FontRegistrationError", "ImageCache",
    "ImageLoadError", "InvalidCardError", "InvalidImage", "LEAVE_PRESET", "ObjectFit",
    "PrefixSpec", "RANK_CARD_SIZE", "RankBackground", "RankCard", "RankRenderOptions",
    "TextFormat", "TextSpec", "UserStatus", "WELCOME_PRESET", "__version__",
    "build_base_card", "build_rank_card", "cover", "create_surface", "draw_base_card",
    "draw_rank_card", "leave_card", "load_image", "load_image_safe", "register_font",
    "register_fonts", "render_options", "to_discord_file", "to_png_bytes", "welcome_card",
]
