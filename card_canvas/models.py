"""
models.py — Card configuration values.

Cards are frozen dataclasses. Every with_*() call returns a new card and
leaves the original untouched, so one configured card can be shared by
concurrent renders:

    card = RankCard(nickname=TextSpec("Ghost"), level=4, rank=12,
                    current_xp=350, required_xp=1000, status=UserStatus.IDLE)
    card = card.with_background_color(RankBackground("#1e1e1e", bubbles="#57F287"))

Nothing is validated here; the engines validate at render time.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .colors import Color


class UserStatus(str, Enum):
    ONLINE = "online"
    IDLE = "idle"
    DND = "dnd"
    OFFLINE = "offline"
    INVISIBLE = "invisible"
    STREAMING = "streaming"


# ── Text styling ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TextFormat:
    """Styling without content. Unset fields fall back to the card defaults."""
    color: Optional[Color] = None
    font: Optional[str] = None
    size: Optional[float] = None
    weight: Optional[str] = None


@dataclass(frozen=True)
class TextSpec:
    content: str
    color: Optional[Color] = None
    font: Optional[str] = None
    size: Optional[float] = None
    weight: Optional[str] = None


@dataclass(frozen=True)
class PrefixSpec(TextFormat):
    """Label in front of a number ("RANK", "LVL"); content may be left out."""
    content: Optional[str] = None


def resolve_field(name: str, *layers, default):
    """
    First non-None `name` attribute across `layers`, else `default`.
    Layers run from most to least specific; a None layer is skipped. Each
    field is resolved on its own, so a layer can override just the colour.
    """
    for layer in layers:
        if layer is None:
            continue
        value = getattr(layer, name, None)
        if value is not None:
            return value
    return default


@dataclass(frozen=True)
class ResolvedStyle:
    color: Color
    font: str
    size: float
    weight: str


def resolve_style(*layers, color: Color, font: str, size: float,
                  weight: str) -> ResolvedStyle:
    return ResolvedStyle(
        color=resolve_field("color", *layers, default=color),
        font=resolve_field("font", *layers, default=font),
        size=resolve_field("size", *layers, default=size),
        weight=resolve_field("weight", *layers, default=weight),
    )


# ── Rank card ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RankBackground:
    """Flat background colour with an optional bubble motif colour."""
    background: Color = "#FFF"
    bubbles: Optional[Color] = "#0CA7FF"


@dataclass(frozen=True)
class RankCard:
    nickname: TextSpec
    level: int
    rank: int
    current_xp: float
    required_xp: float                  # must be > 0
    status: UserStatus

    background_image: Optional[str] = None      # 1000x250 works best
    background_color: RankBackground = RankBackground()
    avatar_image: Optional[str] = None
    avatar_background_color: Color = "#0CA7FF"
    avatar_background_enabled: bool = True
    default_font: str = "Nunito"
    default_text_color: Color = "#0CA7FF"
    progress_bar_color: Color = "#0CA7FF"
    current_xp_color: Color = "#0CA7FF"
    required_xp_color: Color = "#7F8384"
    level_prefix: Optional[PrefixSpec] = None           # default content "LVL"
    rank_prefix: Optional[PrefixSpec] = None            # default content "RANK"
    level_number_format: Optional[TextFormat] = None
    rank_number_format: Optional[TextFormat] = None

    def with_nickname(self, nickname: TextSpec) -> "RankCard":
        return replace(self, nickname=nickname)

    def with_level(self, level: int) -> "RankCard":
        return replace(self, level=level)

    def with_rank(self, rank: int) -> "RankCard":
        return replace(self, rank=rank)

    def with_current_xp(self, current_xp: float) -> "RankCard":
        return replace(self, current_xp=current_xp)

    def with_required_xp(self, required_xp: float) -> "RankCard":
        return replace(self, required_xp=required_xp)

    def with_status(self, status: UserStatus) -> "RankCard":
        return replace(self, status=status)

    def with_background_image(self, url: Optional[str]) -> "RankCard":
        return replace(self, background_image=url)

    def with_background_color(self, background: RankBackground) -> "RankCard":
        return replace(self, background_color=background)

    def with_avatar_image(self, url: Optional[str]) -> "RankCard":
        return replace(self, avatar_image=url)

    def with_avatar_background_color(self, color: Color) -> "RankCard":
        return replace(self, avatar_background_color=color)

    def with_avatar_background_enabled(self, enabled: bool) -> "RankCard":
        return replace(self, avatar_background_enabled=enabled)

    def with_default_font(self, font: str) -> "RankCard":
        return replace(self, default_font=font)

    def with_default_text_color(self, color: Color) -> "RankCard":
        return replace(self, default_text_color=color)

    def with_level_prefix(self, prefix: Optional[PrefixSpec]) -> "RankCard":
        return replace(self, level_prefix=prefix)

    def with_rank_prefix(self, prefix: Optional[PrefixSpec]) -> "RankCard":
        return replace(self, rank_prefix=prefix)

    def with_level_number_format(self, fmt: Optional[TextFormat]) -> "RankCard":
        return replace(self, level_number_format=fmt)

    def with_rank_number_format(self, fmt: Optional[TextFormat]) -> "RankCard":
        return replace(self, rank_number_format=fmt)


# ── Base / welcome / leave cards ─────────────────────────────────────────────

@dataclass(frozen=True)
class BaseCard:
    main_text: Optional[TextSpec] = None
    nickname: Optional[TextSpec] = None
    second_text: Optional[TextSpec] = None
    background_color: Color = "#bbe8ff"
    background_image: Optional[str] = None
    avatar_image: Optional[str] = None
    avatar_border_color: Color = "#0CA7FF"
    default_font: str = "Nunito"
    default_text_color: Color = "#0CA7FF"

    def with_main_text(self, text: Optional[TextSpec]) -> "BaseCard":
        return replace(self, main_text=text)

    def with_nickname(self, text: Optional[TextSpec]) -> "BaseCard":
        return replace(self, nickname=text)

    def with_second_text(self, text: Optional[TextSpec]) -> "BaseCard":
        return replace(self, second_text=text)

    def with_background_color(self, color: Color) -> "BaseCard":
        return replace(self, background_color=color)

    def with_background_image(self, url: Optional[str]) -> "BaseCard":
        return replace(self, background_image=url)

    def with_avatar_image(self, url: Optional[str]) -> "BaseCard":
        return replace(self, avatar_image=url)

    def with_avatar_border_color(self, color: Color) -> "BaseCard":
        return replace(self, avatar_border_color=color)

    def with_default_font(self, font: str) -> "BaseCard":
        return replace(self, default_font=font)

    def with_default_text_color(self, color: Color) -> "BaseCard":
        return replace(self, default_text_color=color)

    @classmethod
    def from_preset(cls, preset: "CardPreset", nickname: TextSpec,
                    avatar_image: Optional[str], **overrides) -> "BaseCard":
        """
        Welcome/leave style card: the preset supplies the main text, border
        colour, text colour and background; any keyword overrides them.
        """
        fields = dict(
            main_text=TextSpec(preset.main_text),
            nickname=nickname,
            avatar_image=avatar_image,
            avatar_border_color=preset.border_color,
            default_text_color=preset.text_color,
            background_color=preset.background_color,
        )
        fields.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**fields)


@dataclass(frozen=True)
class CardPreset:
    main_text: str
    border_color: Color
    text_color: Color
    background_color: Color = "#FFFFFF"


WELCOME_PRESET = CardPreset(main_text="WELCOME", border_color="#0CA7FF", text_color="#0CA7FF")
LEAVE_PRESET = CardPreset(main_text="LEAVE", border_color="#F44336", text_color="#F44336")


def welcome_card(nickname: TextSpec, avatar_image: Optional[str], **overrides) -> BaseCard:
    return BaseCard.from_preset(WELCOME_PRESET, nickname, avatar_image, **overrides)


def leave_card(nickname: TextSpec, avatar_image: Optional[str], **overrides) -> BaseCard:
    return BaseCard.from_preset(LEAVE_PRESET, nickname, avatar_image, **overrides)
