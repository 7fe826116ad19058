# tests/test_models.py
import dataclasses
import itertools

import pytest

from card_canvas.models import (
    LEAVE_PRESET, WELCOME_PRESET, BaseCard, PrefixSpec, RankBackground, RankCard,
    TextFormat, TextSpec, UserStatus, leave_card, resolve_field, resolve_style, welcome_card,
)


def make_card(**kwargs):
    fields = dict(nickname=TextSpec("Ghost"), level=4, rank=12,
                  current_xp=350, required_xp=1000, status=UserStatus.IDLE)
    fields.update(kwargs)
    return RankCard(**fields)


# ----------------------------
# Immutability
# ----------------------------
def test_with_methods_return_new_card():
    card = make_card()
    updated = card.with_level(5).with_status(UserStatus.DND)

    assert updated is not card
    assert (updated.level, updated.status) == (5, UserStatus.DND)
    assert (card.level, card.status) == (4, UserStatus.IDLE)


def test_cards_cannot_be_mutated():
    card = make_card()
    with pytest.raises(dataclasses.FrozenInstanceError):
        card.level = 99


def test_every_rank_field_has_a_setter():
    card = make_card()
    background = RankBackground("#000", bubbles=None)
    prefix = PrefixSpec(content="LEVEL")
    fmt = TextFormat(size=50)

    updated = (card
               .with_nickname(TextSpec("Other"))
               .with_rank(1)
               .with_current_xp(10)
               .with_required_xp(20)
               .with_background_image("bg.png")
               .with_background_color(background)
               .with_avatar_image("a.png")
               .with_avatar_background_color("#000")
               .with_avatar_background_enabled(False)
               .with_default_font("Roboto")
               .with_default_text_color("#111")
               .with_level_prefix(prefix)
               .with_rank_prefix(prefix)
               .with_level_number_format(fmt)
               .with_rank_number_format(fmt))

    assert updated.nickname.content == "Other"
    assert (updated.rank, updated.current_xp, updated.required_xp) == (1, 10, 20)
    assert updated.background_image == "bg.png"
    assert updated.background_color is background
    assert updated.avatar_image == "a.png"
    assert updated.avatar_background_enabled is False
    assert updated.default_font == "Roboto"
    assert updated.level_prefix is prefix and updated.rank_prefix is prefix
    assert updated.level_number_format is fmt and updated.rank_number_format is fmt
    assert card == make_card()


def test_rank_card_defaults():
    card = make_card()
    assert card.background_color == RankBackground("#FFF", "#0CA7FF")
    assert card.avatar_background_enabled is True
    assert card.default_font == "Nunito"
    assert card.required_xp_color == "#7F8384"
    assert card.level_prefix is None and card.rank_number_format is None


# ----------------------------
# Field resolution
# ----------------------------
@pytest.mark.parametrize("specific,shared,default_value",
                         list(itertools.product([None, "#111"], [None, "#222"], ["#333"])))
def test_resolve_field_takes_most_specific(specific, shared, default_value):
    layers = (TextFormat(color=specific), TextFormat(color=shared))
    expected = specific or shared or default_value
    assert resolve_field("color", *layers, default=default_value) == expected


@pytest.mark.parametrize("first,second,third", itertools.product([None, 1], [None, 2], [None, 3]))
def test_resolve_field_all_layer_combinations(first, second, third):
    layers = [None if v is None else TextFormat(size=v) for v in (first, second, third)]
    expected = next((v for v in (first, second, third) if v is not None), 99)
    assert resolve_field("size", *layers, default=99) == expected


def test_resolve_style_resolves_each_field_independently():
    style = resolve_style(
        PrefixSpec(content="RANK", color="#f00"),
        TextFormat(size=20, color="#0f0"),
        color="#00f", font="Nunito", size=35, weight="600",
    )
    assert (style.color, style.font, style.size, style.weight) == ("#f00", "Nunito", 20, "600")


# ----------------------------
# Presets
# ----------------------------
def test_welcome_preset():
    card = welcome_card(TextSpec("Ghost"), "avatar.png")
    assert card.main_text == TextSpec("WELCOME")
    assert card.avatar_border_color == WELCOME_PRESET.border_color == "#0CA7FF"
    assert card.default_text_color == "#0CA7FF"
    assert card.background_color == "#FFFFFF"
    assert card.avatar_image == "avatar.png"


def test_leave_preset():
    card = leave_card(TextSpec("Ghost"), None)
    assert card.main_text.content == "LEAVE"
    assert card.avatar_border_color == LEAVE_PRESET.border_color == "#F44336"
    assert card.default_text_color == "#F44336"


def test_preset_overrides_and_ignored_nones():
    card = welcome_card(TextSpec("Ghost"), None,
                        background_color="#000000", second_text=TextSpec("Member #42"),
                        avatar_border_color=None)
    assert card.background_color == "#000000"
    assert card.second_text.content == "Member #42"
    assert card.avatar_border_color == "#0CA7FF"


def test_base_card_defaults():
    card = BaseCard()
    assert card.background_color == "#bbe8ff"
    assert card.avatar_border_color == "#0CA7FF"
    assert card.main_text is None
    assert card.with_main_text(TextSpec("HI")).main_text.content == "HI"
    assert card.main_text is None
