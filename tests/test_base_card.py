# tests/test_base_card.py
import pytest

from card_canvas import images
from card_canvas.base_card import (
    AVATAR_CLIP, AVATAR_RING, build_base_card, draw_base_card, field_text, truncate,
)
from card_canvas.errors import ImageLoadError, InvalidCardError
from card_canvas.images import ImageCache
from card_canvas.models import BaseCard, TextSpec, leave_card, welcome_card


@pytest.fixture
def base_ctx(recording_ctx):
    recording_ctx.width, recording_ctx.height = 800, 350
    return recording_ctx


async def draw(ctx, card):
    await draw_base_card(ctx, card, ctx.width, ctx.height, image_cache=ImageCache())


# ----------------------------
# Text fitting
# ----------------------------
def test_truncate():
    assert truncate("short", 10) == "short"
    assert truncate("x" * 10, 10) == "x" * 10
    assert truncate("x" * 11, 10) == "x" * 7 + "..."


def test_main_text_is_upper_cased_and_cut_at_40():
    text = field_text(TextSpec("welcome to the server " * 3), "main")
    assert len(text) == 40
    assert text.endswith("...")
    assert text == text.upper()


def test_nickname_keeps_case_and_is_cut_at_60():
    assert field_text(TextSpec("Ghost"), "nickname") == "Ghost"
    assert len(field_text(TextSpec("g" * 100), "nickname")) == 60
    assert len(field_text(TextSpec("s" * 100), "second")) == 65


# ----------------------------
# Layout
# ----------------------------
@pytest.mark.asyncio
async def test_welcome_card_layout(base_ctx):
    card = welcome_card(TextSpec("Ghost"), None, second_text=TextSpec("Member #42"))
    await draw(base_ctx, card)

    texts = [(t.text, t.x, t.y, t.max_width, t.align) for t in base_ctx.texts]
    assert texts == [
        ("WELCOME", 400, 225, 800, "center"),
        ("Ghost", 400, 265, 800, "center"),
        ("Member #42", 400, 310, 800, "center"),
    ]
    assert [t.font for t in base_ctx.texts] == [
        "48px 'Nunito'", "35px 'Nunito'", "33px 'Nunito'",
    ]
    assert all(t.color == "#0CA7FF" for t in base_ctx.texts)


@pytest.mark.asyncio
async def test_text_size_is_fixed_but_colour_and_weight_follow_the_text(base_ctx):
    card = BaseCard(nickname=TextSpec("Ghost", color="#123456", size=99, weight="bold"))
    await draw(base_ctx, card)
    (nick,) = base_ctx.texts
    assert nick.color == "#123456"
    assert nick.font == "bold 35px 'Nunito'"


@pytest.mark.asyncio
async def test_draw_order_and_placeholder(base_ctx):
    card = leave_card(TextSpec("Ghost"), None)
    await draw(base_ctx, card)

    assert base_ctx.calls[0] == ("fill_rect", (0, 0, 800, 350), "#FFFFFF")
    fills = base_ctx.of("fill")
    assert (fills[0][1], fills[0][2]) == (AVATAR_RING, "#F44336")
    assert (fills[1][1], fills[1][2]) == (AVATAR_CLIP, "#7F8384")
    (_, clip), = base_ctx.of("clip")
    assert clip == AVATAR_CLIP


@pytest.mark.asyncio
async def test_avatar_is_drawn_into_the_ring(base_ctx, make_png):
    card = welcome_card(TextSpec("Ghost"), make_png(color=(0, 255, 0)))
    await draw(base_ctx, card)
    (_, img, dest, _), = base_ctx.of("draw_image")
    assert dest == (325, 25, 150, 150)
    assert img.getpixel((0, 0)) == (0, 255, 0, 255)
    assert len(base_ctx.of("fill")) == 1


@pytest.mark.asyncio
async def test_background_failure_names_the_background(base_ctx, tmp_path):
    card = BaseCard(background_image=str(tmp_path / "missing.png"))
    with pytest.raises(ImageLoadError) as exc:
        await draw(base_ctx, card)
    assert exc.value.role == "background image"
    assert base_ctx.calls == []


@pytest.mark.asyncio
async def test_avatar_failure_names_the_avatar(base_ctx, monkeypatch):
    async def fake_fetch(url, session=None):
        raise ImageLoadError(url, "HTTP 404")

    monkeypatch.setattr(images, "_fetch_bytes", fake_fetch)
    card = welcome_card(TextSpec("Ghost"), "https://cdn.example.com/gone.png")
    with pytest.raises(ImageLoadError) as exc:
        await draw(base_ctx, card)
    assert exc.value.role == "avatar image"
    assert exc.value.reason == "HTTP 404"


# ----------------------------
# Real rendering
# ----------------------------
@pytest.mark.asyncio
async def test_build_base_card_pixels(make_png):
    card = BaseCard(nickname=TextSpec("Ghost"), avatar_image=make_png(color=(0, 255, 0)))
    img = await build_base_card(card, image_cache=ImageCache())

    assert img.size == (800, 350)
    assert img.getpixel((10, 10)) == (187, 232, 255, 255)    # #bbe8ff
    assert img.getpixel((400, 100)) == (0, 255, 0, 255)      # avatar
    assert img.getpixel((400, 22)) == (12, 167, 255, 255)    # ring


@pytest.mark.asyncio
async def test_numeric_weight_is_used(base_ctx):
    await draw(base_ctx, BaseCard(nickname=TextSpec("Ghost", weight="550")))
    (nick,) = base_ctx.texts
    assert nick.font == "550 35px 'Nunito'"


@pytest.mark.asyncio
async def test_unusable_weight_is_rejected(base_ctx):
    with pytest.raises(InvalidCardError):
        await draw(base_ctx, BaseCard(main_text=TextSpec("HI", weight="heavy")))
    assert base_ctx.calls == []
