# tests/test_output.py
import discord
from PIL import Image

from card_canvas.output import to_discord_file, to_png_bytes


def test_png_bytes_are_rewound():
    buf = to_png_bytes(Image.new("RGBA", (10, 10), (255, 0, 0, 255)))
    assert buf.tell() == 0
    assert buf.read(8) == b"\x89PNG\r\n\x1a\n"


def test_png_round_trips_pixels():
    buf = to_png_bytes(Image.new("RGBA", (3, 3), (1, 2, 3, 255)))
    with Image.open(buf) as img:
        assert img.convert("RGBA").getpixel((1, 1)) == (1, 2, 3, 255)


def test_discord_file():
    file = to_discord_file(Image.new("RGBA", (4, 4)), filename="rank.png")
    assert isinstance(file, discord.File)
    assert file.filename == "rank.png"
