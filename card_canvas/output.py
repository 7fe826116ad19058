"""
output.py — Handing a rendered card to whoever sends it.
"""

import io

import discord
from PIL import Image


def to_png_bytes(image: Image.Image) -> io.BytesIO:
    """Encode as PNG into a rewound BytesIO."""
    buf = io.BytesIO()
    image.save(buf, format="PNG", optimize=True)
    buf.seek(0)
    return buf


def to_discord_file(image: Image.Image, filename: str = "card.png") -> discord.File:
    """Attachment ready for channel.send(file=...)."""
    return discord.File(to_png_bytes(image), filename=filename)
