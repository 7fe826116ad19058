# tests/conftest.py
# Shared fixtures: a recording drawing context with predictable text widths,
# sample image files, and an isolated font registry.
import io
import os
import sys
from dataclasses import dataclass
from typing import Optional

import pytest
from PIL import Image

# Determine repository root (one directory up from tests/)
_THIS_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(_THIS_DIR, ".."))

if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from card_canvas import fonts  # noqa: E402


@dataclass
class TextCall:
    text: str
    x: float
    y: float
    max_width: Optional[float]
    color: object
    font: str
    align: str


class RecordingContext:
    """
    Stands in for DrawContext. Records every paint call and measures text as
    `char_width` pixels per character, so layout arithmetic is exact.
    """

    def __init__(self, width=1000, height=250, char_width=10):
        self.width = width
        self.height = height
        self.char_width = char_width
        self.fill_style = "#000000"
        self.global_alpha = 1.0
        self.text_align = "left"
        self.font = "10px 'sans-serif'"
        self.calls = []
        self._stack = []

    def save(self):
        self._stack.append((self.fill_style, self.global_alpha, self.text_align, self.font))
        self.calls.append(("save",))

    def restore(self):
        if self._stack:
            self.fill_style, self.global_alpha, self.text_align, self.font = self._stack.pop()
        self.calls.append(("restore",))

    def clip(self, shape):
        self.calls.append(("clip", shape))

    def fill(self, shape):
        self.calls.append(("fill", shape, self.fill_style, self.global_alpha))

    def fill_rect(self, x, y, w, h):
        self.calls.append(("fill_rect", (x, y, w, h), self.fill_style))

    def draw_image(self, img, dx, dy, dw, dh, source=None):
        self.calls.append(("draw_image", img, (dx, dy, dw, dh), source))

    def measure_text(self, text):
        return len(text) * self.char_width

    def fill_text(self, text, x, y, max_width=None):
        self.calls.append(("fill_text", TextCall(text, x, y, max_width, self.fill_style,
                                                 self.font, self.text_align)))

    # ── helpers for assertions ──

    def of(self, kind):
        return [c for c in self.calls if c[0] == kind]

    @property
    def texts(self) -> list[TextCall]:
        return [c[1] for c in self.of("fill_text")]


@pytest.fixture
def recording_ctx():
    return RecordingContext()


@pytest.fixture
def make_png(tmp_path):
    """Write a solid or striped PNG and return its path."""

    def _make(name="img.png", size=(4, 4), color=(255, 0, 0)):
        path = tmp_path / name
        Image.new("RGB", size, color).save(path, format="PNG")
        return str(path)

    return _make


@pytest.fixture
def png_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (6, 3), (0, 0, 255)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def clean_fonts(monkeypatch):
    """Empty font registry for the duration of a test."""
    monkeypatch.setattr(fonts, "_registered_keys", set())
    monkeypatch.setattr(fonts, "_faces", {})
    monkeypatch.setattr(fonts, "_fallback_warned", set())
    return fonts
