"""
fonts.py — Process-wide font registry and face resolution.

Cards name fonts by family ("Nunito"), weight ("600") and style. Callers
register the font files that back those names once per process:

    register_fonts([
        FontDescriptor("Nunito-Regular.ttf", "Nunito"),
        FontDescriptor("Nunito-SemiBold.ttf", "Nunito", weight="600"),
    ], base_path="assets/fonts")

Registration is idempotent per (family, weight, style, path). When nothing
registered matches a request, a system font is used instead, and as a last
resort Pillow's built-in face.
"""

import functools
import logging
import os
import re
import threading
from dataclasses import dataclass
from typing import Optional

from PIL import ImageFont

from .config import FALLBACK_FONT
from .errors import FontRegistrationError

logger = logging.getLogger(__name__)

_WEIGHT_NAMES = {"normal": 400, "regular": 400, "bold": 700,
                 "lighter": 300, "bolder": 800}

# (family, weight, style, path) keys already registered
_registered_keys: set[tuple[str, str, str, str]] = set()
# (family.lower(), numeric weight, style) -> font file
_faces: dict[tuple[str, int, str], str] = {}
_lock = threading.Lock()
_fallback_warned: set[tuple[str, int, str]] = set()


def normalize_weight(weight) -> int:
    """'bold' -> 700, '600' -> 600, None -> 400."""
    if weight is None:
        return 400
    if isinstance(weight, int):
        return weight
    text = str(weight).strip().lower()
    if text in _WEIGHT_NAMES:
        return _WEIGHT_NAMES[text]
    try:
        return int(text)
    except ValueError:
        return 400


def is_valid_weight(weight) -> bool:
    """Keyword weight or a number from 1 to 1000."""
    if weight is None:
        return True
    if isinstance(weight, bool):
        return False
    if isinstance(weight, int):
        return 1 <= weight <= 1000
    text = str(weight).strip().lower()
    if text in ("normal", "bold", "bolder", "lighter"):
        return True
    return text.isdigit() and 1 <= int(text) <= 1000


def format_size(size: float) -> str:
    """Plain decimal, never exponent notation: 35 -> '35', 12.5 -> '12.5'."""
    text = f"{float(size):f}".rstrip("0").rstrip(".")
    return text or "0"


# ── Font descriptors ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FontSpec:
    """A parsed CSS-like font descriptor: "[style] [weight] <size>px '<family>'"."""
    family: str
    size: float
    weight: str = "normal"
    style: str = "normal"

    def descriptor(self) -> str:
        parts = []
        if self.style != "normal":
            parts.append(self.style)
        if self.weight != "normal":
            parts.append(str(self.weight))
        parts.append(f"{format_size(self.size)}px")
        parts.append(f"'{self.family}'")
        return " ".join(parts)


_FONT_RE = re.compile(
    r"^\s*(?:(italic|oblique|normal)\s+)?"
    r"(?:(normal|bold|bolder|lighter|\d{1,4})\s+)?"
    r"(\d+(?:\.\d+)?)px\s+(.+?)\s*$",
    re.IGNORECASE,
)


def parse_font(descriptor: str) -> FontSpec:
    m = _FONT_RE.match(descriptor)
    if not m:
        raise ValueError(f"Unsupported font descriptor: {descriptor!r}")
    style, weight, size, family = m.groups()
    family = family.strip().strip("'\"")
    return FontSpec(family=family, size=float(size),
                    weight=(weight or "normal").lower(),
                    style=(style or "normal").lower())


def font_descriptor(weight, size: float, family: str) -> str:
    return FontSpec(family=family, size=size, weight=str(weight)).descriptor()


# ── Registration ─────────────────────────────────────────────────────────────

def _load_face(path: str) -> None:
    """Open the file once so a broken font fails at registration, not at render."""
    ImageFont.truetype(path, 12)


def register_font(path, family: str, weight: Optional[str] = None,
                  style: Optional[str] = None) -> bool:
    """
    Register one font file under a family/weight/style.
    Returns False when this exact key was already registered.
    Raises FontRegistrationError if the file cannot be opened as a font.
    """
    path = os.path.abspath(os.fspath(path))
    weight = str(weight or "normal")
    style = (style or "normal").lower()
    key = (family, weight, style, path)

    with _lock:
        if key in _registered_keys:
            return False

    try:
        _load_face(path)
    except OSError as e:
        raise FontRegistrationError(path, family, str(e)) from e

    with _lock:
        if key in _registered_keys:
            return False
        _registered_keys.add(key)
        _faces[(family.lower(), normalize_weight(weight), style)] = path
    logger.info("[fonts] Registered %s (weight %s, %s) from %s", family, weight, style, path)
    return True


@dataclass(frozen=True)
class FontDescriptor:
    path: str                       # relative to the batch base path
    family: str
    weight: Optional[str] = None    # '300', '400', '700', 'bold', ...
    style: Optional[str] = None     # 'normal', 'italic', ...


def register_fonts(fonts: list[FontDescriptor], base_path=None) -> int:
    """
    Best-effort batch registration. A font that fails is logged and skipped.
    Returns how many fonts were newly registered.
    """
    if not fonts:
        raise ValueError("No fonts provided")
    base = os.fspath(base_path) if base_path is not None else os.getcwd()
    added = 0
    for font in fonts:
        font_path = os.path.join(base, font.path)
        try:
            if register_font(font_path, font.family, font.weight, font.style):
                added += 1
        except FontRegistrationError as e:
            logger.error("[fonts] Failed to register font: %s, weight: %s (%s)",
                         font.family, font.weight, e)
    return added


# ── Resolution ───────────────────────────────────────────────────────────────

def find_face(family: str, weight="normal", style: str = "normal") -> Optional[str]:
    """Registered file for a request: exact, nearest weight, then any style."""
    fam = family.lower()
    want = normalize_weight(weight)
    style = (style or "normal").lower()
    with _lock:
        exact = _faces.get((fam, want, style))
        if exact:
            return exact
        same_style = [(w, p) for (f, w, s), p in _faces.items() if f == fam and s == style]
        if same_style:
            return min(same_style, key=lambda wp: (abs(wp[0] - want), wp[0]))[1]
        any_style = [(w, p) for (f, w, _), p in _faces.items() if f == fam]
        if any_style:
            return min(any_style, key=lambda wp: (abs(wp[0] - want), wp[0]))[1]
    return None


@functools.lru_cache(maxsize=4)
def _find_system_font(bold: bool = False) -> Optional[str]:
    """Search common system font locations for a usable sans-serif font."""
    if FALLBACK_FONT and os.path.exists(FALLBACK_FONT):
        return FALLBACK_FONT

    candidates_bold = [
        "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
        "/usr/share/fonts/liberation/LiberationSans-Bold.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/truetype/noto/NotoSans-Bold.ttf",
        "/usr/share/fonts/noto/NotoSans-Bold.ttf",
        "/System/Library/Fonts/Helvetica.ttc",
        "/Library/Fonts/Arial Bold.ttf",
        "C:/Windows/Fonts/arialbd.ttf",
    ]
    candidates_reg = [
        "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
        "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
        "/usr/share/fonts/noto/NotoSans-Regular.ttf",
        "/System/Library/Fonts/Helvetica.ttc",
        "/Library/Fonts/Arial.ttf",
        "C:/Windows/Fonts/arial.ttf",
    ]
    for p in (candidates_bold if bold else candidates_reg):
        if os.path.exists(p):
            return p

    # Last resort: walk common font dirs
    for d in ["/usr/share/fonts", "/usr/local/share/fonts",
              os.path.expanduser("~/.fonts"), "/Library/Fonts",
              "C:/Windows/Fonts"]:
        if os.path.isdir(d):
            for root, _, files in os.walk(d):
                for f in sorted(files):
                    if f.lower().endswith((".ttf", ".otf")):
                        return os.path.join(root, f)
    return None


@functools.lru_cache(maxsize=256)
def _truetype(path: Optional[str], size: int) -> ImageFont.FreeTypeFont:
    if path:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            logger.warning("[fonts] Could not open %s, using the built-in face", path)
    return ImageFont.load_default(size=size)


def get_font(spec: FontSpec) -> ImageFont.FreeTypeFont:
    """Pillow font object for a descriptor, falling back as described above."""
    size = max(1, round(spec.size))
    path = find_face(spec.family, spec.weight, spec.style)
    if path is None:
        weight = normalize_weight(spec.weight)
        key = (spec.family.lower(), weight, spec.style)
        path = _find_system_font(bold=weight >= 600)
        if key not in _fallback_warned:
            _fallback_warned.add(key)
            logger.warning("[fonts] No registered face for %s (weight %s, %s); using %s",
                           spec.family, spec.weight, spec.style, path or "the built-in face")
    return _truetype(path, size)
