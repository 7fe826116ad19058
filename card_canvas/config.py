"""
config.py — Runtime settings, read once from the environment.
"""

import os

__version__ = "0.1.0"

# Seconds allowed for one image fetch + decode
IMAGE_TIMEOUT = float(os.environ.get("CARD_CANVAS_IMAGE_TIMEOUT", "15"))

# Max decoded images held by the default cache
IMAGE_CACHE_SIZE = int(os.environ.get("CARD_CANVAS_IMAGE_CACHE_SIZE", "128"))

# Shape masks are drawn this many times larger, then box-filtered down
SUPERSAMPLE = max(1, int(os.environ.get("CARD_CANVAS_SUPERSAMPLE", "4")))

# Font file used when nothing registered matches; None = search system dirs
FALLBACK_FONT = os.environ.get("CARD_CANVAS_FALLBACK_FONT") or None

USER_AGENT = os.environ.get("CARD_CANVAS_USER_AGENT", f"card-canvas/{__version__}")
