"""
images.py — Fetching and decoding the images cards are composed from.

A source may be an http(s) URL, a data: URI, a local file path, or an image
that is already decoded. Decoded images are memoised in an ImageCache: a
bounded LRU keyed by source, holding the decode task itself so concurrent
renders that ask for the same not-yet-loaded URL share one fetch.
"""

import asyncio
import base64
import binascii
import io
import logging
import os
from collections import OrderedDict
from typing import Awaitable, Callable, Optional, Union
from urllib.parse import unquote_to_bytes, urlparse

import aiohttp
from PIL import Image, UnidentifiedImageError

from .config import IMAGE_CACHE_SIZE, IMAGE_TIMEOUT, USER_AGENT
from .errors import ImageLoadError

logger = logging.getLogger(__name__)

ImageSource = Union[str, os.PathLike, Image.Image]


# ── Decoded-image cache ──────────────────────────────────────────────────────

class ImageCache:
    """
    LRU of decode tasks. A task is stored as soon as it starts, so a second
    requester awaits the first one's fetch. Failed loads are dropped so the
    next render can try again.
    """

    def __init__(self, max_entries: int = IMAGE_CACHE_SIZE):
        self.max_entries = max_entries
        self._entries: OrderedDict[str, asyncio.Future] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def clear(self):
        self._entries.clear()

    async def get(self, key: str,
                  factory: Callable[[], Awaitable[Image.Image]]) -> Image.Image:
        fut = self._entries.get(key)
        if fut is not None and _is_stale(fut):
            del self._entries[key]
            fut = None
        if fut is None:
            fut = asyncio.ensure_future(factory())
            self._entries[key] = fut
            self._evict()
        else:
            self._entries.move_to_end(key)

        try:
            # shield: one cancelled waiter must not cancel the shared decode
            return await asyncio.shield(fut)
        except asyncio.CancelledError:
            if fut.cancelled():
                self._discard(key, fut)
            raise
        except Exception:
            self._discard(key, fut)
            raise

    def _discard(self, key: str, fut: asyncio.Future):
        if self._entries.get(key) is fut:
            del self._entries[key]

    def _evict(self):
        while len(self._entries) > max(self.max_entries, 0):
            self._entries.popitem(last=False)


def _is_stale(fut: asyncio.Future) -> bool:
    """A task that can never yield an image: cancelled, failed, or bound to another loop."""
    if fut.done():
        return fut.cancelled() or fut.exception() is not None
    return fut.get_loop() is not asyncio.get_running_loop()


DEFAULT_IMAGE_CACHE = ImageCache()


# ── Sources ──────────────────────────────────────────────────────────────────

def is_url(source: str) -> bool:
    parsed = urlparse(source)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


async def _fetch_bytes(url: str, session: Optional[aiohttp.ClientSession] = None) -> bytes:
    if session is None:
        async with aiohttp.ClientSession(headers={"User-Agent": USER_AGENT}) as own:
            return await _fetch_bytes(url, own)
    async with session.get(url, allow_redirects=True) as resp:
        if resp.status != 200:
            raise ImageLoadError(url, f"HTTP {resp.status}")
        return await resp.read()


def _decode_data_uri(uri: str) -> bytes:
    header, sep, payload = uri.partition(",")
    if not sep:
        raise ImageLoadError(uri[:64], "malformed data URI")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageLoadError(uri[:64], "invalid base64 payload") from e
    return unquote_to_bytes(payload)


async def _read_source(source: str, session) -> bytes:
    if is_url(source):
        return await _fetch_bytes(source, session)
    if source.startswith("data:"):
        return _decode_data_uri(source)
    if os.path.isfile(source):
        return await asyncio.to_thread(_read_file, source)
    raise ImageLoadError(source, "not a URL, data URI or existing file")


def _read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def _decode(source: str, raw: bytes) -> Image.Image:
    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.load()
            decoded = img.convert("RGBA")
    except (UnidentifiedImageError, OSError) as e:
        raise ImageLoadError(source, "undecodable image payload") from e
    if decoded.width == 0 or decoded.height == 0:
        raise ImageLoadError(source, "image has no pixels")
    return decoded


async def _load_uncached(source: str, timeout: Optional[float], session) -> Image.Image:
    try:
        raw = await asyncio.wait_for(_read_source(source, session), timeout)
    except asyncio.TimeoutError as e:
        raise ImageLoadError(source, f"timed out after {timeout}s") from e
    except aiohttp.ClientError as e:
        raise ImageLoadError(source, str(e) or e.__class__.__name__) from e
    except OSError as e:
        raise ImageLoadError(source, str(e)) from e
    return _decode(source, raw)


# ── Public API ───────────────────────────────────────────────────────────────

async def load_image(source: ImageSource, *, cache: Optional[ImageCache] = None,
                     timeout: Optional[float] = IMAGE_TIMEOUT,
                     session: Optional[aiohttp.ClientSession] = None) -> Image.Image:
    """
    Fetch and decode an image (RGBA). Raises ImageLoadError on an invalid
    source, a non-200 response, a network error, a timeout or a payload
    Pillow cannot decode.
    """
    if isinstance(source, Image.Image):
        return source
    if not isinstance(source, (str, os.PathLike)):
        raise ImageLoadError(source, "unsupported source type")

    key = os.fspath(source)
    if cache is None:
        cache = DEFAULT_IMAGE_CACHE
    return await cache.get(key, lambda: _load_uncached(key, timeout, session))


async def load_image_safe(source: ImageSource, **kwargs) -> Optional[Image.Image]:
    """Like load_image, but logs the failure and returns None."""
    try:
        return await load_image(source, **kwargs)
    except ImageLoadError as e:
        logger.error("[images] Failed to load image from %s: %s", e.source, e.reason)
        return None
