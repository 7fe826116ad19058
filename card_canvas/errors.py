"""
errors.py — Exceptions raised by card_canvas.

Everything raised on purpose derives from CardError, so callers that only
want to know "the card could not be rendered" can catch one type.
"""

from typing import Optional


class CardError(Exception):
    """Base class for all card rendering failures."""


class ImageLoadError(CardError):
    """An image could not be fetched or decoded. Fatal to the render."""

    def __init__(self, source, reason: str = "", role: str = "image"):
        self.source = source
        self.reason = reason
        self.role = role
        msg = f"Error loading the {role} from {source!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)

    def as_role(self, role: str) -> "ImageLoadError":
        """Same failure, renamed for the pass that hit it."""
        return ImageLoadError(self.source, self.reason, role=role)


class InvalidImage(CardError, ValueError):
    """Zero-sized image or degenerate destination box during fit computation."""


class FontRegistrationError(CardError):
    """A font file could not be registered. Logged and skipped in batch loads."""

    def __init__(self, path: str, family: str, reason: Optional[str] = None):
        self.path = path
        self.family = family
        super().__init__(f"Failed to register font {family!r} from {path}"
                         + (f": {reason}" if reason else ""))


class InvalidCardError(CardError, ValueError):
    """Card model or render options rejected at render time."""
