"""MIME type detection helpers."""

from __future__ import annotations

import mimetypes
from typing import Callable

from .models import DEFAULT_MIME_TYPE

MimeLookup = Callable[[str], str]


class TypeDetector:
    """Guess MIME types from file names using the built-in `mimetypes` table.

    The table is private to the detector, so results do not depend on the
    host's ``mime.types`` files.
    """

    def __init__(self, fallback: str = DEFAULT_MIME_TYPE) -> None:
        self._types = mimetypes.MimeTypes()
        self._fallback = fallback

    def lookup(self, name: str) -> str:
        """Return the MIME type for ``name``, or the fallback when unknown."""
        guessed, _ = self._types.guess_type(name, strict=False)
        return guessed or self._fallback

    def __call__(self, name: str) -> str:
        return self.lookup(name)


__all__ = ["MimeLookup", "TypeDetector"]
