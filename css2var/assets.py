"""Image asset encoding for inline data URLs."""

from __future__ import annotations

import base64
from pathlib import Path

from .classifier import IMAGE_EXTENSIONS


class AssetEncodingError(RuntimeError):
    """Raised when an image cannot be turned into a data URL."""


class ImageCodec:
    """Encodes image files as base64 text."""

    def encode(self, path: Path) -> str:
        extension = path.suffix.lower().lstrip(".")
        if extension not in IMAGE_EXTENSIONS:
            raise AssetEncodingError(f"Unsupported image type: {path.name}")
        data = path.read_bytes()
        return base64.b64encode(data).decode("ascii")


def build_data_url(path: Path, encoded: str) -> str:
    """Return the ``url(data:...)`` literal for an encoded image."""
    extension = path.suffix.lower().lstrip(".")
    return f"url(data:image/{extension};base64,{encoded})"


__all__ = ["AssetEncodingError", "ImageCodec", "build_data_url"]
