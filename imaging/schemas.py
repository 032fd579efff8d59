"""imaging.schemas

Contract for images passed between the UI and the image service.

An ImageHandle is the opaque "image" of the generate/edit contract: a mime type
plus base64 payload. Handles coming back from the service are validated before use.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

ALLOWED_MIME_TYPES = {"image/png", "image/jpeg", "image/jpg", "image/webp"}


@dataclass(frozen=True)
class ImageHandle:
    mime_type: str
    data: str  # base64, no data: prefix

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)

    @staticmethod
    def from_bytes(raw: bytes, mime_type: str = "image/png") -> "ImageHandle":
        return ImageHandle(mime_type=normalize_mime(mime_type), data=base64.b64encode(raw).decode("ascii"))


def normalize_mime(mime: str, default: str = "image/png") -> str:
    m = str(mime or "").strip().lower()
    if m == "image/jpg":
        return "image/jpeg"
    if m in ALLOWED_MIME_TYPES:
        return m
    return default


def validate_image(image: ImageHandle) -> None:
    if not image.data:
        raise ValueError("image has no data")
    try:
        base64.b64decode(image.data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"image data is not base64: {e}") from e
