"""imaging.providers.base

Provider interfaces.

A provider's job is to turn channel levels into a brain image, or change an
existing image following a text instruction. Both calls may raise ImagingError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from core.state import Substance

from ..schemas import ImageHandle


@dataclass(frozen=True)
class ProviderStatus:
    ok: bool
    backend: str
    model: str
    note: str = ""
    error: str = ""


class ImageProvider(Protocol):
    def status(self) -> ProviderStatus: ...

    def generate(self, dopamine: float, serotonin: float, substance: Substance) -> ImageHandle:
        """Fresh scan for the given levels."""
        ...

    def edit(self, image: ImageHandle, instruction: str) -> ImageHandle:
        """Modified copy of `image`."""
        ...
