"""imaging.errors

Failures of the image service. None of them touch the simulation state.
"""

from __future__ import annotations


class ImagingError(RuntimeError):
    """Base class; the UI catches this and shows a status message."""


class ServiceUnavailable(ImagingError):
    """No API key, SDK missing, or every model/key attempt failed."""


class NoImageReturned(ImagingError):
    """The service answered but the response held no inline image."""
