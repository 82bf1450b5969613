from __future__ import annotations


class MarkerError(Exception):
    """Base class for failures reported by the drawing surface."""


class NoImageLoaded(MarkerError):
    pass


class EmptyHistory(MarkerError):
    pass


class DecodeFailure(MarkerError):
    pass


class RasterAllocationFailure(MarkerError):
    pass
