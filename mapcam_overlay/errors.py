from __future__ import annotations


class CompositionError(Exception):
    """Base class for every failure that aborts a composition."""


class DecodeFailure(CompositionError):
    """An input image could not be decoded; composition never started."""


class DegenerateGeometry(CompositionError):
    """Canvas or computed panel geometry has a non-positive extent."""


class SurfaceFailure(CompositionError):
    """Drawing, text measurement or encoding failed mid-composition."""
