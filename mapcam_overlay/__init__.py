from .compositor import Composition, compose, compose_bytes
from .content import OverlayContent
from .errors import CompositionError, DecodeFailure, DegenerateGeometry, SurfaceFailure

__all__ = [
    "Composition",
    "CompositionError",
    "DecodeFailure",
    "DegenerateGeometry",
    "OverlayContent",
    "SurfaceFailure",
    "compose",
    "compose_bytes",
]
