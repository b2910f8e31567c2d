from __future__ import annotations


class SurfaceUnavailableError(RuntimeError):
    """Raised when no drawing surface can be constructed for a render call."""
