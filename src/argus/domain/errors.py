"""Failures reported by external collaborators."""

from __future__ import annotations


class PlatformError(RuntimeError):
    """Raised when an external collaborator (permission store, messaging) fails."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class TransientError(PlatformError):
    """Failure worth retrying; consumes one unit of an attempt budget."""


class FatalError(PlatformError):
    """The target is no longer addressable; retrying cannot help."""


__all__ = ["FatalError", "PlatformError", "TransientError"]
