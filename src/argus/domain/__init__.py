"""Resilience primitives for moderation commands.

``RetryReconciler`` converges an eventually consistent permission store onto a
desired overwrite; ``ConfirmationGate`` waits for one user's reaction before a
destructive action proceeds.
"""

from __future__ import annotations

from .channel_lock import ChannelLockResult, ChannelLockService, LockStatus, UnlockStatus
from .confirmation import (
    ConfirmationGate,
    ConfirmationOutcome,
    ConfirmationRequest,
    GuardedAction,
    confirm_then,
)
from .errors import FatalError, PlatformError, TransientError
from .overwrites import (
    ConvergencePredicate,
    DesiredOverwrite,
    Intent,
    MaterializedOverwrite,
    OverwriteTarget,
    overwrite_matches,
    overwrite_released,
)
from .reconciler import RetryReconciler
from .retry import Backoff, RetryOutcome, retry

__all__ = [
    "Backoff",
    "ChannelLockResult",
    "ChannelLockService",
    "ConfirmationGate",
    "ConfirmationOutcome",
    "ConfirmationRequest",
    "ConvergencePredicate",
    "DesiredOverwrite",
    "FatalError",
    "GuardedAction",
    "Intent",
    "LockStatus",
    "MaterializedOverwrite",
    "OverwriteTarget",
    "PlatformError",
    "RetryOutcome",
    "RetryReconciler",
    "TransientError",
    "UnlockStatus",
    "confirm_then",
    "overwrite_matches",
    "overwrite_released",
    "retry",
]
