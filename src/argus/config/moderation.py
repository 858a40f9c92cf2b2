"""Tuning for lock/unlock and confirmation prompts."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int, env_list, env_str
from .errors import ConfigurationError

DEFAULT_RECONCILE_MAX_ATTEMPTS = 3
DEFAULT_RECONCILE_BACKOFF_SECONDS = 0.5
DEFAULT_CONFIRMATION_TIMEOUT_SECONDS = 15.0
DEFAULT_EMOJI_YES = "\N{WHITE HEAVY CHECK MARK}"
DEFAULT_EMOJI_NO = "\N{CROSS MARK}"
DEFAULT_LOCK_PERMISSIONS = ("SEND_MESSAGES", "ADD_REACTIONS")


@dataclass(frozen=True, slots=True)
class ModerationConfig:
    reconcile_max_attempts: int = DEFAULT_RECONCILE_MAX_ATTEMPTS
    reconcile_backoff_seconds: float = DEFAULT_RECONCILE_BACKOFF_SECONDS
    confirmation_timeout_seconds: float = DEFAULT_CONFIRMATION_TIMEOUT_SECONDS
    emoji_yes: str = DEFAULT_EMOJI_YES
    emoji_no: str = DEFAULT_EMOJI_NO
    lock_permissions: tuple[str, ...] = DEFAULT_LOCK_PERMISSIONS

    def __post_init__(self) -> None:
        if self.reconcile_max_attempts < 1:
            raise ConfigurationError("Reconcile attempts must be at least 1")
        if self.reconcile_backoff_seconds < 0:
            raise ConfigurationError("Reconcile backoff must be non-negative")
        if self.confirmation_timeout_seconds <= 0:
            raise ConfigurationError("Confirmation timeout must be positive")
        if self.emoji_yes == self.emoji_no:
            raise ConfigurationError("Confirmation emoji must differ")
        if not self.lock_permissions:
            raise ConfigurationError("At least one lock permission is required")


def get_moderation_config() -> ModerationConfig:
    return ModerationConfig(
        reconcile_max_attempts=env_int(
            "ARGUS_RECONCILE_MAX_ATTEMPTS", DEFAULT_RECONCILE_MAX_ATTEMPTS
        ),
        reconcile_backoff_seconds=env_float(
            "ARGUS_RECONCILE_BACKOFF_SECONDS", DEFAULT_RECONCILE_BACKOFF_SECONDS
        ),
        confirmation_timeout_seconds=env_float(
            "ARGUS_CONFIRMATION_TIMEOUT_SECONDS", DEFAULT_CONFIRMATION_TIMEOUT_SECONDS
        ),
        emoji_yes=env_str("ARGUS_EMOJI_YES", DEFAULT_EMOJI_YES),
        emoji_no=env_str("ARGUS_EMOJI_NO", DEFAULT_EMOJI_NO),
        lock_permissions=tuple(
            name.upper() for name in env_list("ARGUS_LOCK_PERMISSIONS", DEFAULT_LOCK_PERMISSIONS)
        ),
    )
