"""Port for per-channel moderation records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from argus.domain.overwrites import DesiredOverwrite


@dataclass
class ChannelConfig:
    """Per-channel record.

    ``lock`` holds overwrite work that has not been confirmed done yet. It is
    cleared only after the reconciler reports convergence for that exact
    overwrite.
    """

    channel_id: str
    lock: DesiredOverwrite = field(default_factory=DesiredOverwrite)

    @property
    def is_locked(self) -> bool:
        return len(self.lock) > 0


@runtime_checkable
class ChannelConfigStore(Protocol):
    def get(self, channel_id: str) -> ChannelConfig:
        """Return the stored record, or a fresh empty one."""
        ...

    def save(self, config: ChannelConfig) -> None: ...


__all__ = ["ChannelConfig", "ChannelConfigStore"]
