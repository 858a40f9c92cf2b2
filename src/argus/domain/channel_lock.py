"""Lock and unlock channels for everyone, recording how to undo the lock."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from .overwrites import (
    DesiredOverwrite,
    Intent,
    OverwriteTarget,
    overwrite_matches,
    overwrite_released,
)
from .reconciler import RetryReconciler

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .overwrites import ConvergencePredicate
    from .ports.config_store import ChannelConfigStore
    from .ports.messaging import Messaging
    from .ports.permissions import PermissionStore
    from .retry import Backoff, RetryOutcome, Sleep

log = getLogger(__name__)

DEFAULT_LOCK_CAPABILITIES: tuple[str, ...] = ("SEND_MESSAGES", "ADD_REACTIONS")
DEFAULT_RECONCILE_ATTEMPTS = 3


class LockStatus(StrEnum):
    LOCKED = "locked"
    ALREADY_LOCKED = "already_locked"
    NOT_CONVERGED = "not_converged"


class UnlockStatus(StrEnum):
    UNLOCKED = "unlocked"
    NOT_LOCKED = "not_locked"
    NOT_CONVERGED = "not_converged"


@dataclass(frozen=True, slots=True)
class ChannelLockResult[TStatus: StrEnum]:
    channel_id: str
    status: TStatus
    outcome: RetryOutcome | None = None


@dataclass(slots=True)
class ChannelLockService:
    """Restrict or restore what ``@everyone`` may do in a channel.

    The lock record stored in :class:`~argus.domain.ports.config_store.ChannelConfig`
    remembers each restricted capability's previous state. It is cleared only
    once the permission store is confirmed to reflect the restore.
    """

    store: PermissionStore
    configs: ChannelConfigStore
    messaging: Messaging
    reconcile_attempts: int = DEFAULT_RECONCILE_ATTEMPTS
    backoff: Backoff | None = None
    lock_capabilities: Sequence[str] = DEFAULT_LOCK_CAPABILITIES
    sleep: Sleep = field(default=asyncio.sleep)

    async def lock(
        self,
        channel_id: str,
        everyone_id: str,
        announcement: str | None = None,
    ) -> ChannelLockResult[LockStatus]:
        config = self.configs.get(channel_id)
        if config.is_locked:
            return ChannelLockResult(channel_id, LockStatus.ALREADY_LOCKED)

        target = OverwriteTarget(target_id=channel_id, subject_id=everyone_id)
        current = await self.store.read(target)
        restore: dict[str, Intent] = {}
        for name in self.lock_capabilities:
            previous = current.intent_of(name)
            if previous is Intent.DENY:
                continue
            restore[name] = previous
        if not restore:
            return ChannelLockResult(channel_id, LockStatus.ALREADY_LOCKED)

        config.lock = DesiredOverwrite(restore)
        self.configs.save(config)

        desired = DesiredOverwrite(dict.fromkeys(restore, Intent.DENY))
        outcome = await self._reconciler(overwrite_matches).reconcile(
            target, desired, self.reconcile_attempts
        )
        if not outcome.converged:
            return ChannelLockResult(channel_id, LockStatus.NOT_CONVERGED, outcome)

        if announcement:
            await self.messaging.send(channel_id, announcement)
        log.info("Locked channel %s", channel_id)
        return ChannelLockResult(channel_id, LockStatus.LOCKED, outcome)

    async def unlock(
        self,
        channel_id: str,
        everyone_id: str,
        announcement: str | None = None,
    ) -> ChannelLockResult[UnlockStatus]:
        config = self.configs.get(channel_id)
        if not config.is_locked:
            return ChannelLockResult(channel_id, UnlockStatus.NOT_LOCKED)

        target = OverwriteTarget(target_id=channel_id, subject_id=everyone_id)
        outcome = await self._reconciler(overwrite_released).reconcile(
            target, config.lock, self.reconcile_attempts
        )
        if not outcome.converged:
            # keep the lock record: the restore is not confirmed
            return ChannelLockResult(channel_id, UnlockStatus.NOT_CONVERGED, outcome)

        if announcement:
            await self.messaging.send(channel_id, announcement)
        config.lock = DesiredOverwrite()
        self.configs.save(config)
        log.info("Unlocked channel %s", channel_id)
        return ChannelLockResult(channel_id, UnlockStatus.UNLOCKED, outcome)

    def _reconciler(self, predicate: ConvergencePredicate) -> RetryReconciler:
        return RetryReconciler(
            store=self.store,
            predicate=predicate,
            backoff=self.backoff,
            sleep=self.sleep,
        )


__all__ = [
    "DEFAULT_LOCK_CAPABILITIES",
    "DEFAULT_RECONCILE_ATTEMPTS",
    "ChannelLockResult",
    "ChannelLockService",
    "LockStatus",
    "UnlockStatus",
]
