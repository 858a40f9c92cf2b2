"""Application orchestration entry points."""

from __future__ import annotations

from contextlib import AsyncExitStack
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from argus.adapters.discord import DiscordReactionSource, DiscordRestClient, ReactionHub
from argus.adapters.discord.permissions import permission_bit
from argus.adapters.sqlalchemy import channel_config_store, is_started, startup
from argus.config import ConfigurationError, get_discord_config, get_moderation_config
from argus.domain.channel_lock import ChannelLockService, LockStatus, UnlockStatus
from argus.domain.confirmation import ConfirmationGate, GuardedAction, confirm_then
from argus.domain.ports import Messaging, PermissionStore
from argus.domain.retry import Backoff

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from argus.config import ModerationConfig
    from argus.domain.channel_lock import ChannelLockResult
    from argus.domain.ports import ChannelConfigStore

log = getLogger(__name__)

LOCKED_ANNOUNCEMENT = "This channel has been locked!"
UNLOCKED_ANNOUNCEMENT = "This channel has been unlocked!"


class Platform(PermissionStore, Messaging, Protocol):
    """A chat platform client that both stores overwrites and posts messages."""


def _announcement(title: str, message: str | None) -> str:
    if message and message.strip():
        return f"{title}\n{message.strip()}"
    return title


def build_lock_service(
    platform: Platform,
    configs: ChannelConfigStore,
    moderation: ModerationConfig,
) -> ChannelLockService:
    _check_lock_permissions(moderation.lock_permissions)
    backoff = (
        Backoff(initial=moderation.reconcile_backoff_seconds)
        if moderation.reconcile_backoff_seconds > 0
        else None
    )
    return ChannelLockService(
        store=platform,
        configs=configs,
        messaging=platform,
        reconcile_attempts=moderation.reconcile_max_attempts,
        backoff=backoff,
        lock_capabilities=moderation.lock_permissions,
    )


def _check_lock_permissions(names: Iterable[str]) -> None:
    for name in names:
        try:
            permission_bit(name)
        except ValueError as exc:
            raise ConfigurationError(f"ARGUS_LOCK_PERMISSIONS: {exc}") from exc


def _default_configs() -> ChannelConfigStore:
    if not is_started():
        startup()
    return channel_config_store()


async def lock_channels(
    channel_ids: Iterable[str],
    *,
    guild_id: str,
    message: str | None = None,
    platform: Platform | None = None,
    configs: ChannelConfigStore | None = None,
    moderation: ModerationConfig | None = None,
) -> list[ChannelLockResult[LockStatus]]:
    """Deny the configured permissions to ``@everyone`` in each channel."""

    effective_moderation = moderation or get_moderation_config()
    effective_configs = configs or _default_configs()
    results: list[ChannelLockResult[LockStatus]] = []
    async with AsyncExitStack() as stack:
        effective_platform = platform or await stack.enter_async_context(
            DiscordRestClient(get_discord_config())
        )
        service = build_lock_service(effective_platform, effective_configs, effective_moderation)
        announcement = _announcement(LOCKED_ANNOUNCEMENT, message)
        # @everyone shares its id with the guild
        for channel_id in channel_ids:
            result = await service.lock(channel_id, guild_id, announcement)
            log.info("Lock %s: %s", channel_id, result.status)
            results.append(result)
    return results


async def unlock_channels(
    channel_ids: Iterable[str],
    *,
    guild_id: str,
    message: str | None = None,
    platform: Platform | None = None,
    configs: ChannelConfigStore | None = None,
    moderation: ModerationConfig | None = None,
) -> list[ChannelLockResult[UnlockStatus]]:
    """Restore the permissions recorded when each channel was locked."""

    effective_moderation = moderation or get_moderation_config()
    effective_configs = configs or _default_configs()
    results: list[ChannelLockResult[UnlockStatus]] = []
    async with AsyncExitStack() as stack:
        effective_platform = platform or await stack.enter_async_context(
            DiscordRestClient(get_discord_config())
        )
        service = build_lock_service(effective_platform, effective_configs, effective_moderation)
        announcement = _announcement(UNLOCKED_ANNOUNCEMENT, message)
        for channel_id in channel_ids:
            result = await service.unlock(channel_id, guild_id, announcement)
            log.info("Unlock %s: %s", channel_id, result.status)
            results.append(result)
    return results


def build_confirmation_gate(rest: DiscordRestClient, hub: ReactionHub) -> ConfirmationGate:
    return ConfirmationGate(messaging=rest, reactions=DiscordReactionSource(rest=rest, hub=hub))


async def confirm_destructive_action[T](  # noqa: PLR0913
    gate: ConfirmationGate,
    *,
    channel_id: str,
    prompt: str,
    initiator_id: str,
    action: Callable[[], Awaitable[T]],
    moderation: ModerationConfig | None = None,
) -> GuardedAction[T]:
    """Ask ``initiator_id`` to confirm with the configured emoji, then run ``action``."""

    effective_moderation = moderation or get_moderation_config()
    return await confirm_then(
        gate,
        channel_id=channel_id,
        prompt=prompt,
        accept_signal=effective_moderation.emoji_yes,
        decline_signal=effective_moderation.emoji_no,
        initiator_id=initiator_id,
        timeout=effective_moderation.confirmation_timeout_seconds,
        action=action,
    )
