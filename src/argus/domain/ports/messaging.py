"""Ports for posting messages and observing reactions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True, slots=True)
class MessageRef:
    """Identifies a message the bot has sent."""

    channel_id: str
    message_id: str


@dataclass(frozen=True, slots=True)
class ReactionEvent:
    """A user added ``emoji`` to a message."""

    channel_id: str
    message_id: str
    user_id: str
    emoji: str


@runtime_checkable
class Messaging(Protocol):
    async def send(self, channel_id: str, content: str) -> MessageRef: ...


@runtime_checkable
class ReactionSource(Protocol):
    """Reaction options on messages and the stream of reaction events."""

    async def attach(self, message: MessageRef, emoji: str) -> None: ...

    async def wait_for(
        self,
        message: MessageRef,
        predicate: Callable[[ReactionEvent], bool],
        *,
        timeout: float,
    ) -> ReactionEvent | None:
        """Return the first matching event, or ``None`` once ``timeout`` seconds pass."""
        ...


__all__ = ["MessageRef", "Messaging", "ReactionEvent", "ReactionSource"]
