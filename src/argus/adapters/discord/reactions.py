"""In-process dispatch of gateway reaction events to pending waits."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .schema import ReactionAddPayload

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from argus.domain.ports.messaging import MessageRef, ReactionEvent

    from .client import DiscordRestClient

log = getLogger(__name__)


@dataclass(slots=True)
class _Waiter:
    message_id: str
    predicate: Callable[[ReactionEvent], bool]
    future: asyncio.Future[ReactionEvent]


@dataclass(slots=True)
class ReactionHub:
    """Routes reaction events from the gateway listener to whoever is waiting.

    Events that arrive while nobody waits on their message are dropped; a
    wait only sees events published after it started.
    """

    _waiters: list[_Waiter] = field(default_factory=list)

    def publish(self, event: ReactionEvent) -> int:
        """Hand ``event`` to every matching waiter; return how many were resolved."""

        resolved = 0
        for waiter in list(self._waiters):
            if waiter.future.done() or waiter.message_id != event.message_id:
                continue
            try:
                matched = waiter.predicate(event)
            except Exception:
                log.exception("Reaction predicate failed for message %s", waiter.message_id)
                continue
            if matched:
                waiter.future.set_result(event)
                resolved += 1
        return resolved

    def publish_payload(self, payload: Mapping[str, object]) -> int:
        """Publish a raw ``MESSAGE_REACTION_ADD`` dispatch payload."""

        return self.publish(ReactionAddPayload.model_validate(payload).to_event())

    async def wait_for(
        self,
        message: MessageRef,
        predicate: Callable[[ReactionEvent], bool],
        *,
        timeout: float,
    ) -> ReactionEvent | None:
        future: asyncio.Future[ReactionEvent] = asyncio.get_running_loop().create_future()
        waiter = _Waiter(message_id=message.message_id, predicate=predicate, future=future)
        self._waiters.append(waiter)
        try:
            async with asyncio.timeout(timeout):
                return await future
        except TimeoutError:
            log.debug("No matching reaction on %s within %ss", message.message_id, timeout)
            return None
        finally:
            self._waiters.remove(waiter)

    @property
    def pending(self) -> int:
        return len(self._waiters)


@dataclass(slots=True)
class DiscordReactionSource:
    """``ReactionSource`` backed by the REST client and a gateway-fed hub."""

    rest: DiscordRestClient
    hub: ReactionHub

    async def attach(self, message: MessageRef, emoji: str) -> None:
        await self.rest.add_reaction(message, emoji)

    async def wait_for(
        self,
        message: MessageRef,
        predicate: Callable[[ReactionEvent], bool],
        *,
        timeout: float,
    ) -> ReactionEvent | None:
        return await self.hub.wait_for(message, predicate, timeout=timeout)


__all__ = ["DiscordReactionSource", "ReactionHub"]
