"""Reaction-based confirmation before destructive operations."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from .ports.messaging import Messaging, MessageRef, ReactionEvent, ReactionSource

log = getLogger(__name__)

DECLINED_NOTICE = "Canceled!"
TIMED_OUT_NOTICE = "You took too long to react!"


class ConfirmationOutcome(StrEnum):
    ACCEPTED = "accepted"
    DECLINED = "declined"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True, slots=True)
class ConfirmationRequest:
    """One pending confirmation. ``deadline`` is in event-loop time."""

    prompt_message: MessageRef
    accept_signal: str
    decline_signal: str
    initiator_id: str
    deadline: float

    def matches(self, event: ReactionEvent) -> bool:
        return (
            event.message_id == self.prompt_message.message_id
            and event.user_id == self.initiator_id
            and event.emoji in (self.accept_signal, self.decline_signal)
        )

    def resolve(self, event: ReactionEvent | None) -> ConfirmationOutcome:
        if event is None:
            return ConfirmationOutcome.TIMED_OUT
        if event.emoji == self.accept_signal:
            return ConfirmationOutcome.ACCEPTED
        return ConfirmationOutcome.DECLINED


@dataclass(slots=True)
class ConfirmationGate:
    messaging: Messaging
    reactions: ReactionSource

    async def request_confirmation(  # noqa: PLR0913
        self,
        channel_id: str,
        prompt: str,
        accept_signal: str,
        decline_signal: str,
        initiator_id: str,
        timeout: float,
    ) -> ConfirmationOutcome:
        """Prompt ``initiator_id`` and wait up to ``timeout`` seconds for their answer.

        Reactions from other users, and other emoji, are ignored. Expiry is a
        normal outcome and is returned as :attr:`ConfirmationOutcome.TIMED_OUT`.
        """

        if accept_signal == decline_signal:
            raise ValueError("Accept and decline signals must differ")
        if timeout < 0:
            raise ValueError("Timeout must be non-negative")

        message = await self.messaging.send(channel_id, prompt)
        # both attachments settle before a failure surfaces
        attached = await asyncio.gather(
            self.reactions.attach(message, accept_signal),
            self.reactions.attach(message, decline_signal),
            return_exceptions=True,
        )
        for result in attached:
            if isinstance(result, BaseException):
                log.error("Could not attach reaction to %s: %s", message.message_id, result)
                raise result

        loop = asyncio.get_running_loop()
        request = ConfirmationRequest(
            prompt_message=message,
            accept_signal=accept_signal,
            decline_signal=decline_signal,
            initiator_id=initiator_id,
            deadline=loop.time() + timeout,
        )
        event = await self.reactions.wait_for(
            message,
            request.matches,
            timeout=max(request.deadline - loop.time(), 0.0),
        )
        outcome = request.resolve(event)
        log.info(
            "Confirmation %s by %s on message %s",
            outcome,
            initiator_id,
            message.message_id,
        )
        return outcome


@dataclass(frozen=True, slots=True)
class GuardedAction[T]:
    outcome: ConfirmationOutcome
    value: T | None = None

    @property
    def performed(self) -> bool:
        return self.outcome is ConfirmationOutcome.ACCEPTED


async def confirm_then[T](  # noqa: PLR0913
    gate: ConfirmationGate,
    *,
    channel_id: str,
    prompt: str,
    accept_signal: str,
    decline_signal: str,
    initiator_id: str,
    timeout: float,
    action: Callable[[], Awaitable[T]],
) -> GuardedAction[T]:
    """Run ``action`` only if the initiator accepts; otherwise report cancellation."""

    outcome = await gate.request_confirmation(
        channel_id,
        prompt,
        accept_signal,
        decline_signal,
        initiator_id,
        timeout,
    )
    if outcome is ConfirmationOutcome.ACCEPTED:
        return GuardedAction(outcome=outcome, value=await action())

    notice = DECLINED_NOTICE if outcome is ConfirmationOutcome.DECLINED else TIMED_OUT_NOTICE
    await gate.messaging.send(channel_id, notice)
    return GuardedAction(outcome=outcome)


__all__ = [
    "DECLINED_NOTICE",
    "TIMED_OUT_NOTICE",
    "ConfirmationGate",
    "ConfirmationOutcome",
    "ConfirmationRequest",
    "GuardedAction",
    "confirm_then",
]
