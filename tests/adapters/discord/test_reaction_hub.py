from __future__ import annotations

import asyncio

import pytest

from argus.adapters.discord import DiscordReactionSource, ReactionHub
from argus.domain.ports.messaging import MessageRef, ReactionEvent, ReactionSource

MESSAGE = MessageRef(channel_id="c1", message_id="m1")


def _event(user_id: str = "u1", emoji: str = "yes", message_id: str = "m1") -> ReactionEvent:
    return ReactionEvent(channel_id="c1", message_id=message_id, user_id=user_id, emoji=emoji)


def _from_u1(event: ReactionEvent) -> bool:
    return event.user_id == "u1"


def test_publish_resolves_matching_wait() -> None:
    hub = ReactionHub()

    async def scenario() -> tuple[ReactionEvent | None, int]:
        waiting = asyncio.create_task(hub.wait_for(MESSAGE, _from_u1, timeout=1.0))
        await asyncio.sleep(0)
        resolved = hub.publish(_event())
        return await waiting, resolved

    result, resolved = asyncio.run(scenario())

    assert result == _event()
    assert resolved == 1
    assert hub.pending == 0


def test_non_matching_events_do_not_resolve() -> None:
    hub = ReactionHub()

    async def scenario() -> ReactionEvent | None:
        waiting = asyncio.create_task(hub.wait_for(MESSAGE, _from_u1, timeout=0.05))
        await asyncio.sleep(0)
        assert hub.publish(_event(user_id="u2")) == 0
        assert hub.publish(_event(message_id="m2")) == 0
        return await waiting

    assert asyncio.run(scenario()) is None
    assert hub.pending == 0


def test_failing_predicate_does_not_block_other_waiters(caplog: pytest.LogCaptureFixture) -> None:
    hub = ReactionHub()

    def broken(event: ReactionEvent) -> bool:
        raise KeyError(event.emoji)

    async def scenario() -> tuple[ReactionEvent | None, ReactionEvent | None, int]:
        failing = asyncio.create_task(hub.wait_for(MESSAGE, broken, timeout=0.05))
        healthy = asyncio.create_task(hub.wait_for(MESSAGE, _from_u1, timeout=1.0))
        await asyncio.sleep(0)
        resolved = hub.publish(_event())
        return await failing, await healthy, resolved

    failed, matched, resolved = asyncio.run(scenario())

    assert failed is None
    assert matched == _event()
    assert resolved == 1
    assert "Reaction predicate failed" in caplog.text


def test_wait_times_out_with_none() -> None:
    hub = ReactionHub()

    result = asyncio.run(hub.wait_for(MESSAGE, _from_u1, timeout=0.01))

    assert result is None
    assert hub.pending == 0


def test_events_published_before_the_wait_are_dropped() -> None:
    hub = ReactionHub()

    async def scenario() -> ReactionEvent | None:
        assert hub.publish(_event()) == 0
        return await hub.wait_for(MESSAGE, _from_u1, timeout=0.01)

    assert asyncio.run(scenario()) is None


def test_cancelled_wait_is_cleaned_up() -> None:
    hub = ReactionHub()

    async def scenario() -> None:
        waiting = asyncio.create_task(hub.wait_for(MESSAGE, _from_u1, timeout=5.0))
        await asyncio.sleep(0)
        assert hub.pending == 1
        waiting.cancel()
        await asyncio.gather(waiting, return_exceptions=True)

    asyncio.run(scenario())

    assert hub.pending == 0


def test_publish_payload_parses_gateway_dispatch() -> None:
    hub = ReactionHub()

    async def scenario() -> ReactionEvent | None:
        waiting = asyncio.create_task(hub.wait_for(MESSAGE, _from_u1, timeout=1.0))
        await asyncio.sleep(0)
        hub.publish_payload(
            {
                "user_id": "u1",
                "channel_id": "c1",
                "message_id": "m1",
                "emoji": {"id": None, "name": "yes"},
            }
        )
        return await waiting

    assert asyncio.run(scenario()) == _event()


class _RecordingRest:
    def __init__(self) -> None:
        self.reactions: list[tuple[MessageRef, str]] = []

    async def add_reaction(self, message: MessageRef, emoji: str) -> None:
        self.reactions.append((message, emoji))


def test_reaction_source_attaches_via_rest_and_waits_on_hub() -> None:
    hub = ReactionHub()
    rest = _RecordingRest()
    source = DiscordReactionSource(rest=rest, hub=hub)  # type: ignore[arg-type]

    async def scenario() -> ReactionEvent | None:
        await source.attach(MESSAGE, "yes")
        waiting = asyncio.create_task(source.wait_for(MESSAGE, _from_u1, timeout=1.0))
        await asyncio.sleep(0)
        hub.publish(_event())
        return await waiting

    assert asyncio.run(scenario()) == _event()
    assert rest.reactions == [(MESSAGE, "yes")]
    assert isinstance(source, ReactionSource)
