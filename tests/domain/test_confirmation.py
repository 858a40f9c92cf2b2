from __future__ import annotations

import asyncio

import pytest

from argus.domain.confirmation import (
    DECLINED_NOTICE,
    TIMED_OUT_NOTICE,
    ConfirmationGate,
    ConfirmationOutcome,
    ConfirmationRequest,
    confirm_then,
)
from argus.domain.errors import FatalError
from argus.domain.ports.messaging import MessageRef, ReactionEvent
from tests.helpers.messaging import FakeMessaging, ScriptedReactionSource, TimedReaction

YES = "\N{WHITE HEAVY CHECK MARK}"
NO = "\N{CROSS MARK}"
INITIATOR = "user-1"
OTHER = "user-2"


def _ask(
    reactions: ScriptedReactionSource,
    messaging: FakeMessaging | None = None,
    *,
    timeout: float = 15.0,
) -> ConfirmationOutcome:
    gate = ConfirmationGate(messaging=messaging or FakeMessaging(), reactions=reactions)
    return asyncio.run(
        gate.request_confirmation("channel-1", "Really delete?", YES, NO, INITIATOR, timeout)
    )


def test_accept_from_initiator_at_two_seconds() -> None:
    reactions = ScriptedReactionSource([TimedReaction(at=2.0, user_id=INITIATOR, emoji=YES)])

    assert _ask(reactions) is ConfirmationOutcome.ACCEPTED


def test_decline_wins_over_earlier_accept_from_someone_else() -> None:
    reactions = ScriptedReactionSource(
        [
            TimedReaction(at=1.0, user_id=OTHER, emoji=YES),
            TimedReaction(at=3.0, user_id=INITIATOR, emoji=NO),
        ]
    )

    assert _ask(reactions) is ConfirmationOutcome.DECLINED


def test_times_out_without_initiator_reaction_in_window() -> None:
    reactions = ScriptedReactionSource([TimedReaction(at=16.0, user_id=INITIATOR, emoji=YES)])

    assert _ask(reactions, timeout=15.0) is ConfirmationOutcome.TIMED_OUT


def test_other_users_never_resolve_the_wait() -> None:
    reactions = ScriptedReactionSource(
        [
            TimedReaction(at=0.5, user_id=OTHER, emoji=YES),
            TimedReaction(at=1.0, user_id=OTHER, emoji=NO),
            TimedReaction(at=2.0, user_id="user-3", emoji=YES),
        ]
    )

    assert _ask(reactions) is ConfirmationOutcome.TIMED_OUT


def test_other_emoji_from_initiator_is_ignored() -> None:
    reactions = ScriptedReactionSource(
        [
            TimedReaction(at=0.5, user_id=INITIATOR, emoji="\N{THUMBS UP SIGN}"),
            TimedReaction(at=4.0, user_id=INITIATOR, emoji=YES),
        ]
    )

    assert _ask(reactions) is ConfirmationOutcome.ACCEPTED


def test_prompt_is_sent_and_both_options_attached_before_waiting() -> None:
    messaging = FakeMessaging()
    reactions = ScriptedReactionSource(attach_delay=0.01)

    _ask(reactions, messaging, timeout=5.0)

    assert messaging.sent == [("channel-1", "Really delete?")]
    prompt = MessageRef(channel_id="channel-1", message_id="m1")
    assert sorted(emoji for _, emoji in reactions.attached) == sorted([YES, NO])
    assert all(message == prompt for message, _ in reactions.attached)
    assert len(reactions.waits) == 1
    waited_on, timeout = reactions.waits[0]
    assert waited_on == prompt
    assert 0 < timeout <= 5.0


def test_identical_signals_are_rejected() -> None:
    gate = ConfirmationGate(messaging=FakeMessaging(), reactions=ScriptedReactionSource())

    with pytest.raises(ValueError, match="differ"):
        asyncio.run(gate.request_confirmation("c", "p", YES, YES, INITIATOR, 1.0))


def test_request_matches_only_the_prompt_message() -> None:
    request = ConfirmationRequest(
        prompt_message=MessageRef(channel_id="c", message_id="m1"),
        accept_signal=YES,
        decline_signal=NO,
        initiator_id=INITIATOR,
        deadline=0.0,
    )

    assert request.matches(ReactionEvent("c", "m1", INITIATOR, YES))
    assert not request.matches(ReactionEvent("c", "m2", INITIATOR, YES))
    assert not request.matches(ReactionEvent("c", "m1", OTHER, YES))
    assert request.resolve(None) is ConfirmationOutcome.TIMED_OUT


def test_confirm_then_runs_action_only_when_accepted() -> None:
    messaging = FakeMessaging()
    reactions = ScriptedReactionSource([TimedReaction(at=1.0, user_id=INITIATOR, emoji=YES)])
    gate = ConfirmationGate(messaging=messaging, reactions=reactions)
    removed: list[int] = []

    async def remove() -> int:
        removed.append(7)
        return 7

    result = asyncio.run(
        confirm_then(
            gate,
            channel_id="channel-1",
            prompt="Do you really want to delete this autoresponse?",
            accept_signal=YES,
            decline_signal=NO,
            initiator_id=INITIATOR,
            timeout=15.0,
            action=remove,
        )
    )

    assert result.performed
    assert result.value == 7
    assert removed == [7]
    assert messaging.contents("channel-1") == ["Do you really want to delete this autoresponse?"]


@pytest.mark.parametrize(
    ("script", "outcome", "notice"),
    [
        (
            [TimedReaction(at=1.0, user_id=INITIATOR, emoji=NO)],
            ConfirmationOutcome.DECLINED,
            DECLINED_NOTICE,
        ),
        ([], ConfirmationOutcome.TIMED_OUT, TIMED_OUT_NOTICE),
    ],
)
def test_confirm_then_reports_cancellation(
    script: list[TimedReaction],
    outcome: ConfirmationOutcome,
    notice: str,
) -> None:
    messaging = FakeMessaging()
    gate = ConfirmationGate(messaging=messaging, reactions=ScriptedReactionSource(script))
    calls: list[str] = []

    async def remove() -> None:
        calls.append("removed")

    result = asyncio.run(
        confirm_then(
            gate,
            channel_id="channel-1",
            prompt="Delete?",
            accept_signal=YES,
            decline_signal=NO,
            initiator_id=INITIATOR,
            timeout=15.0,
            action=remove,
        )
    )

    assert result.outcome is outcome
    assert not result.performed
    assert calls == []
    assert messaging.contents("channel-1") == ["Delete?", notice]


def test_failed_attachment_propagates_after_sibling_settles() -> None:
    reactions = ScriptedReactionSource(
        attach_delay=0.01,
        attach_failures={NO: FatalError("Unknown Message", status=404)},
    )

    with pytest.raises(FatalError, match="Unknown Message"):
        _ask(reactions)

    assert [emoji for _, emoji in reactions.attached] == [YES]
    assert reactions.waits == []


def test_confirm_then_skips_action_when_attachment_fails() -> None:
    messaging = FakeMessaging()
    reactions = ScriptedReactionSource(
        [TimedReaction(at=1.0, user_id=INITIATOR, emoji=YES)],
        attach_failures={YES: FatalError("Missing Permissions", status=403)},
    )
    gate = ConfirmationGate(messaging=messaging, reactions=reactions)
    calls: list[str] = []

    async def remove() -> None:
        calls.append("removed")

    with pytest.raises(FatalError):
        asyncio.run(
            confirm_then(
                gate,
                channel_id="channel-1",
                prompt="Delete?",
                accept_signal=YES,
                decline_signal=NO,
                initiator_id=INITIATOR,
                timeout=15.0,
                action=remove,
            )
        )

    assert calls == []
    assert reactions.waits == []
    assert messaging.contents("channel-1") == ["Delete?"]
