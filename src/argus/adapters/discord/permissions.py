"""Discord permission names and their bit positions."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Final

PERMISSION_BITS: Final[Mapping[str, int]] = MappingProxyType(
    {
        "CREATE_INSTANT_INVITE": 0,
        "KICK_MEMBERS": 1,
        "BAN_MEMBERS": 2,
        "ADMINISTRATOR": 3,
        "MANAGE_CHANNELS": 4,
        "MANAGE_GUILD": 5,
        "ADD_REACTIONS": 6,
        "VIEW_AUDIT_LOG": 7,
        "PRIORITY_SPEAKER": 8,
        "STREAM": 9,
        "VIEW_CHANNEL": 10,
        "SEND_MESSAGES": 11,
        "SEND_TTS_MESSAGES": 12,
        "MANAGE_MESSAGES": 13,
        "EMBED_LINKS": 14,
        "ATTACH_FILES": 15,
        "READ_MESSAGE_HISTORY": 16,
        "MENTION_EVERYONE": 17,
        "USE_EXTERNAL_EMOJIS": 18,
        "VIEW_GUILD_INSIGHTS": 19,
        "CONNECT": 20,
        "SPEAK": 21,
        "MUTE_MEMBERS": 22,
        "DEAFEN_MEMBERS": 23,
        "MOVE_MEMBERS": 24,
        "USE_VAD": 25,
        "CHANGE_NICKNAME": 26,
        "MANAGE_NICKNAMES": 27,
        "MANAGE_ROLES": 28,
        "MANAGE_WEBHOOKS": 29,
        "MANAGE_GUILD_EXPRESSIONS": 30,
        "USE_APPLICATION_COMMANDS": 31,
        "REQUEST_TO_SPEAK": 32,
        "MANAGE_EVENTS": 33,
        "MANAGE_THREADS": 34,
        "CREATE_PUBLIC_THREADS": 35,
        "CREATE_PRIVATE_THREADS": 36,
        "USE_EXTERNAL_STICKERS": 37,
        "SEND_MESSAGES_IN_THREADS": 38,
        "USE_EMBEDDED_ACTIVITIES": 39,
        "MODERATE_MEMBERS": 40,
    }
)


def permission_bit(name: str) -> int:
    try:
        return 1 << PERMISSION_BITS[name]
    except KeyError:
        raise ValueError(f"Unknown Discord permission: {name}") from None


def to_bitfield(names: Iterable[str]) -> int:
    value = 0
    for name in names:
        value |= permission_bit(name)
    return value


def from_bitfield(value: int | str) -> frozenset[str]:
    """Known permission names set in ``value``; unknown bits are dropped."""

    bits = int(value)
    return frozenset(name for name, shift in PERMISSION_BITS.items() if bits & (1 << shift))


__all__ = ["PERMISSION_BITS", "from_bitfield", "permission_bit", "to_bitfield"]
