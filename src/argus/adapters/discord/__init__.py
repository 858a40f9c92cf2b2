"""Discord adapter package."""

from __future__ import annotations

from .client import DiscordRestClient
from .permissions import PERMISSION_BITS, from_bitfield, permission_bit, to_bitfield
from .reactions import DiscordReactionSource, ReactionHub
from .schema import ChannelPayload, MessagePayload, PermissionOverwritePayload, ReactionAddPayload

__all__ = [
    "PERMISSION_BITS",
    "ChannelPayload",
    "DiscordReactionSource",
    "DiscordRestClient",
    "MessagePayload",
    "PermissionOverwritePayload",
    "ReactionAddPayload",
    "ReactionHub",
    "from_bitfield",
    "permission_bit",
    "to_bitfield",
]
