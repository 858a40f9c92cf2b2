"""Domain port definitions for adapters."""

from __future__ import annotations

from .config_store import ChannelConfig, ChannelConfigStore
from .messaging import MessageRef, Messaging, ReactionEvent, ReactionSource
from .permissions import PermissionStore

__all__ = [
    "ChannelConfig",
    "ChannelConfigStore",
    "MessageRef",
    "Messaging",
    "PermissionStore",
    "ReactionEvent",
    "ReactionSource",
]
