"""Pydantic models describing the Discord payloads used by the adapter."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from argus.domain.overwrites import MaterializedOverwrite
from argus.domain.ports.messaging import ReactionEvent

from .permissions import from_bitfield

OVERWRITE_TYPE_ROLE = 0
OVERWRITE_TYPE_MEMBER = 1


class DiscordBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PermissionOverwritePayload(DiscordBaseModel):
    id: str
    type: Literal[0, 1]
    allow: int = 0
    deny: int = 0

    # Discord serialises bitfields as strings
    @field_validator("allow", "deny", mode="before")
    @classmethod
    def _parse_bitfield(cls, value: object) -> object:
        if isinstance(value, str):
            return int(value) if value.strip() else 0
        return value

    def to_materialized(self) -> MaterializedOverwrite:
        return MaterializedOverwrite(allow=from_bitfield(self.allow), deny=from_bitfield(self.deny))


class ChannelPayload(DiscordBaseModel):
    id: str
    type: int
    guild_id: str | None = None
    name: str | None = None
    permission_overwrites: list[PermissionOverwritePayload] = Field(default_factory=list)

    def overwrite_for(self, subject_id: str) -> PermissionOverwritePayload | None:
        for overwrite in self.permission_overwrites:
            if overwrite.id == subject_id:
                return overwrite
        return None


class MessagePayload(DiscordBaseModel):
    id: str
    channel_id: str
    content: str = ""


class EmojiPayload(DiscordBaseModel):
    id: str | None = None
    name: str | None = None

    @property
    def key(self) -> str:
        """Unicode emoji as-is; custom emoji as ``name:id``."""

        if self.id is None:
            return self.name or ""
        return f"{self.name}:{self.id}"


class ReactionAddPayload(DiscordBaseModel):
    """``MESSAGE_REACTION_ADD`` gateway dispatch data."""

    user_id: str
    channel_id: str
    message_id: str
    guild_id: str | None = None
    emoji: EmojiPayload

    def to_event(self) -> ReactionEvent:
        return ReactionEvent(
            channel_id=self.channel_id,
            message_id=self.message_id,
            user_id=self.user_id,
            emoji=self.emoji.key,
        )


class ErrorResponse(DiscordBaseModel):
    code: int = 0
    message: str = ""


__all__ = [
    "OVERWRITE_TYPE_MEMBER",
    "OVERWRITE_TYPE_ROLE",
    "ChannelPayload",
    "EmojiPayload",
    "ErrorResponse",
    "MessagePayload",
    "PermissionOverwritePayload",
    "ReactionAddPayload",
]
