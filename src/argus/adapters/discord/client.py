"""HTTP client for the Discord REST API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Self
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from argus.adapters.http_resilience import ResilientClient
from argus.domain.errors import FatalError, TransientError
from argus.domain.overwrites import Intent, MaterializedOverwrite
from argus.domain.ports.messaging import MessageRef

from .permissions import permission_bit
from .schema import (
    OVERWRITE_TYPE_MEMBER,
    OVERWRITE_TYPE_ROLE,
    ChannelPayload,
    ErrorResponse,
    MessagePayload,
)

if TYPE_CHECKING:
    from types import TracebackType

    from argus.config.discord import DiscordConfig
    from argus.domain.overwrites import DesiredOverwrite, OverwriteTarget

log = getLogger(__name__)

_TRANSIENT_STATUSES = frozenset({408, 429})


class DiscordRestClient:
    """Permission store, messaging and reaction attachment over Discord REST.

    Discord replaces a subject's whole overwrite on ``PUT``, so applying a
    partial :class:`DesiredOverwrite` reads the current overwrite first and
    merges into it, leaving unnamed capabilities untouched.
    """

    def __init__(self, config: DiscordConfig, *, http: ResilientClient | None = None) -> None:
        self.config = config
        self._http = http or ResilientClient(config.resilience)
        self._headers = {"Authorization": config.authorization}

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get_channel(self, channel_id: str) -> ChannelPayload:
        response = await self._request("GET", f"/channels/{channel_id}")
        return _parse(ChannelPayload, response)

    async def apply(self, target: OverwriteTarget, desired: DesiredOverwrite) -> None:
        channel = await self.get_channel(target.target_id)
        existing = channel.overwrite_for(target.subject_id)
        allow = existing.allow if existing else 0
        deny = existing.deny if existing else 0
        for name, intent in desired.items():
            bit = permission_bit(name)
            allow &= ~bit
            deny &= ~bit
            if intent is Intent.ALLOW:
                allow |= bit
            elif intent is Intent.DENY:
                deny |= bit

        if existing is None and not allow and not deny:
            log.debug("No overwrite to write for %s on %s", target.subject_id, target.target_id)
            return

        overwrite_type = (
            OVERWRITE_TYPE_MEMBER if target.subject_kind == "member" else OVERWRITE_TYPE_ROLE
        )
        await self._request(
            "PUT",
            f"/channels/{target.target_id}/permissions/{target.subject_id}",
            json={"allow": str(allow), "deny": str(deny), "type": overwrite_type},
        )
        log.debug("Applied overwrite %r for %s on %s", desired, target.subject_id, target.target_id)

    async def read(self, target: OverwriteTarget) -> MaterializedOverwrite:
        channel = await self.get_channel(target.target_id)
        overwrite = channel.overwrite_for(target.subject_id)
        if overwrite is None:
            return MaterializedOverwrite.EMPTY
        return overwrite.to_materialized()

    async def send(self, channel_id: str, content: str) -> MessageRef:
        response = await self._request(
            "POST",
            f"/channels/{channel_id}/messages",
            json={"content": content},
        )
        message = _parse(MessagePayload, response)
        return MessageRef(channel_id=message.channel_id, message_id=message.id)

    async def add_reaction(self, message: MessageRef, emoji: str) -> None:
        encoded = quote(emoji, safe=":")
        await self._request(
            "PUT",
            f"/channels/{message.channel_id}/messages/{message.message_id}/reactions/{encoded}/@me",
        )

    async def _request(self, method: str, path: str, *, json: object = None) -> httpx.Response:
        try:
            if json is None:
                response = await self._http.request(method, path, headers=self._headers)
            else:
                response = await self._http.request(
                    method, path, headers=self._headers, json=json
                )
        except httpx.TransportError as exc:
            raise TransientError(f"Discord request {method} {path} failed: {exc}") from exc

        if response.is_success:
            return response

        status = response.status_code
        detail = _error_message(response)
        message = f"Discord request {method} {path} failed with {status}: {detail}"
        if status in _TRANSIENT_STATUSES or status >= 500:  # noqa: PLR2004
            raise TransientError(message, status=status)
        log.error(message)
        raise FatalError(message, status=status)


def _error_message(response: httpx.Response) -> str:
    try:
        return ErrorResponse.model_validate(response.json()).message or response.reason_phrase
    except (ValueError, ValidationError):
        return response.reason_phrase


def _parse[TModel: (ChannelPayload, MessagePayload)](
    model: type[TModel], response: httpx.Response
) -> TModel:
    try:
        return model.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        raise FatalError(f"Unexpected Discord response payload: {exc}") from exc
