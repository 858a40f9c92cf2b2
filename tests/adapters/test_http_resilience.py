from __future__ import annotations

import asyncio
import json

import httpx

from argus.adapters.http_resilience import RateLimit, ResilienceConfig, ResilientClient


def test_request_is_the_single_entry_point_and_passes_options() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    config = ResilienceConfig(
        name="discord",
        base_url="https://discord.test/api",
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
    )
    client = ResilientClient(config)
    client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        base_url="https://discord.test/api",
        transport=httpx.MockTransport(handler),
    )

    async def scenario() -> httpx.Response:
        async with client:
            return await client.request(
                "PUT", "/channels/c1/permissions/g1", json={"allow": "0"}
            )

    response = asyncio.run(scenario())

    assert response.status_code == 204
    assert seen[0].method == "PUT"
    assert seen[0].url.path == "/api/channels/c1/permissions/g1"
    assert json.loads(seen[0].content) == {"allow": "0"}
    assert not hasattr(client, "get")
