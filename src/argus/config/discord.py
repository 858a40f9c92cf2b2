"""Discord API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_str, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

DISCORD_API_BASE_URL = "https://discord.com/api/v10"
DISCORD_TIMEOUT_SECONDS = 10.0
USER_AGENT = "DiscordBot (https://github.com/argus-bot/argus, 0.1)"


@dataclass(frozen=True)
class DiscordConfig:
    """Holds Discord bot credentials and HTTP settings."""

    auth_token: str
    resilience: ResilienceConfig

    @property
    def authorization(self) -> str:
        return f"Bot {self.auth_token}"


def default_resilience(base_url: str = DISCORD_API_BASE_URL) -> ResilienceConfig:
    return ResilienceConfig(
        name="discord",
        base_url=base_url,
        timeout_seconds=DISCORD_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=40, per_seconds=1.0),
        default_headers={"User-Agent": USER_AGENT},
    )


def get_discord_config(*, resilience: ResilienceConfig | None = None) -> DiscordConfig:
    values = require_env_vars(("ARGUS_AUTH_TOKEN",))
    base_url = env_str("ARGUS_API_BASE_URL", DISCORD_API_BASE_URL)
    return DiscordConfig(
        auth_token=values["ARGUS_AUTH_TOKEN"],
        resilience=resilience or default_resilience(base_url),
    )
