"""Application configuration helpers."""

from __future__ import annotations

from argus.common.logging import configure_logging

from .discord import DiscordConfig, get_discord_config
from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .moderation import ModerationConfig, get_moderation_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "DiscordConfig",
    "MissingConfigurationError",
    "ModerationConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_discord_config",
    "get_moderation_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
