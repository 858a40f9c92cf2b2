"""SQLAlchemy adapter package for Argus."""

from __future__ import annotations

from .mappings import channel_config_table, create_all_tables, mapper_registry, start_mappers
from .repositories import SqlAlchemyChannelConfigRepository, SqlAlchemyChannelConfigStore
from .unit_of_work import StartupError, channel_config_store, is_started, shutdown, startup

__all__ = [
    "SqlAlchemyChannelConfigRepository",
    "SqlAlchemyChannelConfigStore",
    "StartupError",
    "channel_config_store",
    "channel_config_table",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
