"""SQLAlchemy mapping metadata for moderation records."""

from __future__ import annotations

import json
import logging
from functools import cache
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import Column, Dialect, String, Table, Text, TypeDecorator, orm
from sqlalchemy.orm import configure_mappers

from argus.domain.overwrites import DesiredOverwrite
from argus.domain.ports.config_store import ChannelConfig

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class DesiredOverwriteType(TypeDecorator[DesiredOverwrite]):
    """Stores an overwrite as JSON flags: ``true`` allow, ``false`` deny, ``null`` unset."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: DesiredOverwrite | None, dialect: Dialect) -> str:
        _ = dialect
        flags = value.to_flags() if value is not None else {}
        return json.dumps(flags, sort_keys=True)

    def process_result_value(self, value: str | None, dialect: Dialect) -> DesiredOverwrite:
        _ = dialect
        if not value:
            return DesiredOverwrite()
        loaded = json.loads(value)
        if not isinstance(loaded, dict):
            return DesiredOverwrite()
        flags = cast(dict[str, Any], loaded)
        return DesiredOverwrite.from_flags(
            {name: flag for name, flag in flags.items() if flag is None or isinstance(flag, bool)}
        )


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "pk": "pk_%(table_name)s",
}

channel_config_table = Table(
    "channel_config",
    mapper_registry.metadata,
    Column("channel_id", String(32), primary_key=True),
    Column("lock", DesiredOverwriteType(), nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")
    mapper_registry.map_imperatively(ChannelConfig, channel_config_table)
    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
