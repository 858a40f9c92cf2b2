"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from argus.domain.ports.config_store import ChannelConfig

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker


class SqlAlchemyChannelConfigRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, channel_id: str) -> ChannelConfig | None:
        return self.session.get(ChannelConfig, channel_id)

    def add(self, config: ChannelConfig) -> ChannelConfig:
        return self.session.merge(config)


class SqlAlchemyChannelConfigStore:
    """``ChannelConfigStore`` committing each save in its own session."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def get(self, channel_id: str) -> ChannelConfig:
        with self.session_factory() as session:
            config = SqlAlchemyChannelConfigRepository(session).get(channel_id)
            if config is None:
                return ChannelConfig(channel_id=channel_id)
            session.expunge(config)
            return config

    def save(self, config: ChannelConfig) -> None:
        with self.session_factory() as session:
            SqlAlchemyChannelConfigRepository(session).add(config)
            session.commit()
