from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker  # noqa: TC002

from argus.adapters.sqlalchemy import (
    SqlAlchemyChannelConfigStore,
    StartupError,
    channel_config_store,
    is_started,
    startup,
)
from argus.domain.overwrites import DesiredOverwrite, Intent
from argus.domain.ports.config_store import ChannelConfig, ChannelConfigStore


def test_missing_record_reads_as_unlocked(
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    store = SqlAlchemyChannelConfigStore(sqlite_session_factory)

    config = store.get("c1")

    assert config == ChannelConfig(channel_id="c1")
    assert not config.is_locked


def test_lock_record_round_trips(sqlite_session_factory: sessionmaker[Session]) -> None:
    store = SqlAlchemyChannelConfigStore(sqlite_session_factory)
    lock = DesiredOverwrite(
        {
            "SEND_MESSAGES": Intent.ALLOW,
            "ADD_REACTIONS": Intent.UNSET,
            "EMBED_LINKS": Intent.DENY,
        }
    )

    store.save(ChannelConfig(channel_id="c1", lock=lock))
    loaded = store.get("c1")

    assert loaded.is_locked
    assert loaded.lock == lock


def test_lock_is_stored_as_json_flags(
    sqlite_engine: Engine,
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    store = SqlAlchemyChannelConfigStore(sqlite_session_factory)
    store.save(
        ChannelConfig(
            channel_id="c1",
            lock=DesiredOverwrite({"SEND_MESSAGES": Intent.UNSET, "ADD_REACTIONS": Intent.ALLOW}),
        )
    )

    with sqlite_engine.connect() as connection:
        raw = connection.execute(
            text("SELECT lock FROM channel_config WHERE channel_id = :cid"), {"cid": "c1"}
        ).scalar_one()

    assert raw == '{"ADD_REACTIONS": true, "SEND_MESSAGES": null}'


def test_save_overwrites_existing_record(sqlite_session_factory: sessionmaker[Session]) -> None:
    store = SqlAlchemyChannelConfigStore(sqlite_session_factory)
    store.save(
        ChannelConfig(channel_id="c1", lock=DesiredOverwrite({"SEND_MESSAGES": Intent.UNSET}))
    )

    config = store.get("c1")
    config.lock = DesiredOverwrite()
    store.save(config)

    assert not store.get("c1").is_locked
    assert not store.get("c2").is_locked


def test_startup_exposes_store(sqlite_startup: Engine) -> None:
    _ = sqlite_startup
    assert is_started()

    store = channel_config_store()

    assert isinstance(store, ChannelConfigStore)
    store.save(ChannelConfig(channel_id="c9", lock=DesiredOverwrite({"X": Intent.DENY})))
    assert store.get("c9").lock == DesiredOverwrite({"X": Intent.DENY})


def test_startup_twice_requires_force(sqlite_startup: Engine) -> None:
    with pytest.raises(StartupError):
        startup(engine=sqlite_startup)
