"""Tests for the session store."""

from pathlib import Path

import pytest
from sqlalchemy import select

from svbisect.core.session import Session
from svbisect.persistence import DatabaseError, SessionRecord, StateManager


def make_session(**kwargs):
    values = dict(
        working_copy_path="/work/trunk",
        original_revision=100,
        head_revision=100,
        first_revision=70,
    )
    values.update(kwargs)
    return Session(**values)


def test_load_without_database(tmp_path):
    """Test that checking for a session does not create the database."""
    db_path = tmp_path / "state" / "svbisect.db"
    store = StateManager(str(db_path))

    assert store.load() is None
    assert not store.exists()
    assert not db_path.exists()


def test_save_and_load(store):
    session = make_session(bad_revision=100, good_revision=70, skipped=frozenset({85}))

    store.save(session)

    assert store.exists()
    assert store.load() == session


def test_save_replaces_record(store):
    """Test that only one session record is ever kept."""
    store.save(make_session())
    store.save(make_session(bad_revision=95))

    factory = store._connect()
    with factory() as db:
        records = db.execute(select(SessionRecord)).scalars().all()

    assert len(records) == 1
    assert store.load().bad_revision == 95


def test_delete_removes_database(store):
    store.save(make_session())

    store.delete()

    assert store.load() is None
    assert not Path(store.db_path).exists()


def test_newer_schema_rejected(store):
    """Test that a record written by a newer version is refused."""
    store.save(make_session())
    factory = store._connect()
    with factory() as db:
        record = db.execute(select(SessionRecord)).scalar_one()
        record.schema_version = 99
        db.commit()

    with pytest.raises(DatabaseError, match="newer version"):
        store.load()


def test_corrupt_state_rejected(store):
    store.save(make_session())
    factory = store._connect()
    with factory() as db:
        record = db.execute(select(SessionRecord)).scalar_one()
        record.state = "{not json"
        db.commit()

    with pytest.raises(DatabaseError):
        store.load()
