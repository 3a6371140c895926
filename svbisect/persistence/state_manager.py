#!/usr/bin/env python3
"""State Manager - Persistent session storage using SQLAlchemy ORM.

Holds the single active bisect session of a working copy in a SQLite
database inside the working copy's private metadata area.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from svbisect.core.session import (
    SCHEMA_VERSION,
    Session,
    session_from_dict,
    session_to_dict,
)
from svbisect.persistence.models import Base, SessionRecord


logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Base exception for database-related errors."""


class StateManager:
    """Manage the bisect session record.

    The database file is only created when a session is first saved, so
    merely checking for a session leaves the working copy untouched.

    Attributes:
        db_path: Path to SQLite database file
    """

    def __init__(self, db_path: str) -> None:
        """Initialize state manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self._engine: Optional[Engine] = None
        self._factory: Optional[sessionmaker] = None

    def _connect(self) -> sessionmaker:
        """Create the engine and schema on first use."""
        if self._factory is None:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            try:
                self._engine = create_engine(f"sqlite:///{self.db_path}", echo=False)
                Base.metadata.create_all(self._engine)
            except Exception as exc:
                msg = f"Failed to initialize database: {exc}"
                logger.error(msg)
                raise DatabaseError(msg) from exc
            self._factory = sessionmaker(bind=self._engine)
            logger.debug(f"Database initialized at {self.db_path}")
        return self._factory

    def exists(self) -> bool:
        """Check whether a session record exists."""
        return self._fetch() is not None

    def _fetch(self) -> Optional[SessionRecord]:
        if self._factory is None and not Path(self.db_path).is_file():
            return None

        db = self._connect()()
        try:
            return db.execute(select(SessionRecord).limit(1)).scalar_one_or_none()
        except Exception as exc:
            msg = f"Error reading bisect data ({self.db_path}): {exc}"
            logger.error(msg)
            raise DatabaseError(msg) from exc
        finally:
            db.close()

    def load(self) -> Optional[Session]:
        """Load the stored session.

        Returns:
            Session or None if no session is stored

        Raises:
            DatabaseError: If the record cannot be read or decoded
        """
        record = self._fetch()
        if record is None:
            return None

        if record.schema_version > SCHEMA_VERSION:
            raise DatabaseError(
                f"Bisect data ({self.db_path}) was written by a newer version "
                f"(schema {record.schema_version})"
            )
        try:
            return session_from_dict(json.loads(record.state))
        except ValueError as exc:
            raise DatabaseError(f"Error reading bisect data ({self.db_path}): {exc}") from exc

    def save(self, session: Session) -> None:
        """Create or replace the stored session.

        Raises:
            DatabaseError: If the session cannot be written
        """
        db = self._connect()()
        now = datetime.now(timezone.utc).isoformat()
        try:
            record = db.execute(select(SessionRecord).limit(1)).scalar_one_or_none()
            if record is None:
                record = SessionRecord(created_at=now)
                db.add(record)
            record.working_copy_path = session.working_copy_path
            record.schema_version = SCHEMA_VERSION
            record.state = json.dumps(session_to_dict(session))
            record.updated_at = now
            db.commit()
            logger.debug(f"Saved bisect session for {session.working_copy_path}")
        except Exception as exc:
            db.rollback()
            msg = f"Error saving bisect data ({self.db_path}): {exc}"
            logger.error(msg)
            raise DatabaseError(msg) from exc
        finally:
            db.close()

    def delete(self) -> None:
        """Remove the stored session and the database file."""
        if self._factory is not None:
            db = self._factory()
            try:
                db.execute(delete(SessionRecord))
                db.commit()
            finally:
                db.close()
        self.close()

        path = Path(self.db_path)
        if path.exists():
            path.unlink()
            logger.debug(f"Removed {self.db_path}")

    def close(self) -> None:
        """Dispose of the database engine."""
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._factory = None
