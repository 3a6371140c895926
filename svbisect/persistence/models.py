#!/usr/bin/env python3
"""SQLAlchemy ORM models for the bisect session database."""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class SessionRecord(Base):
    """Stored bisect session.

    The session itself is kept as a schema-versioned JSON document in
    ``state``; the other columns are for lookup and diagnostics.
    """

    __tablename__ = "bisect_sessions"

    session_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    working_copy_path: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    schema_version: Mapped[int] = mapped_column(Integer, nullable=False)
    state: Mapped[str] = mapped_column(Text, nullable=False)  # JSON as TEXT
    created_at: Mapped[str] = mapped_column(String, nullable=False)
    updated_at: Mapped[str] = mapped_column(String, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<SessionRecord(id={self.session_id}, path={self.working_copy_path}, "
            f"schema={self.schema_version})>"
        )
