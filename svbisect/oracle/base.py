#!/usr/bin/env python3
"""Abstract base class for revision oracles.

Provides the narrow query/command interface the bisect engine needs from a
version-control backend: revision resolution, linear history, log messages,
and moving the working copy.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from svbisect.exceptions import BisectError


# Symbolic revision keywords understood by every oracle
SYMBOLIC_REVISIONS = ("HEAD", "BASE", "PREV", "COMMITTED")


class OracleError(BisectError):
    """Base exception for revision oracle errors."""


class UpdateFailed(OracleError):
    """Backend refused to move the working copy."""

    def __init__(self, revision: int, detail: str) -> None:
        super().__init__(f"Failed to update working copy to revision {revision}: {detail}")
        self.revision = revision
        self.detail = detail


@dataclass
class LogEntry:
    """Commit metadata for a single revision.

    Attributes:
        revision: Revision number
        author: Commit author (empty if unknown)
        date: Commit date as reported by the backend
        message: Commit message lines
        paths: (action, path) pairs of changed paths, if requested
    """

    revision: int
    author: str = ""
    date: str = ""
    message: List[str] = field(default_factory=list)
    paths: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def first_line(self) -> str:
        """First line of the commit message."""
        return self.message[0] if self.message else ""


class RevisionOracle(ABC):
    """Abstract base class for revision oracles.

    Revisions are integers; larger numbers are more recent. Histories are
    always returned newest first.
    """

    @abstractmethod
    def resolve(self, token: str) -> Optional[int]:
        """Resolve a revision token against the working copy history.

        Args:
            token: Integer literal or one of SYMBOLIC_REVISIONS

        Returns:
            Revision number, or None if the token has no entry in the
            working copy's line of history
        """

    @abstractmethod
    def history(self, newest: int, oldest: int) -> List[int]:
        """Get the linear history between two revisions.

        Args:
            newest: Most recent revision (inclusive)
            oldest: Oldest revision (inclusive)

        Returns:
            Revisions in the working copy's history, newest first
        """

    @abstractmethod
    def current_revision(self) -> int:
        """Get the revision the working copy is currently at."""

    @abstractmethod
    def head_revision(self) -> int:
        """Get the newest revision reachable from the working copy."""

    @abstractmethod
    def oldest_revision(self) -> int:
        """Get the oldest revision reachable from the working copy."""

    @abstractmethod
    def working_copy_root(self) -> str:
        """Get the absolute path of the working copy root."""

    @abstractmethod
    def log_entry(self, revision: int, with_paths: bool = False) -> Optional[LogEntry]:
        """Get commit metadata for a revision.

        Args:
            revision: Revision number
            with_paths: Include changed paths

        Returns:
            LogEntry or None if the revision has no log entry
        """

    @abstractmethod
    def move_working_copy_to(self, revision: int) -> None:
        """Update the working copy to a revision.

        Raises:
            UpdateFailed: If the backend rejects the update
        """

    def first_log_line(self, revision: int) -> str:
        """Get the first line of a revision's commit message.

        Default implementation reads the full log entry.
        Implementations can override for cheaper lookups.
        """
        entry = self.log_entry(revision)
        return entry.first_line if entry else ""
