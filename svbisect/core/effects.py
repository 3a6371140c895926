#!/usr/bin/env python3
"""Effects returned by command handlers and the runner that performs them.

Handlers never write to the store, the audit log, the terminal or the
working copy themselves. They return a list of effects which EffectRunner
executes in order.
"""

import logging
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional, TextIO, Tuple, Union


if TYPE_CHECKING:
    from svbisect.oracle.base import RevisionOracle
    from svbisect.persistence.audit_log import AuditLog
    from svbisect.persistence.state_manager import StateManager

from svbisect.core.session import Session


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveSession:
    """Persist the session record."""

    session: Session


@dataclass(frozen=True)
class DeleteSession:
    """Remove the session record."""


@dataclass(frozen=True)
class AppendLog:
    """Append lines to the audit log."""

    lines: Tuple[str, ...]


@dataclass(frozen=True)
class DeleteLog:
    """Remove the audit log."""


@dataclass(frozen=True)
class Output:
    """Show text to the user."""

    text: str


@dataclass(frozen=True)
class MoveWorkingCopy:
    """Update the working copy to a revision."""

    revision: int


Effect = Union[SaveSession, DeleteSession, AppendLog, DeleteLog, Output, MoveWorkingCopy]


def append_log(*lines: str) -> AppendLog:
    """Build an AppendLog effect."""
    return AppendLog(tuple(lines))


class EffectRunner:
    """Executes effects against the store, audit log, terminal and oracle.

    Attributes:
        oracle: Revision oracle used to move the working copy
        store: Session state manager
        audit_log: Audit log
    """

    def __init__(
        self,
        oracle: "RevisionOracle",
        store: "StateManager",
        audit_log: "AuditLog",
        out: Optional[TextIO] = None,
    ) -> None:
        """Initialize the effect runner.

        Args:
            oracle: Revision oracle
            store: Session state manager
            audit_log: Audit log
            out: Stream for user output (defaults to stdout at write time)
        """
        self.oracle = oracle
        self.store = store
        self.audit_log = audit_log
        self._out = out

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def execute(self, effects: Iterable[Effect]) -> None:
        """Execute effects in order."""
        for effect in effects:
            self._execute_one(effect)

    def _execute_one(self, effect: Effect) -> None:
        if isinstance(effect, SaveSession):
            self.store.save(effect.session)
        elif isinstance(effect, DeleteSession):
            self.store.delete()
        elif isinstance(effect, AppendLog):
            self.audit_log.append(effect.lines)
        elif isinstance(effect, DeleteLog):
            self.audit_log.delete()
        elif isinstance(effect, Output):
            print(effect.text, file=self.out)
        elif isinstance(effect, MoveWorkingCopy):
            self._move_working_copy(effect.revision)
        else:
            raise TypeError(f"Unknown effect: {effect!r}")

    def _move_working_copy(self, revision: int) -> None:
        if revision == self.oracle.current_revision():
            logger.debug(f"Working copy already at revision {revision}")
            return

        msg1st = self.oracle.first_log_line(revision)
        print(f"Updating working copy: [{revision}] {msg1st}", file=self.out)
        self.oracle.move_working_copy_to(revision)
