"""Pytest configuration and fixtures for svbisect tests."""

import io
from typing import List, Optional

import pytest

from svbisect.config import BisectConfig
from svbisect.core.commands import CommandContext, CommandResult, apply_command
from svbisect.core.effects import EffectRunner
from svbisect.core.resolver import RevisionResolver
from svbisect.oracle.base import LogEntry, RevisionOracle, UpdateFailed
from svbisect.persistence import AuditLog, StateManager


HISTORY = [100, 95, 90, 85, 80, 75, 70]
WC_ROOT = "/work/trunk"


class FakeOracle(RevisionOracle):
    """In-memory oracle over a fixed linear history.

    Moves are recorded; with ``frozen`` set they are recorded but the
    working copy stays where it is.
    """

    def __init__(self, history: Optional[List[int]] = None, current: Optional[int] = None) -> None:
        self.revisions = list(history or HISTORY)
        self.current = current if current is not None else self.revisions[0]
        self.root = WC_ROOT
        self.moves: List[int] = []
        self.frozen = False
        self.fail_update = False

    def resolve(self, token):
        if token.isdigit():
            revision = int(token)
            return revision if revision in self.revisions else None
        if token == "HEAD":
            return self.revisions[0]
        if token in ("BASE", "COMMITTED"):
            return self.current
        if token == "PREV":
            older = [rev for rev in self.revisions if rev < self.current]
            return older[0] if older else None
        return None

    def history(self, newest, oldest):
        return [rev for rev in self.revisions if oldest <= rev <= newest]

    def current_revision(self):
        return self.current

    def head_revision(self):
        return self.revisions[0]

    def oldest_revision(self):
        return self.revisions[-1]

    def working_copy_root(self):
        return self.root

    def log_entry(self, revision, with_paths=False):
        if revision not in self.revisions:
            return None
        return LogEntry(
            revision=revision,
            author="alice",
            date="2024-03-01T10:00:00.000000Z",
            message=[f"change {revision}", "", "details"],
            paths=[("M", "/trunk/main.c")] if with_paths else [],
        )

    def move_working_copy_to(self, revision):
        if self.fail_update:
            raise UpdateFailed(revision, "svn: E155004: Working copy is locked")
        self.moves.append(revision)
        if not self.frozen:
            self.current = revision


class Bisect:
    """Applies commands the way the CLI does, against in-memory backends."""

    def __init__(self, oracle: FakeOracle, store: StateManager, audit_log: AuditLog, config: BisectConfig) -> None:
        self.oracle = oracle
        self.store = store
        self.audit_log = audit_log
        self.config = config
        self.out = io.StringIO()
        self.effects = EffectRunner(oracle, store, audit_log, out=self.out)

    def context(self) -> CommandContext:
        return CommandContext(
            config=self.config,
            oracle=self.oracle,
            resolver=RevisionResolver(self.oracle),
            working_copy_path=self.oracle.root,
            session=self.store.load(),
            audit_log=self.audit_log,
            store=self.store,
            effects=self.effects,
        )

    def __call__(self, command: str, *args: str) -> CommandResult:
        result = apply_command(self.context(), command, list(args))
        self.effects.execute(result.effects)
        return result

    @property
    def session(self):
        return self.store.load()

    @property
    def output(self) -> str:
        return self.out.getvalue()

    def log_text(self) -> str:
        return self.audit_log.read()


@pytest.fixture
def oracle():
    """Fake oracle over the default history, working copy at HEAD."""
    return FakeOracle()


@pytest.fixture
def config():
    return BisectConfig()


@pytest.fixture
def store(tmp_path):
    manager = StateManager(str(tmp_path / "state" / "svbisect.db"))
    yield manager
    manager.close()


@pytest.fixture
def audit_log(tmp_path):
    return AuditLog(str(tmp_path / "state" / "svbisect_log"))


@pytest.fixture
def bisect(oracle, store, audit_log, config):
    """Command applier bound to the fake oracle and tmp_path storage."""
    return Bisect(oracle, store, audit_log, config)
