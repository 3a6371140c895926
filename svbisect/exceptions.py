#!/usr/bin/env python3
"""Exceptions raised by bisect sessions and commands."""

from typing import Iterable, Optional


class BisectError(Exception):
    """Base exception for bisect related errors."""


class UnresolvableRevision(BisectError):
    """Revision token does not map to a revision in the working copy history."""

    def __init__(self, token: str) -> None:
        super().__init__(f"{token}: this revision is not part of the working copy history")
        self.token = token


class InvalidBoundOrdering(BisectError):
    """New bad/good bound would not keep bad strictly newer than good."""


class NoActiveSession(BisectError):
    """Command requires a session that does not exist."""


class SessionInProgress(BisectError):
    """A session already exists where none is allowed."""


class SessionNotReady(BisectError):
    """Command requires both a bad and a good revision."""


class SessionPathMismatch(BisectError):
    """Stored session is bound to a different working copy path."""

    def __init__(self, session_path: str, working_copy_path: str) -> None:
        super().__init__(
            f"The bisect session belongs to {session_path}, "
            f"not to {working_copy_path}"
        )
        self.session_path = session_path
        self.working_copy_path = working_copy_path


class UnknownCommand(BisectError):
    """No command name matches the given prefix."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown bisect command '{name}'")
        self.name = name


class AmbiguousCommand(BisectError):
    """More than one command name matches the given prefix."""

    def __init__(self, name: str, candidates: Iterable[str]) -> None:
        self.name = name
        self.candidates = list(candidates)
        super().__init__(
            f"bisect command '{name}' is ambiguous.  ({', '.join(self.candidates)})"
        )


class InvalidArguments(BisectError):
    """Command line arguments for a bisect command are invalid."""

    def __init__(self, message: str, usage: Optional[str] = None) -> None:
        super().__init__(message)
        self.usage = usage


class ReplayError(BisectError):
    """A bisect log line cannot be replayed."""

    def __init__(self, line_number: int, line: str, reason: str) -> None:
        super().__init__(f"line {line_number}: {reason}: {line}")
        self.line_number = line_number
        self.line = line


class AutomationAbort(BisectError):
    """Automated test command exited with a code that stops the run."""

    def __init__(self, command: str, exit_code: int) -> None:
        super().__init__(
            f"bisect run failed: exit code {exit_code} from '{command}' is < 0 or >= 128"
        )
        self.command = command
        self.exit_code = exit_code


class AutomationStuck(BisectError):
    """Automated run keeps testing the same revision without progress."""
