#!/usr/bin/env python3
"""Automated bisection driven by an external test command.

Runs the test command against the current working copy revision, turns its
exit code into a verdict and applies that verdict through the same command
path a user would take, until the session concludes.
"""

import logging
import shlex
import subprocess
from dataclasses import replace
from enum import Enum
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

from svbisect.core.session import BAD, GOOD, is_ready, waiting_status
from svbisect.exceptions import (
    AutomationAbort,
    AutomationStuck,
    BisectError,
    SessionNotReady,
)


if TYPE_CHECKING:
    from svbisect.core.commands import CommandContext, CommandResult
    from svbisect.core.effects import EffectRunner
    from svbisect.persistence.state_manager import StateManager

logger = logging.getLogger(__name__)

# Exit code conventions of the test command
EXIT_GOOD = 0
EXIT_SKIP = 125
EXIT_BAD_MAX = 127


class Verdict(Enum):
    """Test verdict for one revision."""

    GOOD = GOOD
    BAD = BAD
    SKIP = "skip"


def classify_exit_code(exit_code: int) -> Optional[Verdict]:
    """Map a test command exit code to a verdict.

    Args:
        exit_code: Exit code (negative when killed by a signal)

    Returns:
        Verdict, or None when the code must abort the run
    """
    if exit_code == EXIT_GOOD:
        return Verdict.GOOD
    if exit_code == EXIT_SKIP:
        return Verdict.SKIP
    if 0 < exit_code <= EXIT_BAD_MAX:
        return Verdict.BAD
    return None


def run_test_command(argv: Sequence[str]) -> int:
    """Run the test command in the foreground and return its exit code.

    Raises:
        BisectError: If the command cannot be started
    """
    try:
        return subprocess.run(list(argv), check=False).returncode
    except OSError as exc:
        raise BisectError(f"Cannot run '{shlex.join(argv)}': {exc}") from exc


class AutomationRunner:
    """Drives a bisect session with a test command.

    Attributes:
        ctx: Command context used as the template for every step
        store: Session store, reloaded before every step
        effects: Effect runner executing each step's effects
    """

    def __init__(
        self,
        ctx: "CommandContext",
        store: "StateManager",
        effects: "EffectRunner",
        execute: Optional[Callable[[Sequence[str]], int]] = None,
    ) -> None:
        """Initialize the runner.

        Args:
            ctx: Command context
            store: Session store
            effects: Effect runner
            execute: Runs the test command and returns its exit code
                (defaults to run_test_command)
        """
        self.ctx = ctx
        self.store = store
        self.effects = effects
        self.execute = execute or run_test_command

    def run(self, argv: Sequence[str]) -> "CommandResult":
        """Run until the session concludes.

        Args:
            argv: Test command and its arguments

        Returns:
            CommandResult of the concluding step

        Raises:
            SessionNotReady: If a bound is missing
            AutomationAbort: If the command exits with an aborting code
            AutomationStuck: If the same revision keeps being tested or the
                iteration limit is reached
        """
        from svbisect.core.commands import apply_command, require_session

        command = shlex.join(argv)
        max_iterations = self.ctx.config.max_iterations
        max_same = self.ctx.config.max_same_revision

        previous: Optional[int] = None
        same_count = 0
        history: List[int] = []

        for iteration in range(1, max_iterations + 1):
            ctx = replace(self.ctx, session=self.store.load())
            session = require_session(ctx)
            if not is_ready(session):
                raise SessionNotReady(
                    f"{waiting_status(session)}\n"
                    f"'{ctx.config.script_name} run' needs both bounds to be set"
                )

            revision = ctx.oracle.current_revision()
            if revision == previous:
                same_count += 1
                logger.warning(
                    f"Still on same revision {revision} (attempt {same_count}/{max_same})"
                )
                if same_count >= max_same:
                    raise AutomationStuck(
                        f"Revision {revision} was tested {same_count + 1} times in a row. "
                        f"Stopping bisection."
                    )
            else:
                same_count = 0
                previous = revision

            logger.info(f"=== Iteration {iteration}: testing revision {revision} ===")
            print(f"running {command}", file=self.effects.out)
            exit_code = self.execute(argv)
            logger.info(f"Command completed (exit code: {exit_code})")

            verdict = classify_exit_code(exit_code)
            if verdict is None:
                raise AutomationAbort(command, exit_code)
            history.append(revision)

            result = apply_command(ctx, verdict.value, [str(revision)])
            self.effects.execute(result.effects)
            if result.concluded:
                logger.info(f"Bisection concluded after {iteration} test run(s): {history}")
                return result

        raise AutomationStuck(
            f"Exceeded {max_iterations} iterations. Bisection may be stuck. Stopping."
        )
