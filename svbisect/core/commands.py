#!/usr/bin/env python3
"""Bisect command handlers and dispatch.

Each verb of the command surface is a small handler function registered in
HANDLERS. A handler receives the command context (with the current session)
and its already parsed and resolved arguments, and returns the next session
plus the effects to perform. apply_command() is the single entry point used
for live commands, the automation runner and replay.
"""

import argparse
import logging
import re
import shlex
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence, Tuple


if TYPE_CHECKING:
    from svbisect.core.effects import EffectRunner
    from svbisect.persistence.state_manager import StateManager

from svbisect.config.config import BisectConfig
from svbisect.core.effects import (
    DeleteLog,
    DeleteSession,
    Effect,
    MoveWorkingCopy,
    Output,
    SaveSession,
    append_log,
)
from svbisect.core.engine import (
    StepKind,
    clear_skip,
    engine_state,
    narrow,
    set_bad,
    set_good,
    set_skip,
)
from svbisect.core.resolver import RevisionResolver, parse_revision_token
from svbisect.core.session import (
    BAD,
    GOOD,
    Session,
    bad_term,
    good_term,
    is_ready,
    newest_first,
    waiting_status,
)
from svbisect.exceptions import (
    AmbiguousCommand,
    BisectError,
    InvalidArguments,
    InvalidBoundOrdering,
    NoActiveSession,
    ReplayError,
    SessionInProgress,
    SessionPathMismatch,
    UnknownCommand,
)
from svbisect.oracle.base import RevisionOracle
from svbisect.persistence.audit_log import AuditLog, command_lines


logger = logging.getLogger(__name__)

# Constants
BUILTIN_COMMANDS = (
    "start",
    BAD,
    GOOD,
    "terms",
    "skip",
    "unskip",
    "run",
    "log",
    "replay",
    "reset",
    "status",
    "help",
)
REPLAYABLE_COMMANDS = ("start", BAD, GOOD, "skip", "unskip")
LOG_RULE = "-" * 72

_COMMAND_RE = re.compile(r"^[a-zA-Z][-a-zA-Z0-9_]*$")
_TERM_RE = re.compile(r"^[A-Za-z][-_A-Za-z]*$")


@dataclass
class CommandContext:
    """Everything a command handler may consult.

    Attributes:
        config: Bisect configuration
        oracle: Revision oracle (queries only; moves go through effects)
        resolver: Revision resolver bound to the oracle
        working_copy_path: Absolute working copy root
        session: Current session, None when there is none
        audit_log: Audit log (read by 'log')
        store: Session store, needed by 'run' to reload the session
        effects: Effect runner, needed by 'run' which executes as it goes
    """

    config: BisectConfig
    oracle: RevisionOracle
    resolver: RevisionResolver
    working_copy_path: str
    session: Optional[Session]
    audit_log: AuditLog
    store: Optional["StateManager"] = None
    effects: Optional["EffectRunner"] = None


@dataclass
class CommandResult:
    """Outcome of a command handler.

    Attributes:
        session: Session after the command (None when there is none)
        effects: Effects to execute, in order
        concluded: True when narrowing cannot continue
        exit_code: Process exit code for the CLI
    """

    session: Optional[Session]
    effects: List[Effect] = field(default_factory=list)
    concluded: bool = False
    exit_code: int = 0


# == Command matching ===================================================


def match_command(name: str, session: Optional[Session]) -> str:
    """Resolve a command name or unambiguous prefix.

    Custom term names of the session are matched too and map to the
    built-in 'bad' and 'good' commands.

    Args:
        name: Command name or prefix typed by the user
        session: Current session (for custom terms)

    Returns:
        Built-in command name

    Raises:
        UnknownCommand: If nothing matches
        AmbiguousCommand: If more than one name matches
    """
    names = list(BUILTIN_COMMANDS)
    if session is not None:
        names += [term for term in (session.term_bad, session.term_good) if term]

    if not _COMMAND_RE.match(name):
        raise UnknownCommand(name)

    matches = [candidate for candidate in names if candidate.startswith(name)]
    if not matches:
        raise UnknownCommand(name)
    if len(matches) > 1:
        raise AmbiguousCommand(name, matches)

    command = matches[0]
    if session is not None and command == session.term_bad:
        return BAD
    if session is not None and command == session.term_good:
        return GOOD
    return command


def _collides(first: str, second: str) -> bool:
    return first.startswith(second) or second.startswith(first)


def parse_term(text: str) -> str:
    """Validate a custom term name (argparse type).

    Raises:
        argparse.ArgumentTypeError: If the name is malformed or masks a
            built-in command
    """
    if not _TERM_RE.match(text):
        raise argparse.ArgumentTypeError(
            f"<term> must start with a letter and contain only letters, '-', or '_': {text!r}"
        )
    clashes = [name for name in BUILTIN_COMMANDS if _collides(text, name)]
    if clashes:
        raise argparse.ArgumentTypeError(
            f"<term> {text!r} cannot mask a built in bisect command name ({', '.join(clashes)})"
        )
    return text


def _argument_type(convert: Callable[[str], Any]) -> Callable[[str], Any]:
    """Wrap a converter so its ValueError text reaches the usage error."""

    def wrapper(text: str) -> Any:
        try:
            return convert(text)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    return wrapper


def summary_help(script_name: str) -> str:
    """Return the list of bisect commands."""
    sv = script_name
    return "\n".join(
        [
            "Available bisect commands:",
            f"{sv} start       Start a bisect session in the current subversion",
            "                      working copy directory",
            f"{sv} bad         Mark a revision as bad  (It contains the bug)",
            f"{sv} good        Mark a revision as good  (It does not contain the bug)",
            f"{sv} terms       Show the currently defined terms for good/bad",
            f"{sv} skip        Skip a revision.  It will no longer be considered",
            f"{sv} unskip      Reinstate a previously skipped revision",
            f"{sv} run         Automate the bisect session by running a script",
            "                      for each tested revision",
            f"{sv} log         Show the bisect log",
            f"{sv} replay      Replay the bisect session from a log file",
            f"{sv} reset       Clean up after a bisect session returning the working",
            "                      copy to its original revision",
            f"{sv} status      Show the state of the bisect session",
            "",
            f"Type '{sv} help <command>' for details on a specific command",
        ]
    )


# == Argument parsing ===================================================


class CommandParser(argparse.ArgumentParser):
    """ArgumentParser that raises InvalidArguments instead of exiting."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise InvalidArguments(message, usage=self.format_usage())


def build_parser(
    command: str,
    script_name: str,
    resolver: Optional[RevisionResolver],
    session: Optional[Session] = None,
) -> CommandParser:
    """Build the argument parser for one command.

    Revision arguments are resolved while parsing when a resolver is given;
    without one (for help output) only their syntax is checked.

    Args:
        command: Built-in command name
        script_name: Program name for usage lines
        resolver: Revision resolver, or None
        session: Current session (for custom term names in usage)

    Returns:
        CommandParser
    """
    revision = _argument_type(resolver.resolve if resolver else parse_revision_token)
    revision_range = _argument_type(resolver.resolve_range) if resolver else str
    verb = {BAD: bad_term(session), GOOD: good_term(session)}.get(command, command)

    parser = CommandParser(
        prog=f"{script_name} {verb}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    if command == "start":
        parser.add_argument("--bad", type=revision, metavar="<revision>",
                            help="Specify the earliest revision that contains the bug")
        parser.add_argument("--good", type=revision, metavar="<revision>",
                            help="Specify the latest revision that does not contain the bug")
        parser.add_argument("--term-bad", type=parse_term, metavar="<term>",
                            help="Specify an alternate name for the 'bad' subcommand")
        parser.add_argument("--term-good", type=parse_term, metavar="<term>",
                            help="Specify an alternate name for the 'good' subcommand")
        parser.epilog = (
            f"If you omit a bad revision, you must do so later with '{script_name} bad <rev>'\n"
            f"If you omit a good revision, you must do so later with '{script_name} good <rev>'"
        )
    elif command in (BAD, GOOD):
        parser.add_argument("revision", nargs="?", type=revision, metavar="<revision>")
        parser.epilog = (
            f"Mark a revision as '{verb}'\n"
            "The current working copy revision is used by default"
        )
    elif command == "terms":
        group = parser.add_mutually_exclusive_group()
        group.add_argument("--term-good", action="store_true",
                           help="Show only the term used for good revisions")
        group.add_argument("--term-bad", action="store_true",
                           help="Show only the term used for bad revisions")
    elif command in ("skip", "unskip"):
        parser.add_argument("revisions", nargs="*", type=revision_range,
                            metavar="<revision>|<revision>:<revision>")
        parser.epilog = "The current working copy revision is used by default"
    elif command == "run":
        parser.add_argument("command", nargs=argparse.REMAINDER, metavar="<cmd> [<arg>...]")
        parser.epilog = (
            "Exit code 0 marks the revision good, 125 skips it, 1-127 marks it bad.\n"
            "Any other exit code aborts the run."
        )
    elif command == "replay":
        parser.add_argument("file", metavar="<logfile>")
    elif command == "reset":
        parser.add_argument("--no-update", dest="update", action="store_false",
                            help="Keep the working copy at its current revision")
        parser.add_argument("revision", nargs="?", type=revision, metavar="<revision>")
        parser.epilog = (
            "The default is to update your working copy to its original revision before the bisect\n"
            "If a <revision> is specified, then the working copy will be updated to it instead"
        )
    elif command == "help":
        parser.add_argument("command", nargs="?", metavar="<command>")

    return parser


# == Helpers ============================================================


def require_session(ctx: CommandContext, allow_foreign: bool = False) -> Session:
    """Return the current session or raise.

    Raises:
        NoActiveSession: If there is no session
        SessionPathMismatch: If the session belongs to another path
    """
    session = ctx.session
    if session is None:
        raise NoActiveSession(
            f"You must first start the bisect process with '{ctx.config.script_name} start'"
        )
    if not allow_foreign and session.working_copy_path != ctx.working_copy_path:
        raise SessionPathMismatch(session.working_copy_path, ctx.working_copy_path)
    return session


def _command_line(ctx: CommandContext, verb: str, args: Sequence[str]) -> str:
    return " ".join(shlex.quote(part) for part in [ctx.config.script_name, verb, *args])


def _revision_comment(ctx: CommandContext, term: str, revision: int) -> str:
    return f"# {term}: [{revision}] {ctx.oracle.first_log_line(revision)}".rstrip()


def _range_arg(low: int, high: int) -> str:
    return str(low) if low == high else f"{low}:{high}"


def _steps_text(steps: int) -> str:
    return "1 step" if steps == 1 else f"{steps} steps"


def _status_effects(session: Session) -> List[Effect]:
    status = waiting_status(session)
    if status is None:
        return []
    return [Output(status), append_log(f"# {status}")]


def _format_commit(ctx: CommandContext, revision: int) -> List[str]:
    entry = ctx.oracle.log_entry(revision, with_paths=True)
    if entry is None:
        return []

    lines = [LOG_RULE, f"r{entry.revision} | {entry.author} | {entry.date}"]
    if entry.paths:
        lines.append("Changed paths:")
        lines += [f"   {action} {path}" for action, path in entry.paths]
    lines.append("")
    lines += entry.message
    lines.append(LOG_RULE)
    return lines


def narrowing_effects(ctx: CommandContext, session: Session) -> Tuple[List[Effect], bool]:
    """Run one narrowing step for a ready session.

    Returns:
        Tuple of (effects, concluded)
    """
    extant = ctx.oracle.history(session.bad_revision, session.good_revision)
    result = narrow(session, extant)
    term = bad_term(session)

    if result.kind is StepKind.BISECTING:
        logger.debug(f"Next revision to test: {result.next_revision}")
        return [
            Output(
                f"Bisecting: {result.remaining} revisions left to test after this "
                f"(roughly {_steps_text(result.steps)})"
            ),
            MoveWorkingCopy(result.next_revision),
        ], False

    if result.kind is StepKind.AMBIGUOUS:
        lines = [
            "There are only skipped revisions left to test.",
            f"The first '{term}' revision could be any of:",
            *[str(rev) for rev in result.culprits],
            "We cannot bisect more!",
        ]
        return [Output("\n".join(lines))], True

    lines = [f"The first '{term}' revision is: {session.bad_revision}"]
    lines += _format_commit(ctx, session.bad_revision)
    return [Output("\n".join(lines))], True


def _after_update(ctx: CommandContext, session: Session) -> Tuple[List[Effect], bool]:
    if is_ready(session):
        return narrowing_effects(ctx, session)
    return _status_effects(session), False


def _expand(ctx: CommandContext, ranges: Sequence[Tuple[int, int]]) -> List[int]:
    revisions = set()
    for low, high in ranges:
        revisions.update(ctx.resolver.expand(low, high))
    return newest_first(revisions)


def _default_ranges(ctx: CommandContext, ranges: Sequence[Tuple[int, int]]) -> List[Tuple[int, int]]:
    if ranges:
        return list(ranges)
    current = ctx.oracle.current_revision()
    return [(current, current)]


# == Handlers ===========================================================


def cmd_start(ctx: CommandContext, opts: argparse.Namespace) -> CommandResult:
    """Start a new bisect session."""
    if ctx.session is not None:
        lines = ["bisect already in progress"]
        status = waiting_status(ctx.session)
        if status:
            lines.append(status)
        lines.append(f"Type '{ctx.config.script_name} reset' to reset your working copy")
        raise SessionInProgress("\n".join(lines))

    bad, good = opts.bad, opts.good
    if bad is not None and good is not None:
        if bad == good:
            raise InvalidBoundOrdering("The 'bad' and 'good' revisions cannot be the same")
        if bad < good:
            raise InvalidBoundOrdering("The 'good' revision must be an ancestor of the 'bad' revision")

    if opts.term_bad and opts.term_good and _collides(opts.term_bad, opts.term_good):
        raise InvalidArguments(
            f"The terms '{opts.term_bad}' and '{opts.term_good}' cannot be told apart"
        )

    session = Session(
        working_copy_path=ctx.working_copy_path,
        original_revision=ctx.oracle.current_revision(),
        head_revision=ctx.oracle.head_revision(),
        first_revision=ctx.oracle.oldest_revision(),
        bad_revision=bad,
        good_revision=good,
        term_bad=opts.term_bad,
        term_good=opts.term_good,
    )
    logger.info(f"Starting bisect session in {ctx.working_copy_path}")

    args = []
    for option, value in (("bad", bad), ("good", good),
                          ("term-bad", opts.term_bad), ("term-good", opts.term_good)):
        if value is not None:
            args.append(f"--{option}={value}")

    effects: List[Effect] = [SaveSession(session)]
    if bad is not None:
        effects.append(append_log(_revision_comment(ctx, bad_term(session), bad)))
    if good is not None:
        effects.append(append_log(_revision_comment(ctx, good_term(session), good)))
    effects.append(append_log(_command_line(ctx, "start", args)))

    # Every log line is written before the working copy moves.
    more, concluded = _after_update(ctx, session)
    effects += more
    return CommandResult(session, effects, concluded)


def _mark(ctx: CommandContext, opts: argparse.Namespace, which: str) -> CommandResult:
    session = require_session(ctx)
    revision = opts.revision if opts.revision is not None else ctx.oracle.current_revision()
    term = bad_term(session) if which == BAD else good_term(session)

    try:
        updated = set_bad(session, revision) if which == BAD else set_good(session, revision)
    except InvalidBoundOrdering as exc:
        logger.warning(f"Ignoring '{term} {revision}': {exc}")
        return CommandResult(session, [Output(str(exc))])

    effects: List[Effect] = [
        SaveSession(updated),
        append_log(
            _revision_comment(ctx, term, revision),
            _command_line(ctx, term, [str(revision)]),
        ),
    ]
    more, concluded = _after_update(ctx, updated)
    effects += more
    return CommandResult(updated, effects, concluded)


def cmd_bad(ctx: CommandContext, opts: argparse.Namespace) -> CommandResult:
    """Mark a revision as bad."""
    return _mark(ctx, opts, BAD)


def cmd_good(ctx: CommandContext, opts: argparse.Namespace) -> CommandResult:
    """Mark a revision as good."""
    return _mark(ctx, opts, GOOD)


def cmd_terms(ctx: CommandContext, opts: argparse.Namespace) -> CommandResult:
    """Show the terms in use for the old and new states."""
    session = require_session(ctx)
    if opts.term_good:
        text = good_term(session)
    elif opts.term_bad:
        text = bad_term(session)
    else:
        text = (
            f"Your current terms are {good_term(session)} for the old state\n"
            f"and {bad_term(session)} for the new state."
        )
    return CommandResult(session, [Output(text)])


def cmd_skip(ctx: CommandContext, opts: argparse.Namespace) -> CommandResult:
    """Exclude revisions from testing.

    Bound revisions are never skipped. Skipping revisions that are already
    skipped neither saves the session nor writes to the log.
    """
    session = require_session(ctx)
    ranges = _default_ranges(ctx, opts.revisions)
    revisions = _expand(ctx, ranges)

    bounds = {session.bad_revision, session.good_revision}
    effects: List[Effect] = [
        Output(f"Revision {rev} is a bisect bound and cannot be skipped")
        for rev in revisions
        if rev in bounds
    ]
    revisions = [rev for rev in revisions if rev not in bounds]

    updated = set_skip(session, revisions)
    added = newest_first(updated.skipped - session.skipped)
    if added:
        args = [_range_arg(low, high) for low, high in ranges]
        effects.append(SaveSession(updated))
        effects.append(append_log(
            *[_revision_comment(ctx, "skip", rev) for rev in added],
            _command_line(ctx, "skip", args),
        ))

    concluded = False
    if is_ready(updated):
        more, concluded = narrowing_effects(ctx, updated)
        effects += more
    return CommandResult(updated, effects, concluded)


def cmd_unskip(ctx: CommandContext, opts: argparse.Namespace) -> CommandResult:
    """Reinstate previously skipped revisions."""
    session = require_session(ctx)
    ranges = _default_ranges(ctx, opts.revisions)
    revisions = _expand(ctx, ranges)

    updated = clear_skip(session, revisions)
    changed = updated.skipped != session.skipped
    effects: List[Effect] = []
    if changed:
        args = [_range_arg(low, high) for low, high in ranges]
        effects.append(SaveSession(updated))
        effects.append(append_log(_command_line(ctx, "unskip", args)))

    concluded = False
    if is_ready(updated):
        more, concluded = narrowing_effects(ctx, updated)
        effects += more
    return CommandResult(updated, effects, concluded)


def cmd_run(ctx: CommandContext, opts: argparse.Namespace) -> CommandResult:
    """Drive an external test command until the session concludes.

    Unlike the other handlers this one executes effects as it goes, one
    narrowing step per test run.
    """
    from svbisect.core.runner import AutomationRunner

    if not opts.command:
        raise InvalidArguments("run requires a command to execute")
    if ctx.store is None or ctx.effects is None:
        raise BisectError("run needs a session store and an effect runner")

    require_session(ctx)
    runner = AutomationRunner(ctx, ctx.store, ctx.effects)
    final = runner.run(opts.command)
    return CommandResult(final.session, [], final.concluded)


def cmd_log(ctx: CommandContext, opts: argparse.Namespace) -> CommandResult:
    """Print the audit log of the session."""
    session = require_session(ctx)
    return CommandResult(session, [Output(ctx.audit_log.read().rstrip("\n"))])


def cmd_replay(ctx: CommandContext, opts: argparse.Namespace) -> CommandResult:
    """Rebuild a session from a bisect log.

    The log's command lines are folded through apply_command() starting from
    no session. Nothing is executed until every line has been applied; then
    all log lines are written, the final session is saved, and only the last
    command's output and working copy move are performed.
    """
    if ctx.session is not None:
        raise SessionInProgress(
            f"A bisect session is already in progress. "
            f"Type '{ctx.config.script_name} reset' first"
        )

    try:
        text = Path(opts.file).read_text()
    except OSError as exc:
        raise BisectError(f"Cannot read bisect log {opts.file}: {exc}") from exc

    session: Optional[Session] = None
    results: List[CommandResult] = []
    for number, line in command_lines(text):
        try:
            argv = shlex.split(line)
        except ValueError as exc:
            raise ReplayError(number, line, str(exc)) from exc

        if len(argv) < 2 or Path(argv[0]).name != ctx.config.script_name:
            raise ReplayError(number, line, "not a bisect command")

        step = replace(ctx, session=session)
        try:
            command = match_command(argv[1], session)
            if command not in REPLAYABLE_COMMANDS:
                raise ReplayError(number, line, f"'{command}' cannot be replayed")
            result = apply_command(step, argv[1], argv[2:])
        except ReplayError:
            raise
        except BisectError as exc:
            raise ReplayError(number, line, str(exc)) from exc

        session = result.session
        results.append(result)

    if not results or session is None:
        raise BisectError(f"No bisect commands found in {opts.file}")

    effects: List[Effect] = [
        effect
        for result in results[:-1]
        for effect in result.effects
        if not isinstance(effect, (SaveSession, MoveWorkingCopy, Output))
    ]
    effects.append(SaveSession(session))
    effects += [e for e in results[-1].effects if not isinstance(e, SaveSession)]
    logger.info(f"Replayed {len(results)} bisect commands from {opts.file}")
    return CommandResult(session, effects, results[-1].concluded)


def cmd_reset(ctx: CommandContext, opts: argparse.Namespace) -> CommandResult:
    """End the session, restoring or moving the working copy."""
    session = require_session(ctx, allow_foreign=True)
    effects: List[Effect] = []
    if opts.update:
        target = opts.revision if opts.revision is not None else session.original_revision
        effects.append(MoveWorkingCopy(target))
    effects += [DeleteSession(), DeleteLog()]
    return CommandResult(None, effects)


def cmd_status(ctx: CommandContext, opts: argparse.Namespace) -> CommandResult:
    """Describe the session and its next step."""
    session = require_session(ctx)

    lines = [
        f"Working copy:      {session.working_copy_path}",
        f"Original revision: {session.original_revision}",
        f"History:           {session.head_revision} .. {session.first_revision}",
        f"{bad_term(session).capitalize() + ' revision:':<19}{_or_none(session.bad_revision)}",
        f"{good_term(session).capitalize() + ' revision:':<19}{_or_none(session.good_revision)}",
        f"Skipped:           {' '.join(map(str, newest_first(session.skipped))) or 'none'}",
    ]

    concluded = False
    if is_ready(session):
        extant = ctx.oracle.history(session.bad_revision, session.good_revision)
        result = narrow(session, extant)
        concluded = result.concluded
        if result.kind is StepKind.BISECTING:
            lines.append(f"Next revision:     {result.next_revision} ({result.remaining} left)")
        else:
            lines.append(f"First '{bad_term(session)}':  {' '.join(map(str, result.culprits))}")
    else:
        lines.append(waiting_status(session) or "")

    lines.insert(0, f"State:             {engine_state(session, concluded).value}")
    return CommandResult(session, [Output("\n".join(lines))], concluded)


def _or_none(value: Optional[int]) -> str:
    return "none" if value is None else str(value)


def cmd_help(ctx: CommandContext, opts: argparse.Namespace) -> CommandResult:
    """Print the command summary or one command's help."""
    return CommandResult(ctx.session, [Output(command_help(ctx.config.script_name, opts.command, ctx.session))])


def command_help(script_name: str, name: Optional[str], session: Optional[Session] = None) -> str:
    """Return the general summary or one command's help text."""
    if not name:
        return summary_help(script_name)
    command = match_command(name, session)
    return build_parser(command, script_name, None, session).format_help()


HANDLERS: Dict[str, Callable[[CommandContext, argparse.Namespace], CommandResult]] = {
    "start": cmd_start,
    BAD: cmd_bad,
    GOOD: cmd_good,
    "terms": cmd_terms,
    "skip": cmd_skip,
    "unskip": cmd_unskip,
    "run": cmd_run,
    "log": cmd_log,
    "replay": cmd_replay,
    "reset": cmd_reset,
    "status": cmd_status,
    "help": cmd_help,
}


def apply_command(ctx: CommandContext, name: str, argv: Sequence[str]) -> CommandResult:
    """Match, parse and apply one bisect command.

    Argument resolution completes before the handler runs, so a bad
    revision argument never produces a partial update.

    Args:
        ctx: Command context holding the current session
        name: Command name or prefix (custom terms allowed)
        argv: Arguments after the command name

    Returns:
        CommandResult from the handler
    """
    command = match_command(name, ctx.session)
    parser = build_parser(command, ctx.config.script_name, ctx.resolver, ctx.session)
    opts = parser.parse_args(list(argv))
    logger.debug(f"Applying '{command}' with {vars(opts)}")
    return HANDLERS[command](ctx, opts)
