#!/usr/bin/env python3
"""svbisect - Subversion Bisection CLI Tool.

Main command-line interface for bisecting the history of a Subversion
working copy.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from svbisect.config import BisectConfig, create_bisect_config
from svbisect.core.commands import (
    CommandContext,
    apply_command,
    summary_help,
)
from svbisect.core.effects import EffectRunner
from svbisect.core.resolver import RevisionResolver
from svbisect.exceptions import BisectError, InvalidArguments, UnknownCommand
from svbisect.oracle import SvnOracle
from svbisect.persistence import AuditLog, DatabaseError, StateManager


# Constants
DEFAULT_CONFIG_PATH = "svbisect.yaml"

# Configure logging
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(message)s")


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Without an explicit path the default file is read when present and
    built-in defaults are used otherwise.

    Args:
        config_path: Path to YAML configuration file, or None

    Returns:
        Configuration dictionary

    Raises:
        BisectError: If an explicitly named file is missing or invalid
    """
    path = Path(config_path or DEFAULT_CONFIG_PATH)

    if not path.exists():
        if config_path:
            raise BisectError(f"Config file not found: {config_path}")
        return {}

    try:
        with path.open() as f:
            config_dict = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise BisectError(f"Cannot read config file {path}: {exc}") from exc

    if config_dict is None:
        return {}
    if not isinstance(config_dict, dict):
        raise BisectError(f"Config file {path} must contain a mapping")

    logger.debug(f"Loaded configuration from {path}")
    return config_dict


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="svbisect",
        description="Bisect the history of a Subversion working copy",
        add_help=False,
    )
    parser.add_argument("-c", "--config", help="Config file path (default: svbisect.yaml if present)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("command", nargs="?", help="Bisect command (unambiguous prefixes accepted)")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Command arguments")
    return parser


def build_context(config: BisectConfig, cwd: Optional[str] = None) -> Tuple[CommandContext, EffectRunner]:
    """Bind the oracle, store and audit log to the current working copy.

    Args:
        config: Bisect configuration
        cwd: Directory to run in (defaults to the process working directory)

    Returns:
        Tuple of (command context, effect runner)

    Raises:
        BisectError: If cwd is not the top of a working copy
    """
    cwd = str(Path(cwd or Path.cwd()).resolve())
    oracle = SvnOracle(command=config.svn_command, cwd=cwd)
    root = oracle.working_copy_root()
    if Path(root).resolve() != Path(cwd):
        raise BisectError(
            f"{config.script_name} must be run from the top of a subversion "
            f"working copy directory tree ({root})"
        )

    state_dir = Path(root) / config.state_dir
    store = StateManager(str(state_dir / config.db_name))
    audit_log = AuditLog(str(state_dir / config.log_name))
    effects = EffectRunner(oracle, store, audit_log)

    ctx = CommandContext(
        config=config,
        oracle=oracle,
        resolver=RevisionResolver(oracle),
        working_copy_path=root,
        session=store.load(),
        audit_log=audit_log,
        store=store,
        effects=effects,
    )
    return ctx, effects


def run_command(config: BisectConfig, command: str, args: List[str]) -> int:
    """Apply one bisect command in the current working copy.

    Args:
        config: Bisect configuration
        command: Command name or prefix
        args: Command arguments

    Returns:
        Exit code
    """
    ctx, effects = build_context(config)
    try:
        result = apply_command(ctx, command, args)
        effects.execute(result.effects)
        return result.exit_code
    finally:
        effects.store.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    script_name = "svbisect"
    try:
        try:
            config = create_bisect_config(load_config(args.config))
        except ValueError as exc:
            raise BisectError(f"Invalid configuration: {exc}") from exc
        script_name = config.script_name

        command = "help" if args.command in ("-h", "--help") else args.command
        if command is None or (command == "help" and not args.args):
            print(summary_help(script_name))
            return 0

        # Per-command help needs the session for custom terms.
        return run_command(config, command, args.args)

    except InvalidArguments as exc:
        if exc.usage:
            print(exc.usage.rstrip(), file=sys.stderr)
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except UnknownCommand as exc:
        print(f"error: {exc}", file=sys.stderr)
        print(summary_help(script_name), file=sys.stderr)
        return 1
    except (BisectError, DatabaseError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130
    except Exception as exc:
        logger.error(f"Fatal error: {exc}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
