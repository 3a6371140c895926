#!/usr/bin/env python3
"""Configuration classes for working copy bisection.

This module contains the configuration dataclass used throughout svbisect
and the helper that builds it from a parsed YAML document.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


# Constants
DEFAULT_SCRIPT_NAME = "svbisect"
DEFAULT_STATE_DIR = ".svn/tmp"
DEFAULT_DB_NAME = "svbisect.db"
DEFAULT_LOG_NAME = "svbisect_log"


@dataclass
class BisectConfig:
    """Bisection configuration.

    Attributes:
        svn_command: Subversion client executable
        state_dir: Directory for the session database and audit log, relative
            to the working copy root unless absolute
        db_name: File name of the SQLite session database
        log_name: File name of the audit log
        script_name: Program name written into audit log command lines
        max_iterations: Safety limit for 'run' iterations
        max_same_revision: Abort 'run' after testing one revision this many
            times in a row
    """

    svn_command: str = "svn"
    state_dir: str = DEFAULT_STATE_DIR
    db_name: str = DEFAULT_DB_NAME
    log_name: str = DEFAULT_LOG_NAME
    script_name: str = DEFAULT_SCRIPT_NAME
    max_iterations: int = 1000
    max_same_revision: int = 3


def create_bisect_config(config_dict: Optional[Dict[str, Any]]) -> BisectConfig:
    """Create BisectConfig from a configuration dictionary.

    Missing sections and keys fall back to the dataclass defaults.

    Args:
        config_dict: Configuration dictionary from YAML (None for defaults)

    Returns:
        BisectConfig object

    Raises:
        ValueError: If a numeric limit is not a positive integer
    """
    config_dict = config_dict or {}
    svn_config = config_dict.get("svn") or {}
    state_config = config_dict.get("state") or {}
    run_config = config_dict.get("run") or {}

    config = BisectConfig(
        svn_command=svn_config.get("command", "svn"),
        state_dir=state_config.get("dir", DEFAULT_STATE_DIR),
        db_name=state_config.get("database", DEFAULT_DB_NAME),
        log_name=state_config.get("log", DEFAULT_LOG_NAME),
        script_name=config_dict.get("script_name", DEFAULT_SCRIPT_NAME),
        max_iterations=run_config.get("max_iterations", 1000),
        max_same_revision=run_config.get("max_same_revision", 3),
    )

    for name in ("max_iterations", "max_same_revision"):
        value = getattr(config, name)
        if not isinstance(value, int) or value < 1:
            raise ValueError(f"run.{name} must be a positive integer, got {value!r}")

    return config
