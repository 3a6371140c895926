#!/usr/bin/env python3
"""Append-only bisect audit log.

The log is a shell script: an interpreter line followed by comments
describing each bound or skip change and the literal command lines that
reproduce the session.
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, Tuple


logger = logging.getLogger(__name__)

# Constants
SCRIPT_HEADER = "#!/bin/sh"


def command_lines(text: str) -> Iterator[Tuple[int, str]]:
    """Iterate over the command lines of a log.

    Blank lines, comments and the interpreter line are skipped.

    Args:
        text: Log contents

    Yields:
        (line_number, line) pairs, line numbers starting at 1
    """
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if line and not line.startswith("#"):
            yield number, line


class AuditLog:
    """Bisect log file handler.

    Attributes:
        path: Path of the log file
    """

    def __init__(self, path: str) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        """Check whether the log file exists."""
        return self.path.is_file()

    def append(self, lines: Iterable[str]) -> None:
        """Append lines, creating the file with its header on first write."""
        lines = list(lines)
        if not lines:
            return

        new_file = not self.path.exists()
        if new_file:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a") as f:
            if new_file:
                f.write(SCRIPT_HEADER + "\n")
            for line in lines:
                f.write(line + "\n")
        logger.debug(f"Appended {len(lines)} line(s) to {self.path}")

    def read(self) -> str:
        """Return the log contents (empty if there is no log)."""
        if not self.exists():
            return ""
        return self.path.read_text()

    def delete(self) -> None:
        """Remove the log file."""
        if self.exists():
            self.path.unlink()
            logger.debug(f"Removed {self.path}")
