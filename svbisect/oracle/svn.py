#!/usr/bin/env python3
"""Subversion revision oracle.

Implements RevisionOracle by running the svn command line client and
parsing its --xml output.
"""

import logging
import subprocess
import xml.etree.ElementTree as ET
from typing import List, Optional, Sequence, Tuple

from svbisect.oracle.base import (
    SYMBOLIC_REVISIONS,
    LogEntry,
    OracleError,
    RevisionOracle,
    UpdateFailed,
)


logger = logging.getLogger(__name__)


def parse_log_entries(xml_text: str) -> List[LogEntry]:
    """Parse the output of 'svn log --xml'.

    Args:
        xml_text: XML document produced by svn log

    Returns:
        Log entries in document order (svn lists newest first for
        descending ranges)

    Raises:
        OracleError: If the document is not valid XML
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as exc:
        raise OracleError(f"Cannot parse svn log output: {exc}") from exc

    entries = []
    for node in root.iter("logentry"):
        msg = node.findtext("msg") or ""
        paths = [
            (path.get("action", ""), (path.text or "").strip())
            for path in node.iter("path")
        ]
        entries.append(
            LogEntry(
                revision=int(node.get("revision", "0")),
                author=node.findtext("author") or "",
                date=node.findtext("date") or "",
                message=msg.splitlines(),
                paths=paths,
            )
        )
    return entries


class SvnOracle(RevisionOracle):
    """Revision oracle backed by a Subversion working copy.

    Attributes:
        command: svn executable
        cwd: Working copy directory the commands run in
    """

    def __init__(self, command: str = "svn", cwd: str = ".") -> None:
        """Initialize the oracle.

        Args:
            command: svn executable
            cwd: Working copy directory
        """
        self.command = command
        self.cwd = cwd

    def _run_svn(self, args: Sequence[str]) -> Tuple[int, str, str]:
        """Run an svn subcommand.

        Args:
            args: Arguments after the svn executable

        Returns:
            Tuple of (return_code, stdout, stderr)
        """
        cmd = [self.command, *args]
        logger.debug(f"Executing: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd, cwd=self.cwd, capture_output=True, text=True, check=False
            )
        except OSError as exc:
            raise OracleError(f"Cannot run {self.command}: {exc}") from exc

        if result.returncode != 0:
            logger.debug(f"svn exited with {result.returncode}: {result.stderr.strip()}")
        return result.returncode, result.stdout, result.stderr

    def _log(self, args: Sequence[str]) -> List[LogEntry]:
        ret, stdout, stderr = self._run_svn(["log", "--xml", *args])
        if ret != 0:
            raise OracleError(f"svn log failed: {stderr.strip()}")
        return parse_log_entries(stdout)

    def _info(self) -> ET.Element:
        ret, stdout, stderr = self._run_svn(["info", "--xml", "."])
        if ret != 0:
            raise OracleError(f"Not a subversion working copy: {stderr.strip()}")
        try:
            entry = ET.fromstring(stdout).find("entry")
        except ET.ParseError as exc:
            raise OracleError(f"Cannot parse svn info output: {exc}") from exc
        if entry is None:
            raise OracleError("svn info returned no entry")
        return entry

    def resolve(self, token: str) -> Optional[int]:
        """Resolve a revision token against the working copy history.

        A revision that exists in the repository but is not on this working
        copy's line of history yields an empty log, hence None. For the
        symbolic keywords a range and limit are needed for svn to return
        the log entry.
        """
        if token.isdigit():
            rev_args = [f"--revision={token}"]
        elif token in SYMBOLIC_REVISIONS:
            rev_args = [f"--revision={token}:0", "--limit=1"]
        else:
            return None

        try:
            entries = self._log(["--quiet", *rev_args, "."])
        except OracleError as exc:
            logger.debug(f"Cannot resolve revision {token}: {exc}")
            return None

        return entries[0].revision if entries else None

    def history(self, newest: int, oldest: int) -> List[int]:
        """List revisions that changed the working copy path, newest first."""
        entries = self._log(["--quiet", f"--revision={newest}:{oldest}", "."])
        return [entry.revision for entry in entries]

    def current_revision(self) -> int:
        """Return the last changed revision of the working copy root."""
        entry = self._info()
        commit = entry.find("commit")
        revision = commit.get("revision") if commit is not None else entry.get("revision")
        if revision is None:
            raise OracleError("svn info did not report a revision")
        return int(revision)

    def head_revision(self) -> int:
        """Return the repository HEAD revision."""
        revision = self.resolve("HEAD")
        if revision is None:
            raise OracleError("Cannot determine HEAD revision of the working copy")
        return revision

    def oldest_revision(self) -> int:
        """Return the first revision in the working copy path's history."""
        entries = self._log(["--quiet", "--revision=1:HEAD", "--limit=1", "."])
        if not entries:
            raise OracleError("Working copy has no history")
        return entries[0].revision

    def working_copy_root(self) -> str:
        """Return the absolute path reported by svn info."""
        root = self._info().findtext("wc-info/wcroot-abspath")
        if not root:
            raise OracleError("svn info did not report the working copy root")
        return root

    def log_entry(self, revision: int, with_paths: bool = False) -> Optional[LogEntry]:
        """Fetch one log entry, optionally with its changed paths."""
        args = [f"--revision={revision}", "--limit=1"]
        if with_paths:
            args.append("--verbose")
        entries = self._log([*args, "."])
        return entries[0] if entries else None

    def move_working_copy_to(self, revision: int) -> None:
        """Run svn update to the given revision."""
        ret, _stdout, stderr = self._run_svn(["update", f"--revision={revision}"])
        if ret != 0:
            raise UpdateFailed(revision, stderr.strip())
        logger.debug(f"Working copy updated to revision {revision}")
