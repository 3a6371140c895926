"""Revision oracles for querying and updating version-control working copies."""

from svbisect.oracle.base import (
    SYMBOLIC_REVISIONS,
    LogEntry,
    OracleError,
    RevisionOracle,
    UpdateFailed,
)
from svbisect.oracle.svn import SvnOracle


__all__ = [
    # Base classes
    "RevisionOracle",
    "LogEntry",
    "SYMBOLIC_REVISIONS",
    "OracleError",
    "UpdateFailed",
    # Subversion implementation
    "SvnOracle",
]
