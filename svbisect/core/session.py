#!/usr/bin/env python3
"""Bisect session data model.

A Session is a plain immutable value. All narrowing logic lives in
svbisect.core.engine; this module only holds the data, a few derived views
of it, and the schema-versioned document encoding used by the store.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional


# Constants
SCHEMA_VERSION = 1
BAD = "bad"
GOOD = "good"


@dataclass(frozen=True)
class Session:
    """State of one in-progress bisect investigation.

    Attributes:
        working_copy_path: Absolute working copy root the session is bound to
        original_revision: Working copy revision when the session began
        head_revision: Newest revision reachable when the session began
        first_revision: Oldest revision reachable when the session began
        bad_revision: Most recent revision confirmed to have the defect
        good_revision: Oldest revision confirmed not to have the defect
        skipped: Revisions excluded from testing
        term_bad: Custom name for the 'bad' command
        term_good: Custom name for the 'good' command
    """

    working_copy_path: str
    original_revision: int
    head_revision: int
    first_revision: int
    bad_revision: Optional[int] = None
    good_revision: Optional[int] = None
    skipped: FrozenSet[int] = field(default_factory=frozenset)
    term_bad: Optional[str] = None
    term_good: Optional[str] = None


def is_ready(session: Session) -> bool:
    """Check whether both bounds are known."""
    return session.bad_revision is not None and session.good_revision is not None


def bad_term(session: Optional[Session]) -> str:
    """Name of the 'bad' command for this session."""
    return (session.term_bad if session else None) or BAD


def good_term(session: Optional[Session]) -> str:
    """Name of the 'good' command for this session."""
    return (session.term_good if session else None) or GOOD


def newest_first(revisions: Iterable[int]) -> List[int]:
    """Order revisions most recent first."""
    return sorted(set(revisions), reverse=True)


def waiting_status(session: Session) -> Optional[str]:
    """Describe which bounds the session is still waiting for.

    Returns:
        Status line, or None when the session is ready
    """
    bad = bad_term(session)
    good = good_term(session)
    if session.bad_revision is None and session.good_revision is None:
        return f"status: waiting for both {good} and {bad} revisions"
    if session.good_revision is None:
        return f"status: waiting for a {good} revision"
    if session.bad_revision is None:
        return f"status: waiting for a {bad} revision"
    return None


def session_to_dict(session: Session) -> Dict[str, Any]:
    """Convert a session to a tagged-field document for storage."""
    return {
        "schema": SCHEMA_VERSION,
        "working_copy_path": session.working_copy_path,
        "original_revision": session.original_revision,
        "history": {
            "head": session.head_revision,
            "first": session.first_revision,
        },
        "bad": session.bad_revision,
        "good": session.good_revision,
        "skipped": newest_first(session.skipped),
        "terms": {
            "bad": session.term_bad,
            "good": session.term_good,
        },
    }


def session_from_dict(data: Dict[str, Any]) -> Session:
    """Create a session from a stored document.

    Args:
        data: Document produced by session_to_dict

    Returns:
        Session

    Raises:
        ValueError: If the document is from a newer schema or malformed
    """
    schema = data.get("schema")
    if not isinstance(schema, int) or schema > SCHEMA_VERSION:
        raise ValueError(
            f"Unsupported session schema {schema!r} (this version reads up to {SCHEMA_VERSION})"
        )

    try:
        history = data["history"]
        terms = data.get("terms") or {}
        return Session(
            working_copy_path=data["working_copy_path"],
            original_revision=int(data["original_revision"]),
            head_revision=int(history["head"]),
            first_revision=int(history["first"]),
            bad_revision=_optional_int(data.get("bad")),
            good_revision=_optional_int(data.get("good")),
            skipped=frozenset(int(rev) for rev in data.get("skipped") or []),
            term_bad=terms.get("bad"),
            term_good=terms.get("good"),
        )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed session document: {exc}") from exc


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)
