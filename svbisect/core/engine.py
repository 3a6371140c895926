#!/usr/bin/env python3
"""Bisect engine.

Pure transitions over Session values and the skip-aware narrowing step.
Nothing here touches the working copy or the store; command handlers turn
the results into effects.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from svbisect.core.session import Session, bad_term, good_term, is_ready
from svbisect.exceptions import BisectError, InvalidBoundOrdering


class EngineState(Enum):
    """Engine state derived from a session."""

    EMPTY = "empty"
    AWAITING_BOTH_BOUNDS = "awaiting both bounds"
    AWAITING_ONE_BOUND = "awaiting one bound"
    READY = "ready"
    CONCLUDED = "concluded"


class StepKind(Enum):
    """Outcome of a narrowing step."""

    BISECTING = "bisecting"
    AMBIGUOUS = "ambiguous"
    FOUND = "found"


@dataclass
class NarrowResult:
    """Result of one narrowing step.

    Attributes:
        kind: Step outcome
        next_revision: Revision to test next (BISECTING only)
        remaining: Number of testable revisions left
        steps: Rough number of further steps (floor of log2(remaining))
        culprits: Possible first bad revisions, newest first (AMBIGUOUS/FOUND)
    """

    kind: StepKind
    next_revision: Optional[int] = None
    remaining: int = 0
    steps: int = 0
    culprits: List[int] = field(default_factory=list)

    @property
    def concluded(self) -> bool:
        """True when no further narrowing is possible."""
        return self.kind is not StepKind.BISECTING


def engine_state(session: Optional[Session], concluded: bool = False) -> EngineState:
    """Derive the engine state for a session.

    Args:
        session: Current session (None when there is none)
        concluded: Whether the last narrowing step concluded
    """
    if session is None:
        return EngineState.EMPTY
    if is_ready(session):
        return EngineState.CONCLUDED if concluded else EngineState.READY
    if session.bad_revision is None and session.good_revision is None:
        return EngineState.AWAITING_BOTH_BOUNDS
    return EngineState.AWAITING_ONE_BOUND


def set_bad(session: Session, revision: int) -> Session:
    """Record a bad revision.

    Raises:
        InvalidBoundOrdering: If the revision is not newer than the good bound
    """
    good = session.good_revision
    if good is not None and revision <= good:
        raise InvalidBoundOrdering(
            f"The '{bad_term(session)}' revision ({revision}) must be more recent "
            f"than the '{good_term(session)}' revision ({good})"
        )
    return replace(session, bad_revision=revision, skipped=session.skipped - {revision})


def set_good(session: Session, revision: int) -> Session:
    """Record a good revision.

    Raises:
        InvalidBoundOrdering: If the revision is not older than the bad bound
    """
    bad = session.bad_revision
    if bad is not None and revision >= bad:
        raise InvalidBoundOrdering(
            f"The '{good_term(session)}' revision ({revision}) must be older "
            f"than the '{bad_term(session)}' revision ({bad})"
        )
    return replace(session, good_revision=revision, skipped=session.skipped - {revision})


def set_skip(session: Session, revisions: Iterable[int]) -> Session:
    """Add revisions to the skipped set."""
    return replace(session, skipped=session.skipped | frozenset(revisions))


def clear_skip(session: Session, revisions: Iterable[int]) -> Session:
    """Remove revisions from the skipped set."""
    return replace(session, skipped=session.skipped - frozenset(revisions))


def narrow(session: Session, extant: Sequence[int]) -> NarrowResult:
    """Choose the next revision to test.

    Args:
        session: A ready session
        extant: History from the bad bound to the good bound inclusive,
            newest first

    Returns:
        NarrowResult

    Raises:
        BisectError: If the session is not ready or the bounds are not the
            ends of the given history
    """
    if not is_ready(session):
        raise BisectError("Cannot bisect until both bounds are known")

    bad = session.bad_revision
    good = session.good_revision
    if not extant or extant[0] != bad:
        raise BisectError(f"Revision {bad} is not in the working copy history")
    if extant[-1] != good:
        raise BisectError(f"Revision {good} is not in the working copy history")

    candidates = list(extant[1:-1])
    testable = [rev for rev in candidates if rev not in session.skipped]

    if not testable:
        if candidates:
            return NarrowResult(kind=StepKind.AMBIGUOUS, culprits=[bad, *candidates])
        return NarrowResult(kind=StepKind.FOUND, culprits=[bad])

    remaining = len(testable)
    return NarrowResult(
        kind=StepKind.BISECTING,
        next_revision=testable[remaining // 2],
        remaining=remaining,
        steps=remaining.bit_length() - 1,
    )
