#!/usr/bin/env python3
"""Revision range resolution.

Validates user supplied revision tokens and ranges and resolves them to
revision numbers confirmed to exist in the working copy's history.
"""

import logging
import re
from typing import List, Tuple

from svbisect.exceptions import UnresolvableRevision
from svbisect.oracle.base import SYMBOLIC_REVISIONS, RevisionOracle


logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"^(?:\d+|" + "|".join(SYMBOLIC_REVISIONS) + r")$")


def parse_revision_token(text: str) -> str:
    """Validate the syntax of a revision token.

    Args:
        text: Integer literal or symbolic revision keyword

    Returns:
        The token

    Raises:
        ValueError: If the token is neither
    """
    if not _TOKEN_RE.match(text):
        raise ValueError(
            f"<revision> must be an integer or one of {', '.join(SYMBOLIC_REVISIONS)}: {text!r}"
        )
    return text


class RevisionResolver:
    """Resolves revision arguments through a revision oracle.

    The resolve methods are usable directly as argparse ``type=`` callables:
    syntax errors surface as ValueError (argparse usage errors) while
    revisions outside the working copy history raise UnresolvableRevision.
    """

    def __init__(self, oracle: RevisionOracle) -> None:
        self.oracle = oracle

    def resolve(self, text: str) -> int:
        """Resolve a single revision token.

        Raises:
            ValueError: If the token is malformed
            UnresolvableRevision: If the token has no history entry
        """
        token = parse_revision_token(text)
        revision = self.oracle.resolve(token)
        if revision is None:
            raise UnresolvableRevision(token)
        logger.debug(f"Resolved revision {token} -> {revision}")
        return revision

    def resolve_range(self, text: str) -> Tuple[int, int]:
        """Resolve 'R' or 'R:R' to a (low, high) pair.

        The endpoints may be given in either order.
        """
        parts = text.split(":")
        if len(parts) > 2:
            raise ValueError(f"<revision range> must be <rev> or <rev>:<rev>: {text!r}")

        revisions = [self.resolve(part) for part in parts]
        return min(revisions), max(revisions)

    def expand(self, low: int, high: int) -> List[int]:
        """List the history revisions in a closed range, newest first."""
        if low == high:
            return [low]
        return self.oracle.history(high, low)
