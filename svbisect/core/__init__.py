"""Core bisect components: session model, narrowing engine, revision resolver."""

from svbisect.core.engine import EngineState, NarrowResult, StepKind, narrow
from svbisect.core.resolver import RevisionResolver
from svbisect.core.session import Session


__all__ = [
    # Session
    "Session",
    # Engine
    "EngineState",
    "NarrowResult",
    "StepKind",
    "narrow",
    # Resolver
    "RevisionResolver",
]
