"""Session storage and audit log for bisect sessions."""

from svbisect.persistence.audit_log import AuditLog, command_lines
from svbisect.persistence.models import SessionRecord
from svbisect.persistence.state_manager import DatabaseError, StateManager


__all__ = [
    # Models
    "SessionRecord",
    # State Manager
    "StateManager",
    "DatabaseError",
    # Audit log
    "AuditLog",
    "command_lines",
]
