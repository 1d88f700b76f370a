"""
Directory -- Authors and the append-only audit log.

Authors are the people who record movements.  Authentication is out of
scope; the kernel only needs ids, display names and roles to resolve ledger
rows and stamp audit entries.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AuthorRole(str, Enum):
    """Roles carried over from the user directory."""

    ADMIN = "admin"
    SUPERVISOR = "supervisor"
    STAFF = "staff"


@dataclass(frozen=True, slots=True)
class Author:
    author_id: int
    name: str
    role: AuthorRole = AuthorRole.STAFF
    location: str = ""


class AuditAction(str, Enum):
    """Auditable inventory actions."""

    PRODUCT_REGISTERED = "product_registered"
    MOVEMENT_RECORDED = "movement_recorded"
    MOVEMENT_UPDATED = "movement_updated"
    MOVEMENT_DELETED = "movement_deleted"
    GLOBAL_RECOMPUTE = "global_recompute"


@dataclass(frozen=True, slots=True)
class AuditLogEntry:
    """One audit record. The log is append-only, newest last."""

    entry_id: int
    actor_id: int | None
    action: AuditAction
    details: str
    timestamp: datetime
