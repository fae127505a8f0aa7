"""Persistence layer: SQLAlchemy base, role mixin, listeners and migrator."""

from rolerank.infrastructure.persistence.database import Base, DatabaseManager
from rolerank.infrastructure.persistence.event_listeners import (
    SKIP_ROLE_VALIDATION,
    register_role_listeners,
)
from rolerank.infrastructure.persistence.role_migrator import RoleMigrator
from rolerank.infrastructure.persistence.role_mixin import HasRole, RolePredicate

__all__ = [
    "Base",
    "DatabaseManager",
    "HasRole",
    "RoleMigrator",
    "RolePredicate",
    "SKIP_ROLE_VALIDATION",
    "register_role_listeners",
]
