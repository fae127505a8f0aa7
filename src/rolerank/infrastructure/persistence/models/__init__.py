"""SQLAlchemy models for RoleRank.

All models inherit from the Base class defined in database.py.
"""

from rolerank.infrastructure.persistence.models.user import UserModel

__all__ = [
    "UserModel",
]
