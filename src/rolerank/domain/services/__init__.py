"""Domain services for RoleRank."""

from rolerank.domain.services.role_validator import (
    RoleValidationError,
    RoleValidator,
)

__all__ = [
    "RoleValidationError",
    "RoleValidator",
]
