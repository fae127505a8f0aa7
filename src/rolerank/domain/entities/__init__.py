"""Domain entities for RoleRank."""

from rolerank.domain.entities.role_table import NO_ROLE_RANK, RoleTable

__all__ = ["NO_ROLE_RANK", "RoleTable"]
