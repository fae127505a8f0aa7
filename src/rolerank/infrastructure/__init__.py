"""Infrastructure layer for RoleRank."""
