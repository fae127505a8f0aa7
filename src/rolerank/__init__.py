"""RoleRank - ordered, incremental roles for SQLAlchemy models.

Each role maps to an integer rank. Setting a role derives the rank, and
rank comparisons answer "is this record at least role X".
"""

__version__ = "0.1.0"

from rolerank.domain.entities.role_table import RoleTable
from rolerank.infrastructure.persistence.role_mixin import HasRole

__all__ = ["HasRole", "RoleTable", "__version__"]
