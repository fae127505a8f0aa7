"""SQLAlchemy model for the users table.

Users carry an incremental role: admin < super_admin.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from rolerank.domain.entities.role_table import RoleTable
from rolerank.infrastructure.persistence.database import Base
from rolerank.infrastructure.persistence.role_mixin import HasRole


class UserModel(HasRole, Base):
    """SQLAlchemy model for the users table.

    Attributes:
        id: Primary key (UUID string).
        email: User's email address.
        role: Role name from the role table, or None.
        role_rank: Rank derived from role (read-only).
        created_at: Timestamp when the user was created.
    """

    __tablename__ = "users"
    __role_table__ = RoleTable.build("admin", "super_admin")

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="User ID (UUID)",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="User email address",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
