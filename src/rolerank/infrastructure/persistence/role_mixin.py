"""Declarative mixin adding an ordered, incremental role to a model.

Mix ``HasRole`` into a declarative model and give the class a role table:

    class UserModel(HasRole, Base):
        __tablename__ = "users"
        __role_table__ = RoleTable.build("admin", "super_admin")

This adds two columns. ``role`` holds the role name and ``role_rank`` holds
the rank derived from it. Setting ``role`` derives ``role_rank`` straight
away, and the before-save listeners derive it again on every insert and
update. Each role name also gets an ``is_<name>`` predicate that answers
"is this record at least that role".

Defining a subclass registers the role listeners, so any Session derives
and validates ranks on flush without further setup.

The role name is always stored in the ``role`` column and read
back from it. Storing only the rank and recovering the name by inverting
the table is not supported; ``RoleTable.name_of`` gives that lookup when
needed.

Because ``role_rank`` is stored, it can be used in queries:

    select(UserModel).where(UserModel.role_rank >= UserModel.__role_table__.rank_of("admin"))
"""

from collections.abc import Mapping
from typing import Any, ClassVar

from sqlalchemy import Integer, String
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column

from rolerank.core.logging import get_logger
from rolerank.domain.entities.role_table import NO_ROLE_RANK, RoleTable
from rolerank.domain.exceptions import ImmutableFieldError
from rolerank.domain.services.role_validator import RoleValidationError, RoleValidator

logger = get_logger(__name__)


class RolePredicate:
    """Read-only ``is_<role>`` attribute generated for each role name."""

    def __init__(self, role_name: str) -> None:
        self.role_name = role_name

    def __get__(self, instance: "HasRole | None", owner: type) -> Any:
        if instance is None:
            return self
        return instance.is_at_least(self.role_name)

    def __set__(self, instance: "HasRole", value: Any) -> None:
        raise AttributeError(f"is_{self.role_name} is read-only")

    def __repr__(self) -> str:
        return f"<RolePredicate(is_{self.role_name})>"


class HasRole:
    """Mixin for declarative models that carry a ranked role.

    Attributes:
        __role_table__: Role table shared by every record of the class.
        PROTECTED_ATTRIBUTES: Attributes dropped from constructor keywords
            and ``assign_attributes``. Use the ``role`` property instead.
    """

    __role_table__: ClassVar[RoleTable] = RoleTable()
    PROTECTED_ATTRIBUTES: ClassVar[frozenset[str]] = frozenset(
        {"role", "role_rank", "_role", "_role_rank"}
    )

    _role: Mapped[str | None] = mapped_column(
        "role",
        String(50),
        nullable=True,
        comment="Role name, NULL when no role is assigned",
    )
    _role_rank: Mapped[int] = mapped_column(
        "role_rank",
        Integer,
        nullable=False,
        default=NO_ROLE_RANK,
        server_default=str(NO_ROLE_RANK),
        index=True,
        comment="Rank derived from role, 0 when no role is assigned",
    )

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        from rolerank.infrastructure.persistence.event_listeners import (
            register_role_listeners,
        )

        register_role_listeners()
        for name in cls.__role_table__:
            attr = f"is_{name}"
            if not attr.isidentifier():
                continue
            existing = getattr(cls, attr, None)
            if existing is not None and not isinstance(existing, RolePredicate):
                logger.warning(
                    "Role predicate would shadow an existing attribute",
                    model=cls.__name__,
                    attribute=attr,
                )
                continue
            setattr(cls, attr, RolePredicate(name))

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**self._strip_protected(kwargs))
        if self._role_rank is None:
            self._role_rank = NO_ROLE_RANK

    @classmethod
    def _strip_protected(cls, values: Mapping[str, Any]) -> dict[str, Any]:
        dropped = sorted(key for key in values if key in cls.PROTECTED_ATTRIBUTES)
        if dropped:
            logger.warning(
                "Ignoring protected attributes in bulk assignment",
                model=cls.__name__,
                attributes=dropped,
            )
        return {k: v for k, v in values.items() if k not in cls.PROTECTED_ATTRIBUTES}

    def assign_attributes(self, values: Mapping[str, Any]) -> None:
        """Set several attributes at once, skipping protected ones.

        Args:
            values: Attribute names and values, typically untrusted input.
        """
        for key, value in self._strip_protected(values).items():
            setattr(self, key, value)

    @property
    def role_table(self) -> RoleTable:
        return type(self).__role_table__

    @hybrid_property
    def role(self) -> str | None:
        """Canonical role name, or None when no role is assigned."""
        return self._role

    @role.setter
    def role(self, value: Any) -> None:
        self._role = self.role_table.canonicalize(value)
        self.refresh_role_rank()

    @role.expression
    def role(cls):
        return cls._role

    @hybrid_property
    def role_rank(self) -> int:
        """Rank of the current role. Read-only; set ``role`` instead."""
        if self._role_rank is None:
            return self.role_table.rank_of(self._role)
        return self._role_rank

    @role_rank.setter
    def role_rank(self, value: Any) -> None:
        raise ImmutableFieldError("role_rank", "role")

    @role_rank.expression
    def role_rank(cls):
        return cls._role_rank

    def refresh_role_rank(self) -> int:
        """Derive the rank from the current role and store it.

        Unknown or blank roles derive rank 0. Safe to call repeatedly.

        Returns:
            The derived rank.
        """
        rank = self.role_table.rank_of(self._role)
        if self._role_rank != rank:
            self._role_rank = rank
        return rank

    def is_at_least(self, role_name: Any) -> bool:
        """Check whether this record's rank reaches the given role.

        Args:
            role_name: A role name from the table.

        Returns:
            True if the record's rank is at least the role's rank.

        Raises:
            ValueError: If ``role_name`` is not in the role table.
        """
        if role_name not in self.role_table:
            raise ValueError(f"Unknown role: {role_name!r}")
        # NULL rank counts as no role
        current = self.role_rank or NO_ROLE_RANK
        return current >= self.role_table.rank_of(role_name)

    def validate_role(self) -> list[RoleValidationError]:
        """Validate the current role against the role table."""
        return RoleValidator.validate(self.role_table, self._role)

    @property
    def is_role_valid(self) -> bool:
        return not self.validate_role()
