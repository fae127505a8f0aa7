"""Role table entity.

A role table is the ordered name -> rank mapping attached to a record type.
Ranks are positive integers; rank 0 is reserved and means "no role".

Example:
    >>> table = RoleTable.build("admin", "super_admin")
    >>> table.rank_of("super_admin")
    2
    >>> table.rank_of(None)
    0
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

NO_ROLE_RANK = 0


@dataclass(frozen=True)
class RoleTable:
    """Immutable, ordered mapping of role name to rank.

    Use ``RoleTable.build`` rather than the constructor directly: it accepts
    either a list of names (ranked by position) or a single mapping of
    explicit ranks.

    Attributes:
        ranks: Read-only mapping of canonical role name to rank, in
            declaration order.
    """

    ranks: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Canonicalize names and freeze the mapping."""
        canonical: dict[str, int] = {}
        for name, rank in self.ranks.items():
            key = self.canonicalize(name)
            if key is None:
                raise ValueError("Role names cannot be blank")
            if key in canonical:
                raise ValueError(f"Duplicate role name: {key}")
            canonical[key] = rank
        object.__setattr__(self, "ranks", MappingProxyType(canonical))

    @classmethod
    def build(cls, *roles: Any) -> "RoleTable":
        """Build a role table from names or from an explicit mapping.

        Args:
            *roles: Either role names, ranked 1, 2, 3, ... in order, or a
                single mapping of role name to rank.

        Returns:
            RoleTable: The new table.
        """
        if len(roles) == 1 and isinstance(roles[0], Mapping):
            return cls.from_mapping(roles[0])
        return cls.from_names(*roles)

    @classmethod
    def from_names(cls, *names: Any) -> "RoleTable":
        """Build a table ranking each name by its 1-based position."""
        ranks: dict[Any, int] = {}
        for position, name in enumerate(names, start=1):
            if name in ranks:
                raise ValueError(f"Duplicate role name: {name}")
            ranks[name] = position
        return cls(ranks)

    @classmethod
    def from_mapping(cls, ranks: Mapping[Any, int]) -> "RoleTable":
        """Build a table from explicit ranks.

        Ranks are used verbatim. Keeping them positive and unique is up to
        the caller.
        """
        return cls(dict(ranks))

    @staticmethod
    def canonicalize(name: Any) -> str | None:
        """Normalize a role name to its canonical lookup key.

        Enum members map to their value (or their name for non-string
        values). Everything else is converted with ``str()``, stripped and
        lower-cased. Blank input returns None.
        """
        if name is None:
            return None
        if isinstance(name, Enum):
            name = name.value if isinstance(name.value, str) else name.name
        key = str(name).strip().lower()
        return key or None

    def rank_of(self, name: Any) -> int:
        """Look up the rank for a role name, 0 when blank or unknown."""
        key = self.canonicalize(name)
        if key is None:
            return NO_ROLE_RANK
        return self.ranks.get(key, NO_ROLE_RANK)

    def name_of(self, rank: int | None) -> str | None:
        """Inverse lookup: the role name holding ``rank``, if any."""
        for name, value in self.ranks.items():
            if value == rank:
                return name
        return None

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self.ranks)

    @property
    def max_rank(self) -> int:
        return max(self.ranks.values(), default=NO_ROLE_RANK)

    def items(self) -> list[tuple[str, int]]:
        return list(self.ranks.items())

    def __contains__(self, name: object) -> bool:
        key = self.canonicalize(name)
        return key is not None and key in self.ranks

    def __iter__(self) -> Iterator[str]:
        return iter(self.ranks)

    def __len__(self) -> int:
        return len(self.ranks)

    def __hash__(self) -> int:
        return hash(tuple(self.ranks.items()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RoleTable):
            return NotImplemented
        return list(self.ranks.items()) == list(other.ranks.items())

    def __repr__(self) -> str:
        pairs = ", ".join(f"{name}={rank}" for name, rank in self.ranks.items())
        return f"<RoleTable({pairs})>"
