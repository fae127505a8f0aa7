"""Role validation service.

Checks that a role value is blank or one of the names in a role table.
Errors are returned, not raised, so callers can accumulate them across
several records before refusing a save.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from rolerank.domain.entities.role_table import RoleTable


@dataclass
class RoleValidationError:
    """A single role validation error."""

    field: str
    message: str
    code: str


class RoleValidator:
    """Validator for role values against a role table."""

    @classmethod
    def validate(
        cls, table: RoleTable, role: Any, field_name: str = "role"
    ) -> list[RoleValidationError]:
        """Validate a role value.

        Args:
            table: The role table the value must come from.
            role: Role value to check. None and blank strings are allowed.
            field_name: Field name reported in errors.

        Returns:
            List of validation errors (empty if valid).
        """
        if role is None:
            return []

        if not isinstance(role, (str, Enum)):
            return [
                RoleValidationError(
                    field=field_name,
                    message=f"Expected role name, got {type(role).__name__}",
                    code="invalid_type",
                )
            ]

        if table.canonicalize(role) is None or role in table:
            return []

        allowed = ", ".join(table.names) or "(none)"
        return [
            RoleValidationError(
                field=field_name,
                message=f"'{role}' is not a valid role. Allowed: {allowed}",
                code="invalid_choice",
            )
        ]
