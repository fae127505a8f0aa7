"""Exceptions raised by the role rank mechanism."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rolerank.domain.services.role_validator import RoleValidationError


class ImmutableFieldError(Exception):
    """Raised when code assigns a field that is derived from another one.

    Args:
        field: Name of the derived field.
        source: Name of the field that must be set instead.
    """

    def __init__(self, field: str, source: str) -> None:
        self.field = field
        self.source = source
        super().__init__(f"{field} is derived; set {source} instead")


class RecordInvalidError(Exception):
    """Raised when a flush is refused because records failed validation.

    Attributes:
        errors: Every validation error collected during the flush.
    """

    def __init__(self, errors: list["RoleValidationError"]) -> None:
        self.errors = errors
        details = "; ".join(f"{e.field}: {e.message}" for e in errors)
        super().__init__(f"Validation failed: {details}")
