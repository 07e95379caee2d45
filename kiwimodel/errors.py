from __future__ import annotations


class KiwiError(Exception):
    """Base exception for kiwimodel errors."""


class NotFoundError(KiwiError):
    """No row matched a required lookup."""


class ValidationError(KiwiError):
    """A structural or domain rule was violated before a write."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


class GuardError(KiwiError):
    """Attempted bulk-assignment of a guarded field."""

    def __init__(self, field: str, entity: str) -> None:
        self.field = field
        super().__init__(f"{field} of {entity} is not mass assignable")


class ConfigurationError(KiwiError):
    """An entity type is missing required declarations."""


class PersistenceError(KiwiError):
    """The underlying write reported failure."""


class StateError(KiwiError):
    """The entity is not in a state that allows the requested operation."""
