from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional


class Operation(str, Enum):
    """Write operation an entity is validated for."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Lookup:
    """
    Outcome of a single-row SELECT.

    Only the not-found outcome is represented here; any other failure is
    raised by the database layer.
    """
    status: LookupStatus
    row: Optional[Mapping[str, Any]] = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @classmethod
    def of(cls, row: Optional[Mapping[str, Any]]) -> "Lookup":
        if row is None:
            return cls(LookupStatus.NOT_FOUND)
        return cls(LookupStatus.FOUND, row)
