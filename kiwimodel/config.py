from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, Sequence

from .db.helpers import validate_identifier
from .db.models import Operation
from .errors import ConfigurationError

if TYPE_CHECKING:
    from .model import Model

Validator = Callable[["Model", Operation], Sequence[str]]

FIELD_KINDS = (str, int, float, bool)


@dataclass
class DbConfig:
    url: str = "sqlite:///kiwi.sqlite"
    echo: bool = False

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not self.url.startswith("sqlite"):
            raise ValueError(
                f"Unsupported database URL {self.url!r}; only single-file SQLite databases are supported"
            )

    @classmethod
    def from_env(cls) -> "DbConfig":
        """Build a config from ``KIWI_DATABASE_URL`` and ``KIWI_DATABASE_ECHO``."""
        defaults = cls()
        url = os.environ.get("KIWI_DATABASE_URL", defaults.url)
        echo = os.environ.get("KIWI_DATABASE_ECHO", "").lower() in ("1", "true", "yes")
        return cls(url=url, echo=echo)


@dataclass(frozen=True)
class Field:
    """A single column of an entity schema."""
    name: str
    kind: type = str
    default: Any = None

    def __post_init__(self) -> None:
        try:
            validate_identifier(self.name, "field name")
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(str(exc)) from exc
        if self.kind not in FIELD_KINDS:
            raise ConfigurationError(
                f"Field {self.name!r} has unsupported kind {self.kind!r}"
            )

    def coerce(self, value: Any) -> Any:
        """
        Convert a value read from storage to the declared kind.

        SQLite does not enforce column types, so a value that does not
        convert (e.g. ``''`` stored in an INTEGER column) is returned as is.
        """
        if value is None or isinstance(value, self.kind):
            return value
        if self.kind is bool:
            return bool(value)
        try:
            return self.kind(value)
        except (TypeError, ValueError):
            return value


@dataclass(frozen=True)
class ModelConfig:
    """
    Static metadata every entity type has to declare.

    ``guarded`` must not be empty: it lists fields that ``fill()`` refuses to
    set. The primary key is always added to it.
    """
    table: str
    primary_key: str
    fields: tuple[Field, ...]
    guarded: frozenset[str] = field(default_factory=frozenset)
    validator: Optional[Validator] = None

    def __post_init__(self) -> None:
        try:
            validate_identifier(self.table, "table")
            validate_identifier(self.primary_key, "primary_key")
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(str(exc)) from exc

        object.__setattr__(self, "fields", tuple(self.fields))

        names = [f.name for f in self.fields]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ConfigurationError(
                f"Duplicate fields for {self.table}: {', '.join(duplicates)}"
            )
        if self.primary_key not in names:
            raise ConfigurationError(
                f"Primary key {self.primary_key!r} is not a field of {self.table}"
            )
        if not self.guarded:
            raise ConfigurationError(f"No guarded fields set for {self.table}")

        object.__setattr__(
            self, "guarded", frozenset(self.guarded) | {self.primary_key}
        )

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def get_field(self, name: str) -> Optional[Field]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def extend(
        self,
        fields: Iterable[Field] = (),
        guarded: Iterable[str] = (),
    ) -> "ModelConfig":
        """Return a copy with extra fields appended and extra names guarded."""
        extra = tuple(f for f in fields if f.name not in self.field_names)
        return replace(
            self,
            fields=self.fields + extra,
            guarded=self.guarded | frozenset(guarded),
        )
