from __future__ import annotations

import logging
from typing import Any, ClassVar, Mapping, Optional

from .config import ModelConfig
from .db.clause import MISSING, Clause, quote
from .db.database import Database
from .db.helpers import is_read_statement
from .db.models import Lookup, Operation
from .errors import (
    ConfigurationError,
    GuardError,
    NotFoundError,
    PersistenceError,
    StateError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class Model:
    """
    Base class for entities mapped onto a single table.

    Subclasses declare a ``config`` (a ModelConfig) and get CRUD, bulk
    fill with guarding, and change tracking against a snapshot of the last
    persisted state.

    Lifecycle:
        transient  - no primary key, no snapshot
        persisted  - primary key set, snapshot taken after load/create/update
        deleted    - primary key and snapshot cleared

    Usage:
        user = User(database).find_or_fail(1)
        user.fill({"lastname": "Kaufmann"}).update()

        friends = User(database).where("friend_id = ", 2).all()

    Query state (conditions and last query) belongs to the instance, the
    Database is shared. Conditions are consumed by the next executed
    statement.
    """

    config: ClassVar[ModelConfig]
    _checked_config: ClassVar[ModelConfig]

    def __init__(self, database: Database) -> None:
        config = self._model_config()
        object.__setattr__(self, "database", database)
        object.__setattr__(self, "_config", config)
        object.__setattr__(self, "_data", {f.name: f.default for f in config.fields})
        object.__setattr__(self, "_original", None)
        object.__setattr__(self, "_clause", Clause(database.escape_string))
        object.__setattr__(self, "_last_query", None)

    @classmethod
    def _model_config(cls) -> ModelConfig:
        """
        The checked config of this class, resolved on first instantiation.

        Cached in the class's own ``__dict__`` so subclasses resolve theirs.
        """
        config = cls.__dict__.get("_checked_config")
        if config is not None:
            return config

        config = cls._resolve_config()
        clashes = [
            name for name in config.field_names
            if name == "database" or hasattr(cls, name)
        ]
        if clashes:
            raise ConfigurationError(
                f"Fields of {cls.__name__} shadow model attributes: {', '.join(clashes)}"
            )
        cls._checked_config = config
        return config

    @classmethod
    def _resolve_config(cls) -> ModelConfig:
        config = getattr(cls, "config", None)
        if not isinstance(config, ModelConfig):
            raise ConfigurationError(f"{cls.__name__} has no ModelConfig set")
        return config

    def __getattr__(self, name: str) -> Any:
        data = self.__dict__.get("_data")
        if data is not None and name in data:
            return data[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        data = self.__dict__.get("_data")
        if data is not None and name in data:
            data[name] = value
        else:
            object.__setattr__(self, name, value)

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.get_primary_key()})"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._data!r}>"

    # -- metadata -----------------------------------------------------------

    @property
    def table(self) -> str:
        return self._config.table

    @property
    def primary_key(self) -> str:
        return self._config.primary_key

    @property
    def guarded(self) -> frozenset[str]:
        return self._config.guarded

    @property
    def last_query(self) -> Optional[str]:
        return self._last_query

    def get_primary_key(self) -> Any:
        return self._data[self.primary_key]

    def set_primary_key(self, value: Any) -> "Model":
        self._data[self.primary_key] = value
        return self

    def new(self) -> "Model":
        """A fresh, transient instance of the same type on the same database."""
        return type(self)(self.database)

    # -- conditions ---------------------------------------------------------

    def where(self, predicate: str, value: Any = MISSING) -> "Model":
        """
        Add a condition to the next query.

        ``predicate`` is raw SQL ending in the comparison operator, with the
        logical connective for every condition after the first:

            user.where("friend_id = ", 2).where("AND firstname LIKE ", "%ar%")

        Without ``value`` the predicate is appended as is.
        """
        self._clause.where(predicate, value)
        return self

    def limit(self, count: int, offset: int = 0) -> "Model":
        self._clause.limit(count, offset)
        return self

    def raw(self, sql: str) -> "Model":
        self._clause.raw(sql)
        return self

    def reset_conditions(self) -> "Model":
        self._clause.reset()
        return self

    def reset_primary_key_condition(self, value: Any = None) -> "Model":
        """
        Replace all conditions with ``<primary key> = value``.

        ``value`` defaults to the current primary key and is assigned to the
        entity, so the entity and the condition always agree.
        """
        if value is None:
            value = self.get_primary_key()
        self.set_primary_key(value)
        return self._where_primary_key(value)

    def _where_primary_key(self, value: Any) -> "Model":
        self._clause.reset().where(f"{self.primary_key} = ", value)
        return self

    # -- execution ----------------------------------------------------------

    def execute(self, statement: str, suffix: str = "") -> Any:
        """
        Run ``statement`` followed by the pending conditions and ``suffix``.

        Conditions are reset afterwards. Statements starting with ``SELECT``,
        ``WITH``, ``VALUES`` or ``EXPLAIN`` return a list of row dicts, any
        other statement returns True or False.
        """
        sql = self._prepare(statement, suffix)
        if is_read_statement(sql):
            return self.database.query(sql)
        return self.database.exec(sql)

    def _prepare(self, statement: str, suffix: str = "") -> str:
        sql = f"{statement}{self._clause}"
        if suffix:
            sql += f" {suffix}"

        self._last_query = sql
        self._clause.reset()

        logger.debug("Executing %s", sql)
        return sql

    def _quote(self, value: Any) -> str:
        return quote(value, self.database.escape_string)

    # -- reading ------------------------------------------------------------

    def all(self, extra_sql: str = "") -> list["Model"]:
        """
        Return a new entity for every row matching the current conditions.

        ``extra_sql`` is appended after the conditions, e.g.
        ``"ORDER BY lastname ASC"``.
        """
        rows = self.execute(f"SELECT * FROM {self.table}", extra_sql)
        return [self.new()._load(row) for row in rows]

    def _lookup(self) -> Lookup:
        sql = self._prepare(f"SELECT * FROM {self.table}")
        return Lookup.of(self.database.query_first(sql))

    def first_or_fail(self) -> "Model":
        lookup = self._lookup()
        if not lookup.found:
            raise NotFoundError(f"No {type(self).__name__} found")
        return self._load(lookup.row)

    def first(self) -> "Model":
        """Like first_or_fail() but leaves the entity untouched on a miss."""
        lookup = self._lookup()
        if lookup.found:
            self._load(lookup.row)
        return self

    def find(self, key: Any) -> "Model":
        return self._where_primary_key(key).first()

    def find_or_fail(self, key: Any) -> "Model":
        return self._where_primary_key(key).first_or_fail()

    def _load(self, row: Mapping[str, Any]) -> "Model":
        for key, value in row.items():
            field = self._config.get_field(key)
            if field is not None:
                self._data[key] = field.coerce(value)
        self._original = self.to_dict()
        return self

    # -- writing ------------------------------------------------------------

    def create(self) -> "Model":
        """
        Insert the entity and take over the generated primary key.

        Raises:
            ValidationError: If validation for CREATE fails
            PersistenceError: If the INSERT fails
        """
        previous_key = self.get_primary_key()
        self.set_primary_key(None)
        try:
            self.is_valid(Operation.CREATE)

            values = {k: v for k, v in self._data.items() if k != self.primary_key}
            if values:
                keys = ",".join(values)
                literals = ",".join(self._quote(v) for v in values.values())
                statement = f"INSERT INTO {self.table} ({keys}) VALUES ({literals})"
            else:
                statement = f"INSERT INTO {self.table} DEFAULT VALUES"

            self._clause.reset()
            if not self.execute(statement):
                raise PersistenceError(
                    f"Error while creating {self}"
                ) from self.database.last_error
        except Exception:
            self.set_primary_key(previous_key)
            raise

        self.set_primary_key(self.database.last_insert_row_id())
        self._original = self.to_dict()
        logger.info("Created %s", self)
        return self

    def update(self) -> "Model":
        """
        Write the fields that differ from the snapshot.

        Raises:
            StateError: If the entity was never loaded/created or nothing changed
            ValidationError: If validation for UPDATE fails
            PersistenceError: If the UPDATE fails
        """
        if self._original is None:
            raise StateError(f"{self} has not been loaded or created")

        diff = self.diff()
        columns = [n for n in self._config.field_names if n != self.primary_key and n in diff]
        if not columns:
            raise StateError(f"Nothing changed on {self}")

        self.is_valid(Operation.UPDATE)

        assignments = ", ".join(f"{c} = {self._quote(self._data[c])}" for c in columns)
        self.reset_primary_key_condition()
        if not self.execute(f"UPDATE {self.table} SET {assignments}"):
            raise PersistenceError(f"Error while updating {self}") from self.database.last_error

        self._original = self.to_dict()
        logger.debug("Updated %s: %s", self, ", ".join(columns))
        return self

    def delete(self) -> "Model":
        """
        Delete the row of the current primary key.

        Raises:
            ValidationError: If validation for DELETE fails
            PersistenceError: If the DELETE fails
        """
        self.is_valid(Operation.DELETE)
        self.reset_primary_key_condition()
        if not self.execute(f"DELETE FROM {self.table}"):
            raise PersistenceError(f"Error while deleting {self}") from self.database.last_error

        logger.info("Deleted %s", self)
        self.set_primary_key(None)
        self._original = None
        return self

    # -- validation ---------------------------------------------------------

    def errors(self, operation: Operation) -> list[str]:
        """Structural checks plus the entity validator, for ``operation``."""
        errors = []
        if operation is not Operation.CREATE and self.get_primary_key() in (None, ""):
            errors.append(f"No primary key set for {self}")

        validator = self._config.validator
        if validator is not None:
            errors.extend(validator(self, operation))
        return errors

    def is_valid(self, operation: Operation) -> bool:
        errors = self.errors(operation)
        if errors:
            raise ValidationError(errors)
        return True

    # -- state --------------------------------------------------------------

    def fill(self, data: Mapping[str, Any]) -> "Model":
        """
        Mass assign fields from ``data``.

        Unknown keys are ignored. Every value is taken as is, including empty
        strings, zero and None. Nothing is assigned if any key is guarded.

        Raises:
            GuardError: For the first guarded key in ``data``
        """
        for key in data:
            if key in self.guarded:
                raise GuardError(key, str(self))

        for key, value in data.items():
            if key in self._data:
                self._data[key] = value
        return self

    def reset(self) -> "Model":
        """Discard unsaved edits by restoring the snapshot."""
        if self._original is not None:
            self._data.update(self._original)
        return self

    def diff(self) -> set[str]:
        """Names of fields that differ from the snapshot."""
        if self._original is None:
            return set(self._data)
        return {
            key
            for key, value in self._data.items()
            if key not in self._original or self._original[key] != value
        }

    def changed(self) -> bool:
        return bool(self.diff())

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)
