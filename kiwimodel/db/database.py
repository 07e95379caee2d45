from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Callable

from sqlalchemy import String, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .helpers import parse_sql_operation
from .metrics import observe_query
from .session import DbSession

if TYPE_CHECKING:
    from ..config import DbConfig

logger = logging.getLogger(__name__)


class Database:
    """
    Connection object handed to every entity.

    Wraps a SQLAlchemy Engine bound to a single SQLite file. Each statement
    runs in its own short DbSession, so every write is autocommitted.
    The Engine belongs to the caller; Database never disposes it.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.last_error: SQLAlchemyError | None = None
        self._last_insert_id: int | None = None
        self._literal_string = String().literal_processor(dialect=engine.dialect)

    def query(self, sql: str) -> list[dict[str, Any]]:
        """
        Run a statement and return its rows as dicts.

        SQLAlchemy errors are not swallowed.
        """
        return self._read(sql, DbSession.fetch_all)

    def query_first(self, sql: str) -> dict[str, Any] | None:
        """
        Run a statement and return only its first row, or None.

        SQLAlchemy errors are not swallowed.
        """
        return self._read(sql, DbSession.fetch_first)

    def _read(self, sql: str, fetch: Callable[[DbSession, str], Any]) -> Any:
        table, op_type = parse_sql_operation(sql)
        start_time = time.monotonic()
        status = "success"
        try:
            with DbSession(self.engine) as session:
                return fetch(session, sql)
        except Exception:
            status = "error"
            raise
        finally:
            observe_query(table, op_type, status, time.monotonic() - start_time)

    def exec(self, sql: str) -> bool:
        """
        Run a write statement and report whether it succeeded.

        The exception of a failed statement is kept in ``last_error``.
        """
        table, op_type = parse_sql_operation(sql)
        start_time = time.monotonic()
        status = "success"
        self.last_error = None
        try:
            with DbSession(self.engine) as session:
                session.execute(sql)
                if op_type == "insert":
                    self._last_insert_id = session.last_insert_id
            return True
        except SQLAlchemyError as exc:
            status = "error"
            self.last_error = exc
            logger.warning("Statement failed on %s: %s", table, exc)
            return False
        finally:
            observe_query(table, op_type, status, time.monotonic() - start_time)

    def escape_string(self, value: str) -> str:
        """Escape a string for use inside a single-quoted SQL literal."""
        # the dialect's literal processor returns the value wrapped in quotes
        return self._literal_string(value)[1:-1]

    def last_insert_row_id(self) -> int | None:
        return self._last_insert_id


def create_database(config: DbConfig | None = None) -> Database:
    """Build an Engine from ``config`` (or the environment) and wrap it."""
    from ..config import DbConfig

    config = config or DbConfig.from_env()
    engine = create_engine(config.url, echo=config.echo)
    return Database(engine)
