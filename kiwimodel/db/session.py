from __future__ import annotations

from typing import Any

from sqlalchemy.engine import Connection, Engine


class DbSession:
    """
    Transactional wrapper around a SQLAlchemy Engine connection.

    Statements are passed to the driver as fully rendered SQL text (values
    already quoted), so no bind parameters are accepted.

    Use as:
        with DbSession(engine) as session:
            session.execute("UPDATE users SET lastname = 'Kaufmann' WHERE id = 3")
            rows = session.fetch_all("SELECT * FROM users")
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.last_insert_id: int | None = None
        self._conn: Connection | None = None
        self._tx = None

    def __enter__(self) -> "DbSession":
        if self._conn is not None:
            raise RuntimeError("DbSession is already active; nested sessions are not allowed")
        self._conn = self.engine.connect()
        self._tx = self._conn.begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._tx is not None:
                if exc_type:
                    self._tx.rollback()
                else:
                    self._tx.commit()
        finally:
            if self._conn is not None:
                self._conn.close()

            self._conn = None
            self._tx = None

        # propagate exceptions (if any)
        return False

    def _connection(self) -> Connection:
        if self._conn is None:
            raise RuntimeError("DbSession is not active; use within a context manager")
        return self._conn

    def execute(self, sql: str) -> int:
        """
        Execute a non-SELECT statement and return affected row count.

        The id generated by an INSERT is kept in ``last_insert_id``.
        """
        conn = self._connection()
        result = conn.exec_driver_sql(sql)
        try:
            if result.rowcount is None:
                raise RuntimeError(
                    "execute() received None rowcount for statement. "
                    "This may indicate a DDL statement or unsupported operation type."
                )
            self.last_insert_id = result.lastrowid
            return int(result.rowcount)
        finally:
            result.close()

    def fetch_all(self, sql: str) -> list[dict[str, Any]]:
        """
        Execute a SELECT returning multiple rows.
        """
        conn = self._connection()
        result = conn.exec_driver_sql(sql)
        try:
            return [dict(row) for row in result.mappings()]
        finally:
            result.close()

    def fetch_first(self, sql: str) -> dict[str, Any] | None:
        """
        Execute a SELECT and return only its first row, or None.

        Remaining rows are never fetched from the cursor.
        """
        conn = self._connection()
        result = conn.exec_driver_sql(sql)
        try:
            row = result.mappings().first()
            return dict(row) if row is not None else None
        finally:
            result.close()
