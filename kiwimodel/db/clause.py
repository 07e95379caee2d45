from __future__ import annotations

from typing import Any, Callable

Escape = Callable[[str], str]

MISSING = object()


def quote(value: Any, escape: Escape) -> str:
    """
    Render a scalar as a SQL literal.

    ``None`` becomes ``NULL``, booleans become ``1``/``0``, numbers are
    passed through and strings are escaped with ``escape`` and wrapped in
    single quotes.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return f"'{escape(value)}'"
    raise TypeError(f"Cannot quote value of type {type(value).__name__}")


class Clause:
    """
    Pending WHERE/LIMIT suffix of the next statement.

    Predicates are raw SQL supplied by the caller, including the comparison
    operator and any connective, e.g. ``"AND firstname LIKE "``. Only the
    value is quoted. The first predicate emits ``WHERE``; later ones are
    joined with a single space.

    The rendered fragment is always appendable to
    ``SELECT * FROM <table>``, ``UPDATE <table> SET ...`` or
    ``DELETE FROM <table>``.
    """

    def __init__(self, escape: Escape) -> None:
        self._escape = escape
        self._sql = ""
        self._has_where = False

    def __str__(self) -> str:
        return self._sql

    def __bool__(self) -> bool:
        return bool(self._sql)

    def where(self, predicate: str, value: Any = MISSING) -> "Clause":
        """
        Append a predicate. Without ``value`` the predicate is used verbatim.
        """
        if self._has_where:
            self._sql += " "
        else:
            self._sql += " WHERE "
            self._has_where = True

        self._sql += predicate
        if value is not MISSING:
            self._sql += quote(value, self._escape)
        return self

    def limit(self, count: int, offset: int = 0) -> "Clause":
        if count < 0 or offset < 0:
            raise ValueError("limit and offset must be >= 0")
        self._sql += f" LIMIT {int(count)}"
        if offset > 0:
            self._sql += f" OFFSET {int(offset)}"
        return self

    def raw(self, sql: str) -> "Clause":
        """Append raw SQL such as an ORDER BY clause."""
        self._sql += f" {sql}"
        return self

    def reset(self) -> "Clause":
        self._sql = ""
        self._has_where = False
        return self
