from __future__ import annotations

import re

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_STATEMENT_RE = re.compile(
    r"^\s*(?:"
    r"(?P<select>SELECT)\b.*?\bFROM\s+(?P<select_table>[`\"]?\w+[`\"]?)"
    r"|(?P<insert>INSERT)\s+INTO\s+(?P<insert_table>[`\"]?\w+[`\"]?)"
    r"|(?P<update>UPDATE)\s+(?P<update_table>[`\"]?\w+[`\"]?)"
    r"|(?P<delete>DELETE)\s+FROM\s+(?P<delete_table>[`\"]?\w+[`\"]?)"
    r")",
    re.IGNORECASE | re.DOTALL,
)
_FIRST_KEYWORD_RE = re.compile(r"^[\s(]*([a-zA-Z]+)")
_READ_KEYWORDS = frozenset({"SELECT", "WITH", "VALUES", "EXPLAIN"})


def validate_identifier(name: str, identifier_type: str = "identifier") -> str:
    """
    Validate that an identifier (table/column name) is safe for SQL interpolation.

    Table and column names are always interpolated into statements, never
    quoted, so they are restricted to letters, digits and underscores.

    Args:
        name: The identifier to validate
        identifier_type: Description of the identifier (for error messages)

    Returns:
        The validated identifier (unchanged if valid)

    Raises:
        TypeError: If identifier is not a string
        ValueError: If identifier contains unsafe characters or is empty

    Example:
        >>> validate_identifier("users", "table")
        'users'
        >>> validate_identifier("'; DROP TABLE--", "table")
        ValueError: Invalid table "'; DROP TABLE--": ...
    """
    if not isinstance(name, str):
        raise TypeError(f"{identifier_type} must be a string, got {type(name).__name__}")

    if not name:
        raise ValueError(f"{identifier_type} cannot be empty")

    if not _IDENTIFIER_RE.match(name):
        raise ValueError(
            f"Invalid {identifier_type} {name!r}: "
            "must start with letter/underscore and contain only alphanumeric characters and underscores"
        )

    return name


def parse_sql_operation(sql: str) -> tuple[str, str]:
    """
    Return ``(table, op_type)`` for a rendered statement.

    ``op_type`` is one of ``select``, ``insert``, ``update``, ``delete`` or
    ``unknown``; ``table`` is ``unknown`` when it cannot be determined.
    Used for metric labels.
    """
    match = _STATEMENT_RE.match(sql)
    if match is None:
        return "unknown", "unknown"

    for op_type in ("select", "insert", "update", "delete"):
        if match.group(op_type):
            table = match.group(f"{op_type}_table").strip('`"')
            return table, op_type

    return "unknown", "unknown"  # pragma: no cover


def is_read_statement(sql: str) -> bool:
    """
    Whether ``sql`` returns rows, judged by its first keyword.

    ``SELECT``, ``WITH``, ``VALUES`` and ``EXPLAIN`` statements
    are reads; everything else is a write.
    """
    match = _FIRST_KEYWORD_RE.match(sql)
    return match is not None and match.group(1).upper() in _READ_KEYWORDS
