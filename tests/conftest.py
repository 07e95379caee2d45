from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from kiwimodel.db.database import Database


USERS_SCHEMA_SQL = """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        username TEXT,
        firstname TEXT,
        lastname TEXT,
        friend_id INTEGER,
        is_admin INTEGER NOT NULL DEFAULT 0,
        updated_at INTEGER NOT NULL DEFAULT 0,
        updated_by INTEGER NOT NULL DEFAULT 0,
        created_at INTEGER NOT NULL DEFAULT 0,
        created_by INTEGER NOT NULL DEFAULT 0
    )
"""

SEED_USERS = [
    (1, "CR", "Carl", "Reinecken", 2),
    (2, "MM", "Maria", "Muster", None),
    (3, "KK", "Karl", "Klein", 2),
    (4, "AB", "Anna", "Berg", 2),
]


@pytest.fixture
def engine(tmp_path) -> Iterator[Engine]:
    """
    SQLAlchemy engine on a throwaway SQLite file, one per test.
    """
    eng = create_engine(f"sqlite:///{tmp_path / 'kiwi.sqlite'}")
    yield eng
    eng.dispose()


@pytest.fixture
def database(engine: Engine) -> Database:
    return Database(engine)


@pytest.fixture
def users_table(engine: Engine) -> str:
    """
    Empty ``users`` table with the columns of kiwimodel.users.User.
    """
    with engine.begin() as conn:
        conn.exec_driver_sql(USERS_SCHEMA_SQL)
    return "users"


@pytest.fixture
def seeded_users(engine: Engine, users_table: str) -> str:
    """
    ``users`` with four rows; Carl, Karl and Anna have friend_id 2.
    """
    with engine.begin() as conn:
        for row in SEED_USERS:
            conn.exec_driver_sql(
                "INSERT INTO users (id, username, firstname, lastname, friend_id) "
                "VALUES (?, ?, ?, ?, ?)",
                row,
            )
    return users_table
