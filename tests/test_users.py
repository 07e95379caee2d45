from __future__ import annotations

import pytest

from kiwimodel.db.database import Database
from kiwimodel.errors import GuardError, NotFoundError, ValidationError
from kiwimodel.users import User


def _create(database: Database, actor: int, **fields) -> User:
    return User(database).fill(fields).create_as(actor)


def test_username_is_required_on_create(database: Database, users_table: str) -> None:
    with pytest.raises(ValidationError) as exc_info:
        User(database).fill({"firstname": "Gustav"}).create()

    assert exc_info.value.errors == ["A username is required"]


def test_username_is_required_on_update(database: Database, seeded_users: str) -> None:
    user = User(database).find(1)

    with pytest.raises(ValidationError, match="A username is required"):
        user.fill({"username": None}).update()


def test_missing_username_and_primary_key_are_both_reported(database: Database, seeded_users: str) -> None:
    user = User(database).find(1)
    user.set_primary_key(None)
    user.fill({"lastname": "Raufmann", "username": None})

    with pytest.raises(ValidationError) as exc_info:
        user.update_as(45)

    assert exc_info.value.errors == ["No primary key set for User(None)", "A username is required"]


def test_is_admin_cannot_be_mass_assigned(database: Database) -> None:
    with pytest.raises(GuardError, match="is_admin"):
        User(database).fill({"username": "GP", "is_admin": True})


def test_is_admin_is_stored_as_boolean(database: Database, users_table: str) -> None:
    user = User(database).fill({"username": "GP"})
    user.is_admin = True
    user.create()

    assert User(database).find(user.id).is_admin is True
    assert User(database).where("username = ", "GP").first().is_admin is True


def test_empty_friend_id_reads_back_as_stored(database: Database, users_table: str) -> None:
    user = User(database).fill({"username": "GP", "friend_id": ""}).create()

    assert User(database).find(user.id).friend_id == ""


def test_friend(database: Database, seeded_users: str) -> None:
    gustav = _create(database, 1, username="GP", firstname="Gustav", friend_id=2)

    friend = gustav.friend()

    assert friend.id == 2
    assert friend is not gustav
    assert friend.last_query == "SELECT * FROM users WHERE id = 2"


def test_missing_friend_raises(database: Database, seeded_users: str) -> None:
    maria = User(database).find(2)

    with pytest.raises(NotFoundError):
        maria.friend()


def test_creator_and_updater(database: Database, seeded_users: str) -> None:
    gustav = _create(database, 1, username="GP", firstname="Gustav")
    gustav.fill({"lastname": "Kaufmann"}).update_as(3)

    assert gustav.creator().username == "CR"
    assert gustav.updater().username == "KK"


def test_unknown_creator_is_an_empty_user(database: Database, seeded_users: str) -> None:
    gustav = _create(database, 999, username="GP")

    creator = gustav.creator()

    assert creator.get_primary_key() is None


def test_created_users(database: Database, seeded_users: str) -> None:
    me = User(database).find(1)
    _create(database, me.id, username="GP")
    _create(database, me.id, username="GK")
    _create(database, 3, username="XX")

    created = me.created_users()

    assert [u.username for u in created] == ["GP", "GK"]


def test_delete_and_reload(database: Database, seeded_users: str) -> None:
    gustav = _create(database, 1, username="GP")
    key = gustav.id

    gustav.delete()

    assert gustav.last_query == f"DELETE FROM users WHERE id = {key}"
    assert [u.id for u in User(database).all()] == [1, 2, 3, 4]
