from __future__ import annotations

from typing import Sequence

from .audit import AuditedModel
from .config import Field, ModelConfig
from .db.models import Operation


def validate_user(user: "User", operation: Operation) -> Sequence[str]:
    errors = []
    if operation in (Operation.CREATE, Operation.UPDATE):
        if not user.username:
            errors.append("A username is required")
    return errors


class User(AuditedModel):
    """A row of ``users``. Relations are plain lookups on the same table."""

    config = ModelConfig(
        table="users",
        primary_key="id",
        fields=(
            Field("id", int),
            Field("username"),
            Field("firstname"),
            Field("lastname"),
            Field("friend_id", int),
            Field("is_admin", bool, False),
        ),
        guarded=frozenset({"is_admin"}),
        validator=validate_user,
    )

    def friend(self) -> "User":
        return self.new().find_or_fail(self.friend_id)

    def creator(self) -> "User":
        return self.new().find(self.created_by)

    def updater(self) -> "User":
        return self.new().find(self.updated_by)

    def created_users(self) -> list["User"]:
        return self.new().where("created_by = ", self.id).all()
