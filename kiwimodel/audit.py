from __future__ import annotations

import time
from typing import Any

from .config import Field, ModelConfig
from .model import Model

AUDIT_FIELDS = (
    Field("updated_at", int, 0),
    Field("updated_by", int, 0),
    Field("created_at", int, 0),
    Field("created_by", int, 0),
)


class AuditedModel(Model):
    """
    Model that records who created and last updated a row, and when.

    The four audit fields are appended to the declared schema and guarded, so
    they are only ever set through create_as() and update_as().
    Timestamps are unix seconds.
    """

    @classmethod
    def _resolve_config(cls) -> ModelConfig:
        return super()._resolve_config().extend(
            AUDIT_FIELDS, guarded=(f.name for f in AUDIT_FIELDS)
        )

    def create_as(self, actor: Any) -> "AuditedModel":
        previous = self._audit_values()
        now = int(time.time())
        self.created_at = now
        self.created_by = actor
        self.updated_at = now
        self.updated_by = actor
        try:
            return self.create()
        except Exception:
            self._data.update(previous)
            raise

    def update_as(self, actor: Any) -> "AuditedModel":
        """
        Stamp the updated pair if anything changed, then update().

        Without pending changes update() raises StateError; check changed()
        first if that is not wanted.
        """
        previous = self._audit_values()
        if self.changed():
            self.updated_at = int(time.time())
            self.updated_by = actor
        try:
            return self.update()
        except Exception:
            self._data.update(previous)
            raise

    def _audit_values(self) -> dict[str, Any]:
        return {f.name: self._data[f.name] for f in AUDIT_FIELDS}
