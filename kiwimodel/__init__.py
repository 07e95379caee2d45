from .db import Database, create_database
from .config import DbConfig, Field, ModelConfig
from .db.models import Operation
from .errors import (
    ConfigurationError,
    GuardError,
    KiwiError,
    NotFoundError,
    PersistenceError,
    StateError,
    ValidationError,
)
from .model import Model
from .audit import AuditedModel
from .users import User

__all__ = [
    "AuditedModel",
    "ConfigurationError",
    "Database",
    "DbConfig",
    "Field",
    "GuardError",
    "KiwiError",
    "Model",
    "ModelConfig",
    "NotFoundError",
    "Operation",
    "PersistenceError",
    "StateError",
    "User",
    "ValidationError",
    "create_database",
]
