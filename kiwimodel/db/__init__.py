from .clause import Clause, quote
from .database import Database, create_database
from .models import Lookup, LookupStatus, Operation
from .session import DbSession

__all__ = [
    "Clause",
    "Database",
    "DbSession",
    "Lookup",
    "LookupStatus",
    "Operation",
    "create_database",
    "quote",
]
