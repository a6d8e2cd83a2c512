"""Database adapters: structure introspection and the read-only query store."""

from .introspection import introspect_database
from .store import PostgresStore, RelationalStore

__all__ = ["PostgresStore", "RelationalStore", "introspect_database"]
