"""Database structure introspection models, markdown rendering and caching."""

from .cache import SCHEMA_TTL_SECONDS, SchemaCache, SchemaSource
from .formatter import build_static_notes, format_schema_as_markdown
from .models import DatabaseStructure

__all__ = [
    "DatabaseStructure",
    "SCHEMA_TTL_SECONDS",
    "SchemaCache",
    "SchemaSource",
    "build_static_notes",
    "format_schema_as_markdown",
]
