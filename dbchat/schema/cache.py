"""
Time-bounded cache of the schema description.

The cache owns a single SchemaCacheEntry and replaces it wholesale on refresh.
Concurrent requests that find the entry expired may each refresh it; the last
assignment wins and the extra introspection is wasted work only.
"""

import time
from collections.abc import Callable
from datetime import date
from typing import Final, Protocol

from loguru import logger

from dbchat.engines.types import SchemaCacheEntry, SchemaDescription
from dbchat.utils.error_handler import SchemaUnavailable

from .formatter import build_static_notes, format_schema_as_markdown
from .models import DatabaseStructure

SCHEMA_TTL_SECONDS: Final[float] = 3600.0


class SchemaSource(Protocol):
    """Anything that can introspect the database structure."""

    async def describe_schema(self) -> DatabaseStructure:
        """Return the current database structure."""
        ...


class SchemaCache:
    """Memoizes the schema description for SCHEMA_TTL_SECONDS."""

    __slots__ = ("_source", "_clock", "_today", "_entry")

    def __init__(
        self,
        source: SchemaSource,
        clock: Callable[[], float] = time.monotonic,
        today: Callable[[], date] = date.today,
    ) -> None:
        """
        Initialize the cache.

        Args:
            source: Introspection collaborator
            clock: Monotonic clock in seconds
            today: Provider of the date written into the static notes

        """
        self._source = source
        self._clock = clock
        self._today = today
        self._entry: SchemaCacheEntry | None = None

    @property
    def entry(self) -> SchemaCacheEntry | None:
        """Current cache entry, if any."""
        return self._entry

    def _is_fresh(self, entry: SchemaCacheEntry | None, now: float) -> bool:
        return entry is not None and now - entry.fetched_at < SCHEMA_TTL_SECONDS

    async def get_schema_description(self) -> SchemaDescription:
        """
        Return the cached description, rebuilding it when absent or expired.

        Returns:
            SchemaDescription including the static domain notes

        Raises:
            SchemaUnavailable: If introspection fails and nothing is cached

        """
        entry = self._entry
        now = self._clock()
        if self._is_fresh(entry, now):
            logger.debug("Using cached schema description")
            return entry.description

        logger.info("🔄 Refreshing schema description")
        try:
            structure = await self._source.describe_schema()
        except Exception as e:
            logger.error(f"Schema introspection failed: {e}")
            if entry is not None:
                logger.warning("⚠️ Serving stale schema description after refresh failure")
                return entry.description
            raise SchemaUnavailable(
                "Could not retrieve the database schema. Please try again later."
            ) from e

        text = format_schema_as_markdown(structure) + build_static_notes(self._today())
        description = SchemaDescription(text=text)
        self._entry = SchemaCacheEntry(description=description, fetched_at=now)
        logger.info(
            f"✅ Schema description cached ({len(structure.tables)} tables, "
            f"{len(structure.enums)} enums)"
        )
        return description

    def invalidate(self) -> None:
        """Drop the cached entry so the next call refreshes."""
        self._entry = None
