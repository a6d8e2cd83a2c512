"""
Relational store adapter for the query assistant.

The assistant needs exactly three things from the database: its structure,
a plan-only check of a candidate query and read-only execution of a validated
one. Plan-only checks and execution go through the server-side functions
``execute_explain_query`` and ``execute_admin_query`` (see the alembic
migration), which refuse anything but SELECT statements.
"""

from contextlib import asynccontextmanager
from typing import Any, Protocol

import psycopg
from beartype import beartype
from icontract import require
from loguru import logger
from psycopg.rows import dict_row

from dbchat.schema.models import DatabaseStructure
from dbchat.utils.error_handler import DatabaseError

from .introspection import introspect_database

READ_ONLY_OPTIONS = "-c default_transaction_read_only=on"
PLAN_ONLY_QUERY = "SELECT execute_explain_query(%s) AS result"
EXECUTE_QUERY = "SELECT execute_admin_query(%s) AS result"


class RelationalStore(Protocol):
    """Outbound operations the assistant performs against the database."""

    async def describe_schema(self) -> DatabaseStructure:
        """Return the structure of the queried schema."""
        ...

    async def plan_only(self, sql: str) -> Any:
        """Plan the query without running it; returns {"ok": ...} on success."""
        ...

    async def execute_read_only(self, sql: str) -> Any:
        """Run a SELECT and return its rows as decoded JSON."""
        ...


@beartype
class PostgresStore:
    """
    PostgreSQL implementation of RelationalStore using psycopg 3.

    Each call opens its own short-lived connection, so one store instance can
    serve requests running on different event loops. The session starts with
    default_transaction_read_only on, so every autocommitted statement runs in
    a read-only transaction on the server.

    Attributes:
        conninfo: libpq connection string or postgresql:// URL
        schema: Schema described by describe_schema
        connect_timeout: Seconds allowed to establish a connection

    """

    __slots__ = ("conninfo", "schema", "connect_timeout")

    @require(lambda conninfo: len(conninfo) > 0, "Connection string cannot be empty")
    def __init__(
        self, conninfo: str, schema: str = "public", connect_timeout: int = 10
    ) -> None:
        """
        Initialize the store.

        Args:
            conninfo: libpq connection string or postgresql:// URL
            schema: Schema described by describe_schema
            connect_timeout: Seconds allowed to establish a connection

        """
        self.conninfo = conninfo
        self.schema = schema
        self.connect_timeout = connect_timeout

    @asynccontextmanager
    async def _connect(self):
        try:
            conn = await psycopg.AsyncConnection.connect(
                self.conninfo,
                row_factory=dict_row,
                autocommit=True,
                connect_timeout=self.connect_timeout,
                options=READ_ONLY_OPTIONS,
            )
        except psycopg.Error as e:
            logger.error(f"Failed to connect to PostgreSQL: {e}")
            raise DatabaseError(str(e), getattr(e, "sqlstate", None)) from e

        try:
            yield conn
        finally:
            await conn.close()

    async def describe_schema(self) -> DatabaseStructure:
        """
        Introspect the configured schema.

        Raises:
            DatabaseError: If the connection or any introspection query fails

        """
        async with self._connect() as conn:
            try:
                return await introspect_database(conn, self.schema)
            except psycopg.Error as e:
                logger.error(f"Schema introspection query failed: {e}")
                raise DatabaseError(str(e), e.sqlstate) from e

    @require(lambda sql: len(sql.strip()) > 0, "SQL cannot be empty")
    async def plan_only(self, sql: str) -> Any:
        """
        Ask the server to plan the query without running it.

        Returns:
            Decoded JSON returned by execute_explain_query

        Raises:
            DatabaseError: If the call itself fails

        """
        return await self._call_function(PLAN_ONLY_QUERY, sql)

    @require(lambda sql: len(sql.strip()) > 0, "SQL cannot be empty")
    async def execute_read_only(self, sql: str) -> Any:
        """
        Run a validated SELECT through execute_admin_query.

        Returns:
            Decoded JSON rows; None when the query matched nothing

        Raises:
            DatabaseError: With the server message and SQLSTATE on failure

        """
        return await self._call_function(EXECUTE_QUERY, sql)

    async def _call_function(self, statement: str, sql: str) -> Any:
        async with self._connect() as conn:
            try:
                cursor = await conn.execute(statement, (sql,))
                row = await cursor.fetchone()
            except psycopg.Error as e:
                raise DatabaseError(str(e), e.sqlstate) from e
        return row["result"] if row else None
