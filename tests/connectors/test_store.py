"""Tests for the psycopg-backed PostgresStore."""

from unittest.mock import AsyncMock, Mock, patch

import psycopg
import pytest

from dbchat.connectors.store import (
    EXECUTE_QUERY,
    PLAN_ONLY_QUERY,
    READ_ONLY_OPTIONS,
    PostgresStore,
)
from dbchat.schema.models import DatabaseStructure
from dbchat.utils.error_handler import DatabaseError


def _mock_connection(row=None, execute_error=None):
    conn = Mock()
    conn.close = AsyncMock()
    cursor = Mock()
    cursor.fetchone = AsyncMock(return_value=row)
    if execute_error is not None:
        conn.execute = AsyncMock(side_effect=execute_error)
    else:
        conn.execute = AsyncMock(return_value=cursor)
    return conn


class TestPostgresStore:
    """Test PostgresStore."""

    @pytest.mark.asyncio
    @patch("dbchat.connectors.store.psycopg.AsyncConnection.connect", new_callable=AsyncMock)
    async def test_execute_read_only_returns_result_column(self, mock_connect):
        """Rows come back from the execute_admin_query result column."""
        conn = _mock_connection(row={"result": [{"count": 3}]})
        mock_connect.return_value = conn
        store = PostgresStore("postgresql://admin@localhost/dojo")

        rows = await store.execute_read_only("SELECT count(*) FROM students")

        assert rows == [{"count": 3}]
        conn.execute.assert_awaited_once_with(
            EXECUTE_QUERY, ("SELECT count(*) FROM students",)
        )
        conn.close.assert_awaited_once()

    @pytest.mark.asyncio
    @patch("dbchat.connectors.store.psycopg.AsyncConnection.connect", new_callable=AsyncMock)
    async def test_session_is_read_only_on_the_server(self, mock_connect):
        """Every connection asks the server for read-only transactions."""
        mock_connect.return_value = _mock_connection(row={"result": None})
        store = PostgresStore("postgresql://admin@localhost/dojo", connect_timeout=5)

        await store.execute_read_only("SELECT nextval('students_id_seq')")

        kwargs = mock_connect.await_args.kwargs
        assert kwargs["options"] == READ_ONLY_OPTIONS
        assert "default_transaction_read_only=on" in kwargs["options"]
        assert kwargs["autocommit"] is True
        assert kwargs["connect_timeout"] == 5

    @pytest.mark.asyncio
    @patch("dbchat.connectors.store.psycopg.AsyncConnection.connect", new_callable=AsyncMock)
    async def test_plan_only_uses_explain_function(self, mock_connect):
        """The plan-only check goes through execute_explain_query."""
        conn = _mock_connection(row={"result": {"ok": True}})
        mock_connect.return_value = conn
        store = PostgresStore("postgresql://admin@localhost/dojo")

        response = await store.plan_only("SELECT 1")

        assert response == {"ok": True}
        conn.execute.assert_awaited_once_with(PLAN_ONLY_QUERY, ("SELECT 1",))

    @pytest.mark.asyncio
    @patch("dbchat.connectors.store.psycopg.AsyncConnection.connect", new_callable=AsyncMock)
    async def test_no_row_returns_none(self, mock_connect):
        """A missing row is reported as None."""
        mock_connect.return_value = _mock_connection(row=None)
        store = PostgresStore("postgresql://admin@localhost/dojo")

        assert await store.execute_read_only("SELECT 1") is None

    @pytest.mark.asyncio
    @patch("dbchat.connectors.store.psycopg.AsyncConnection.connect", new_callable=AsyncMock)
    async def test_database_error_is_wrapped(self, mock_connect):
        """Driver errors become DatabaseError and the connection is closed."""
        conn = _mock_connection(
            execute_error=psycopg.Error("Only SELECT statements are allowed")
        )
        mock_connect.return_value = conn
        store = PostgresStore("postgresql://admin@localhost/dojo")

        with pytest.raises(DatabaseError, match="Only SELECT statements are allowed"):
            await store.execute_read_only("SELECT 1")

        conn.close.assert_awaited_once()

    @pytest.mark.asyncio
    @patch("dbchat.connectors.store.psycopg.AsyncConnection.connect", new_callable=AsyncMock)
    async def test_connection_failure_is_wrapped(self, mock_connect):
        """Connection failures become DatabaseError."""
        mock_connect.side_effect = psycopg.OperationalError("connection refused")
        store = PostgresStore("postgresql://admin@localhost/dojo")

        with pytest.raises(DatabaseError, match="connection refused"):
            await store.plan_only("SELECT 1")

    @pytest.mark.asyncio
    @patch("dbchat.connectors.store.introspect_database", new_callable=AsyncMock)
    @patch("dbchat.connectors.store.psycopg.AsyncConnection.connect", new_callable=AsyncMock)
    async def test_describe_schema_introspects_configured_schema(
        self, mock_connect, mock_introspect
    ):
        """describe_schema delegates to introspection with the configured schema."""
        conn = _mock_connection()
        mock_connect.return_value = conn
        mock_introspect.return_value = DatabaseStructure()
        store = PostgresStore("postgresql://admin@localhost/dojo", schema="reporting")

        structure = await store.describe_schema()

        assert structure == DatabaseStructure()
        mock_introspect.assert_awaited_once_with(conn, "reporting")
