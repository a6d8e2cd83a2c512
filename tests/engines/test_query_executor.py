"""Tests for QueryExecutor and its error sanitizing."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from dbchat.engines.query_executor import (
    GENERIC_FAILURE_MESSAGE,
    READ_ONLY_POLICY_MESSAGE,
    TIMEOUT_MESSAGE,
    QueryExecutor,
    normalize_rows,
    sanitize_error,
)
from dbchat.utils.error_handler import DatabaseError, ExecutionFailed


class StepClock:
    """Clock advancing by a fixed step on every read."""

    def __init__(self, step: float):
        self.now = 100.0
        self.step = step

    def __call__(self) -> float:
        self.now += self.step
        return self.now


class TestNormalizeRows:
    """Test payload normalization."""

    def test_null_is_empty(self):
        """No matching rows come back as SQL NULL."""
        assert normalize_rows(None) == []

    def test_list_is_kept(self):
        """A JSON array is already a list of rows."""
        rows = [{"count": 3}]
        assert normalize_rows(rows) is rows

    def test_single_value_is_wrapped(self):
        """A lone JSON object becomes a one-element list."""
        assert normalize_rows({"count": 3}) == [{"count": 3}]


class TestSanitizeError:
    """Test mapping of raw database errors."""

    def test_policy_violation(self):
        """The read-only policy error gets its own message."""
        error = DatabaseError("ERROR: Only SELECT statements are allowed", "42501")

        failure = sanitize_error(error)

        assert str(failure) == READ_ONLY_POLICY_MESSAGE

    def test_sqlstate_hint(self):
        """Other database errors expose only the error code."""
        error = DatabaseError('relation "secret_table" does not exist', "42P01")

        failure = sanitize_error(error)

        assert str(failure) == f"{GENERIC_FAILURE_MESSAGE} (Hint: 42P01)"
        assert "secret_table" not in str(failure)
        assert failure.sqlstate == "42P01"

    def test_plain_exception(self):
        """Errors without a code get the generic message."""
        failure = sanitize_error(RuntimeError("connection reset by peer"))

        assert str(failure) == GENERIC_FAILURE_MESSAGE


class TestQueryExecutor:
    """Test QueryExecutor.execute."""

    @pytest.mark.asyncio
    async def test_returns_rows_and_elapsed_time(self, mock_store):
        """Rows are returned with the measured duration."""
        mock_store.execute_read_only = AsyncMock(return_value=[{"rank": "white", "count": 4}])
        executor = QueryExecutor(mock_store, clock=StepClock(0.25))

        result = await executor.execute("SELECT 1")

        assert result.rows == [{"rank": "white", "count": 4}]
        assert result.row_count == 1
        assert result.elapsed_seconds == pytest.approx(0.25)
        mock_store.execute_read_only.assert_awaited_once_with("SELECT 1")

    @pytest.mark.asyncio
    async def test_no_matching_rows(self, mock_store):
        """A NULL payload is an empty result, not a failure."""
        mock_store.execute_read_only = AsyncMock(return_value=None)
        executor = QueryExecutor(mock_store)

        result = await executor.execute("SELECT 1 WHERE false")

        assert result.rows == []

    @pytest.mark.asyncio
    async def test_database_error_is_sanitized(self, mock_store):
        """The raw database message never reaches the caller."""
        mock_store.execute_read_only = AsyncMock(
            side_effect=DatabaseError('column "ssn" does not exist', "42703")
        )
        executor = QueryExecutor(mock_store)

        with pytest.raises(ExecutionFailed) as exc_info:
            await executor.execute("SELECT ssn FROM students")

        assert "ssn" not in str(exc_info.value)
        assert "42703" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Slow queries fail with the timeout message."""

        async def slow_query(sql):
            await asyncio.sleep(1)

        store = Mock()
        store.execute_read_only = slow_query
        executor = QueryExecutor(store, timeout_seconds=0.01)

        with pytest.raises(ExecutionFailed, match="took too long"):
            await executor.execute("SELECT pg_sleep(5)")

        assert TIMEOUT_MESSAGE.startswith("The database query took too long")
