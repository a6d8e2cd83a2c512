"""Tests for QueryValidator."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from dbchat.agents.sql.validator import (
    UNEXPECTED_RESPONSE_REASON,
    UNVERIFIABLE_REASON,
    QueryValidator,
)
from dbchat.utils.error_handler import DatabaseError


class TestQueryValidator:
    """Test QueryValidator."""

    @pytest.mark.asyncio
    async def test_clean_plan_is_valid(self, mock_store):
        """A clean plan yields Valid and the query is only planned."""
        validator = QueryValidator(mock_store)

        outcome = await validator.validate("SELECT id FROM students")

        assert outcome.valid
        mock_store.plan_only.assert_awaited_once_with("SELECT id FROM students")
        mock_store.execute_read_only.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_planner_error_is_invalid_with_message(self, mock_store):
        """Planner errors become Invalid carrying the planner message."""
        mock_store.plan_only = AsyncMock(
            return_value={"ok": False, "message": 'column "nme" does not exist'}
        )
        validator = QueryValidator(mock_store)

        outcome = await validator.validate("SELECT nme FROM students")

        assert not outcome.valid
        assert outcome.reason == 'column "nme" does not exist'

    @pytest.mark.asyncio
    async def test_call_failure_is_unverifiable(self, mock_store):
        """Transport failures of the check become 'could not verify syntax'."""
        mock_store.plan_only = AsyncMock(side_effect=DatabaseError("connection reset"))
        validator = QueryValidator(mock_store)

        outcome = await validator.validate("SELECT 1")

        assert outcome.reason == UNVERIFIABLE_REASON

    @pytest.mark.asyncio
    async def test_timeout_is_unverifiable(self, mock_store):
        """A check exceeding its timeout is treated like any other failure."""

        async def slow_plan(sql):
            await asyncio.sleep(10)

        mock_store.plan_only = slow_plan
        validator = QueryValidator(mock_store, timeout_seconds=0.01)

        outcome = await validator.validate("SELECT 1")

        assert outcome.reason == UNVERIFIABLE_REASON

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [None, [], "ok", {"plan": []}, {"ok": False}, {"ok": "yes"}],
    )
    async def test_unexpected_response_shape(self, mock_store, response):
        """Unexpected response shapes are Invalid."""
        mock_store.plan_only = AsyncMock(return_value=response)
        validator = QueryValidator(mock_store)

        outcome = await validator.validate("SELECT 1")

        assert outcome.reason == UNEXPECTED_RESPONSE_REASON

    @pytest.mark.asyncio
    async def test_stacked_statements_rejected_without_database_call(self, mock_store):
        """Multi-statement candidates never reach the planner."""
        validator = QueryValidator(mock_store)

        outcome = await validator.validate("SELECT 1; DELETE FROM students")

        assert not outcome.valid
        assert "one statement" in outcome.reason
        mock_store.plan_only.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_dangerous_function_rejected(self, mock_store):
        """Sleeping functions are blocked by the guardrail."""
        validator = QueryValidator(mock_store)

        outcome = await validator.validate("SELECT pg_sleep(30)")

        assert not outcome.valid
        assert "pg_sleep" in outcome.reason
        mock_store.plan_only.assert_not_awaited()
