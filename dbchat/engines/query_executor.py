"""
Query execution service for validated read-only SQL.

Handles execution with sanitized error reporting: the database's own message
is logged, and the caller only ever sees a policy message or a generic one.
"""

import asyncio
import time
from collections.abc import Callable
from typing import Any, Final

from loguru import logger

from dbchat.connectors.store import RelationalStore
from dbchat.utils.error_handler import ExecutionFailed

from .types import ExecutionResult

READ_ONLY_POLICY_MARKER: Final[str] = "only select statements are allowed"
READ_ONLY_POLICY_MESSAGE: Final[str] = (
    "The generated query was not a permitted read-only query. "
    "Please try rephrasing your request."
)
GENERIC_FAILURE_MESSAGE: Final[str] = (
    "The database query failed. Please check your question or try again later."
)
TIMEOUT_MESSAGE: Final[str] = (
    "The database query took too long to run. Please try a narrower question."
)


def normalize_rows(payload: Any) -> list[Any]:
    """
    Turn the JSON payload of a query into a list of rows.

    None (no rows matched) becomes an empty list; a single JSON value is
    wrapped in a one-element list.
    """
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    return [payload]


def sanitize_error(error: Exception) -> ExecutionFailed:
    """Map a raw execution error to a user-facing ExecutionFailed."""
    message = str(error)
    sqlstate = getattr(error, "sqlstate", None)

    if READ_ONLY_POLICY_MARKER in message.lower():
        return ExecutionFailed(READ_ONLY_POLICY_MESSAGE, sqlstate)
    if sqlstate:
        return ExecutionFailed(f"{GENERIC_FAILURE_MESSAGE} (Hint: {sqlstate})", sqlstate)
    return ExecutionFailed(GENERIC_FAILURE_MESSAGE)


class QueryExecutor:
    """Runs validated queries through the store's read-only entry point."""

    def __init__(
        self,
        store: RelationalStore,
        timeout_seconds: float | None = 60.0,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        """
        Initialize the executor.

        Args:
            store: Store exposing execute_read_only
            timeout_seconds: Upper bound for one execution, None for no bound
            clock: Clock used to measure elapsed time

        """
        self.store = store
        self.timeout_seconds = timeout_seconds
        self.clock = clock

    async def execute(self, sql: str) -> ExecutionResult:
        """
        Execute a validated query.

        Args:
            sql: SQL that previously received a Valid outcome

        Returns:
            ExecutionResult with rows and elapsed seconds

        Raises:
            ExecutionFailed: With a sanitized message

        """
        logger.info(f"Executing SQL: {sql[:100]}...")
        started = self.clock()
        try:
            payload = await asyncio.wait_for(
                self.store.execute_read_only(sql), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Query execution timed out after {self.timeout_seconds}s")
            raise ExecutionFailed(TIMEOUT_MESSAGE) from e
        except Exception as e:
            logger.error(f"Query execution failed: {e}")
            raise sanitize_error(e) from e
        elapsed = self.clock() - started

        rows = normalize_rows(payload)
        logger.info(f"✅ Query returned {len(rows)} rows in {elapsed:.3f}s")
        return ExecutionResult(rows=rows, elapsed_seconds=elapsed)
