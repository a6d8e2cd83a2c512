"""
Query validator checking candidates without running them.

A candidate first goes through the static SQL security guardrail; only
candidates it lets through are planned by the database via the plan-only
check. The planner's verdict is authoritative for syntax and for references
to tables and columns.
"""

import asyncio
from typing import Any, Final

from loguru import logger

from dbchat.connectors.store import RelationalStore
from dbchat.engines.types import ValidationOutcome
from dbchat.guardrails.sql_security_guardrail import SQLSecurityGuardrail

UNVERIFIABLE_REASON: Final[str] = "could not verify syntax"
UNEXPECTED_RESPONSE_REASON: Final[str] = "unexpected validation response"


class QueryValidator:
    """Validates candidate queries with the guardrail and the planner."""

    def __init__(
        self,
        store: RelationalStore,
        guardrail: SQLSecurityGuardrail | None = None,
        timeout_seconds: float = 15.0,
    ) -> None:
        """
        Initialize the validator.

        Args:
            store: Store exposing plan_only
            guardrail: Static checks run before the database call
            timeout_seconds: Upper bound for the plan-only call

        """
        self.store = store
        self.guardrail = guardrail or SQLSecurityGuardrail()
        self.timeout_seconds = timeout_seconds

    async def validate(self, sql: str) -> ValidationOutcome:
        """
        Check a candidate query.

        Args:
            sql: Candidate SELECT statement

        Returns:
            ValidationOutcome; Invalid carries the reason for regeneration

        """
        guardrail_result = self.guardrail.validate(sql)
        for violation in guardrail_result.violations:
            if violation not in guardrail_result.blocking:
                logger.debug(f"Guardrail note ({violation.type}): {violation.description}")
        if not guardrail_result.is_safe:
            reason = guardrail_result.describe()
            logger.warning(f"⚠️ Guardrail rejected candidate: {reason}")
            return ValidationOutcome.reject(reason)

        try:
            response = await asyncio.wait_for(
                self.store.plan_only(sql), timeout=self.timeout_seconds
            )
        except Exception as e:
            logger.error(f"Plan-only check failed: {e!r}")
            return ValidationOutcome.reject(UNVERIFIABLE_REASON)

        return self._interpret(response)

    @staticmethod
    def _interpret(response: Any) -> ValidationOutcome:
        """Map the plan-only response to a ValidationOutcome."""
        if not isinstance(response, dict) or "ok" not in response:
            logger.error(f"Unexpected plan-only response: {response!r}")
            return ValidationOutcome.reject(UNEXPECTED_RESPONSE_REASON)

        if response["ok"] is True:
            logger.info("✅ Candidate passed plan-only check")
            return ValidationOutcome.accept()

        message = response.get("message")
        if response["ok"] is False and isinstance(message, str) and message:
            logger.warning(f"⚠️ Planner rejected candidate: {message}")
            return ValidationOutcome.reject(message)

        logger.error(f"Unexpected plan-only response: {response!r}")
        return ValidationOutcome.reject(UNEXPECTED_RESPONSE_REASON)
