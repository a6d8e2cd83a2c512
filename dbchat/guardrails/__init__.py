"""Static safety checks applied to generated SQL."""

from .sql_security_guardrail import GuardrailResult, SecurityViolation, SQLSecurityGuardrail

__all__ = ["GuardrailResult", "SQLSecurityGuardrail", "SecurityViolation"]
