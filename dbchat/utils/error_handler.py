"""
Error taxonomy for the query assistant.

Every failure raised inside the pipeline derives from ServiceError so callers
can tell pipeline failures apart from programming errors. Messages carried by
these exceptions are safe to show to an administrator; raw database and
provider errors are only ever logged.
"""

from enum import Enum


class ErrorType(Enum):
    """Classification attached to a failed answer."""

    NO_QUERY = "no_query"
    SCHEMA_UNAVAILABLE = "schema_unavailable"
    GENERATION_FAILED = "generation_failed"
    VALIDATION_REJECTED = "validation_rejected"
    EXECUTION_FAILED = "execution_failed"
    UNEXPECTED = "unexpected_error"


class ServiceError(Exception):
    """Base exception for service-level errors."""


class ConfigurationError(ServiceError):
    """Exception for configuration-related errors."""


class DatabaseError(ServiceError):
    """Exception for database-related errors, raw message included."""

    def __init__(self, message: str, sqlstate: str | None = None) -> None:
        """
        Initialize with the driver message.

        Args:
            message: Message reported by the database or driver
            sqlstate: PostgreSQL error code, when the server sent one

        """
        super().__init__(message)
        self.sqlstate = sqlstate


class SchemaUnavailable(ServiceError):
    """Structural introspection failed and no cached description exists."""


class GenerationFailed(ServiceError):
    """The text-generation call for one attempt failed."""


class ExecutionFailed(ServiceError):
    """Execution of a validated query failed; the message is already sanitized."""

    def __init__(self, message: str, sqlstate: str | None = None) -> None:
        """
        Initialize with a user-facing message.

        Args:
            message: Sanitized message safe to return to the caller
            sqlstate: Optional PostgreSQL error code used as a hint

        """
        super().__init__(message)
        self.sqlstate = sqlstate


class SummarizationFailed(ServiceError):
    """The summary call failed; always downgraded to an apology string."""


class TextGenerationError(ServiceError):
    """Exception for text-generation provider errors."""


class RateLimited(TextGenerationError):
    """The provider rejected the call because of rate limiting."""


class SafetyBlocked(TextGenerationError):
    """The provider refused to answer because of content-safety filters."""
