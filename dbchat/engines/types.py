"""
Structured result types for the query assistant pipeline.

Eliminates sentinel strings and provides clear type safety between the
generator, validator, retry controller, executor and orchestrator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from typing_extensions import TypedDict

from dbchat.utils.error_handler import ErrorType


@dataclass(frozen=True)
class SchemaDescription:
    """Textual description of the database structure given to the models."""

    text: str

    def __str__(self) -> str:
        """Return the description text."""
        return self.text


@dataclass(frozen=True)
class SchemaCacheEntry:
    """Cached schema description and the clock reading it was built at."""

    description: SchemaDescription
    fetched_at: float


@dataclass(frozen=True)
class GenerationAttempt:
    """Input to one SQL generation call."""

    question: str
    attempt_index: int = 0
    previous_sql: str | None = None
    previous_error: str | None = None

    @property
    def is_retry(self) -> bool:
        """Return True if this attempt follows a failed one."""
        return self.attempt_index > 0


class ValidationStatus(Enum):
    """Status of a candidate query check."""

    VALID = "valid"
    INVALID = "invalid"


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating one candidate query."""

    status: ValidationStatus
    reason: str | None = None

    @property
    def valid(self) -> bool:
        """Return True if the candidate passed validation."""
        return self.status == ValidationStatus.VALID

    @classmethod
    def accept(cls) -> "ValidationOutcome":
        """Build a Valid outcome."""
        return cls(status=ValidationStatus.VALID)

    @classmethod
    def reject(cls, reason: str) -> "ValidationOutcome":
        """Build an Invalid outcome carrying the reason."""
        return cls(status=ValidationStatus.INVALID, reason=reason)


@dataclass
class ExecutionResult:
    """Rows returned by a validated query and how long the call took."""

    rows: list[Any]
    elapsed_seconds: float

    @property
    def row_count(self) -> int:
        """Number of rows returned."""
        return len(self.rows)


class RetryState(Enum):
    """Terminal states of the generate/validate loop."""

    ACCEPTED = "accepted"
    EXHAUSTED = "exhausted"


class FailureSource(Enum):
    """Which stage produced the last error seen by the retry loop."""

    GENERATOR = "generator"
    VALIDATOR = "validator"


@dataclass
class SQLResolution:
    """Terminal value of the retry loop."""

    status: RetryState
    sql: str | None = None
    last_sql: str | None = None
    error: str | None = None
    attempts: int = 0
    last_failure: FailureSource | None = None

    @property
    def accepted(self) -> bool:
        """Return True if a validated query was produced."""
        return self.status == RetryState.ACCEPTED


class ActionResponse(TypedDict, total=False):
    """JSON body returned to the admin form."""

    success: bool
    data: list[Any] | None
    sql: str | None
    summary: str | None
    executionTime: float | None
    error: str | None
    errorType: str | None
    originalQuery: str


@dataclass
class AssistantSuccess:
    """A question answered end to end."""

    sql: str
    rows: list[Any]
    elapsed_seconds: float
    summary: str
    original_question: str

    @property
    def success(self) -> bool:
        """Always True."""
        return True

    def to_response(self) -> ActionResponse:
        """Convert to the form response shape."""
        return {
            "success": True,
            "data": self.rows,
            "sql": self.sql,
            "summary": self.summary,
            "executionTime": self.elapsed_seconds,
            "originalQuery": self.original_question,
        }


@dataclass
class AssistantFailure:
    """A question that could not be answered."""

    original_question: str
    reason: str
    error_type: ErrorType
    last_attempted_sql: str | None = None
    attempts: int = 0

    @property
    def success(self) -> bool:
        """Always False."""
        return False

    def to_response(self) -> ActionResponse:
        """Convert to the form response shape."""
        return {
            "success": False,
            "error": self.reason,
            "errorType": self.error_type.value,
            "sql": self.last_attempted_sql,
            "originalQuery": self.original_question,
        }


AssistantOutcome = AssistantSuccess | AssistantFailure
