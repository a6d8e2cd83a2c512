"""
Bounded generate/validate loop.

State machine::

    GENERATING(n) --candidate--> VALIDATING(n) --valid--> ACCEPTED
         |                            |
         | no candidate / failure     | invalid(reason)
         v                            v
    GENERATING(n+1) <-----------------+      (or EXHAUSTED once n == max_retries)

Each regeneration receives the rejected SQL (if any) and the reason it was
rejected, so the model can repair its own output.
"""

from typing import Final

from loguru import logger

from dbchat.engines.types import (
    FailureSource,
    GenerationAttempt,
    RetryState,
    SchemaDescription,
    SQLResolution,
)
from dbchat.utils.error_handler import GenerationFailed

from .generator import QueryGenerator
from .validator import QueryValidator

NO_CANDIDATE_ERROR: Final[str] = "LLM failed to generate SQL"


class RetryController:
    """Drives QueryGenerator and QueryValidator until acceptance or exhaustion."""

    def __init__(
        self,
        generator: QueryGenerator,
        validator: QueryValidator,
        max_retries: int = 1,
    ) -> None:
        """
        Initialize the controller.

        Args:
            generator: Produces candidate queries
            validator: Checks candidates without running them
            max_retries: Regenerations allowed after the first attempt

        """
        if max_retries < 0:
            raise ValueError("max_retries must be zero or greater")
        self.generator = generator
        self.validator = validator
        self.max_retries = max_retries

    @property
    def max_attempts(self) -> int:
        """Upper bound on generator calls per question."""
        return self.max_retries + 1

    async def resolve(self, question: str, schema: SchemaDescription) -> SQLResolution:
        """
        Produce a validated query for the question.

        Args:
            question: Admin question
            schema: Schema description used for generation

        Returns:
            SQLResolution in state ACCEPTED with the SQL, or EXHAUSTED with
            the last attempted SQL and the last error

        """
        previous_sql: str | None = None
        previous_error: str | None = None
        last_sql: str | None = None
        last_source: FailureSource | None = None

        for attempt_index in range(self.max_attempts):
            attempt = GenerationAttempt(
                question=question,
                attempt_index=attempt_index,
                previous_sql=previous_sql,
                previous_error=previous_error,
            )

            try:
                candidate = await self.generator.generate(question, schema, attempt)
            except GenerationFailed as e:
                candidate = None
                previous_error = str(e)
            else:
                if candidate is None:
                    previous_error = NO_CANDIDATE_ERROR

            if candidate is None:
                previous_sql = None
                last_source = FailureSource.GENERATOR
                logger.warning(
                    f"⚠️ Attempt {attempt_index + 1}/{self.max_attempts}: "
                    f"no candidate ({previous_error})"
                )
                continue

            last_sql = candidate
            outcome = await self.validator.validate(candidate)
            if outcome.valid:
                logger.info(f"✅ SQL accepted on attempt {attempt_index + 1}")
                return SQLResolution(
                    status=RetryState.ACCEPTED,
                    sql=candidate,
                    last_sql=candidate,
                    attempts=attempt_index + 1,
                )

            previous_sql = candidate
            previous_error = outcome.reason
            last_source = FailureSource.VALIDATOR
            logger.warning(
                f"⚠️ Attempt {attempt_index + 1}/{self.max_attempts} rejected: "
                f"{outcome.reason}"
            )

        message = (
            f"Failed to generate a valid SQL query after {self.max_attempts} "
            f"attempts. Last error: {previous_error}"
        )
        logger.error(message)
        return SQLResolution(
            status=RetryState.EXHAUSTED,
            last_sql=last_sql,
            error=message,
            attempts=self.max_attempts,
            last_failure=last_source,
        )
