"""
DbChatAssistant - natural-language questions answered from the admin database.

Pipeline per question::

    schema cache -> retry controller (generate <-> validate) -> executor -> summarizer

Usage Examples:
    >>> assistant = DbChatAssistant.from_settings()
    >>> outcome = await assistant.answer("How many new families registered last month?")
    >>> outcome.to_response()["summary"]

Every call to ``answer`` returns exactly one AssistantSuccess or
AssistantFailure; no exception escapes it.
"""

from typing import Final

from loguru import logger

from dbchat.agents.output.summarizer import ResultSummarizer
from dbchat.agents.sql.generator import QueryGenerator
from dbchat.agents.sql.retry import RetryController
from dbchat.agents.sql.validator import QueryValidator
from dbchat.config.agent_model_config import get_agent_config
from dbchat.config.settings import DATABASE_URL, AssistantConfig, load_assistant_config
from dbchat.connectors.store import PostgresStore, RelationalStore
from dbchat.engines.query_executor import QueryExecutor
from dbchat.engines.types import (
    AssistantFailure,
    AssistantOutcome,
    AssistantSuccess,
    FailureSource,
)
from dbchat.guardrails.sql_security_guardrail import SQLSecurityGuardrail
from dbchat.llm.client import BedrockTextBackend, FailoverTextGenerator
from dbchat.schema.cache import SchemaCache
from dbchat.utils.error_handler import ErrorType, ExecutionFailed, SchemaUnavailable
from dbchat.utils.langfuse_client import observe

NO_QUERY_MESSAGE: Final[str] = "No query provided"
UNEXPECTED_MESSAGE: Final[str] = (
    "An unexpected error occurred while processing your question. Please try again."
)

EXAMPLE_QUESTIONS: Final[tuple[str, ...]] = (
    "How much sales tax has been collected in Q1?",
    "What was the total revenue from monthly payments in March?",
    "How many students are registered in each belt rank?",
    "What product has the highest sales this year?",
    "How many new families registered last month?",
)


class DbChatAssistant:
    """
    Orchestrates the question-answering pipeline.

    Responsibilities:
        1. Reject empty questions
        2. Fetch the (cached) schema description
        3. Resolve a validated query through the retry controller
        4. Execute it and summarize the rows

    Does NOT Handle:
        - Authentication or authorization of the caller
        - Rendering of the answer
    """

    __slots__ = ("schema_cache", "retry_controller", "executor", "summarizer")

    def __init__(
        self,
        schema_cache: SchemaCache,
        retry_controller: RetryController,
        executor: QueryExecutor,
        summarizer: ResultSummarizer,
    ) -> None:
        """
        Initialize with already wired components.

        Args:
            schema_cache: Provider of the schema description
            retry_controller: Generate/validate loop
            executor: Runs validated queries
            summarizer: Writes the final answer

        """
        self.schema_cache = schema_cache
        self.retry_controller = retry_controller
        self.executor = executor
        self.summarizer = summarizer

    @classmethod
    def from_settings(
        cls,
        store: RelationalStore | None = None,
        config: AssistantConfig | None = None,
    ) -> "DbChatAssistant":
        """
        Build an assistant from environment configuration.

        Args:
            store: Store to use instead of a PostgresStore on DATABASE_URL
            config: Overrides for the assistant limits

        Returns:
            Fully wired DbChatAssistant

        """
        settings = load_assistant_config(config)
        store = store or PostgresStore(
            DATABASE_URL, connect_timeout=settings["connect_timeout"]
        )

        timeout = settings["generation_timeout"]
        sql_client = FailoverTextGenerator(
            [
                BedrockTextBackend("SQLGenerator", timeout_seconds=timeout),
                BedrockTextBackend("SQLGeneratorFallback", timeout_seconds=timeout),
            ]
        )
        summary_client = BedrockTextBackend("ResultSummarizer", timeout_seconds=timeout)

        generator = QueryGenerator(
            sql_client, max_tokens=get_agent_config("SQLGenerator")["max_tokens"]
        )
        validator = QueryValidator(
            store, SQLSecurityGuardrail(), timeout_seconds=settings["validation_timeout"]
        )
        assistant = cls(
            schema_cache=SchemaCache(store),
            retry_controller=RetryController(
                generator, validator, max_retries=settings["max_retries"]
            ),
            executor=QueryExecutor(store, timeout_seconds=settings["execution_timeout"]),
            summarizer=ResultSummarizer(
                summary_client,
                max_result_chars=settings["summary_max_chars"],
                max_tokens=get_agent_config("ResultSummarizer")["max_tokens"],
            ),
        )
        logger.info(
            f"✅ DbChatAssistant initialized (max_retries={settings['max_retries']})"
        )
        return assistant

    @observe(name="db_chat_answer")
    async def answer(self, question: str | None) -> AssistantOutcome:
        """
        Answer one question.

        Args:
            question: Free-text admin question

        Returns:
            AssistantSuccess or AssistantFailure

        """
        original = question or ""
        if not original.strip():
            return AssistantFailure(
                original_question=original,
                reason=NO_QUERY_MESSAGE,
                error_type=ErrorType.NO_QUERY,
            )

        question = original.strip()
        logger.info(f"Processing question: {question}")

        try:
            return await self._answer(question, original)
        except Exception as e:
            logger.exception(f"Unexpected error while answering question: {e}")
            return AssistantFailure(
                original_question=original,
                reason=UNEXPECTED_MESSAGE,
                error_type=ErrorType.UNEXPECTED,
            )

    async def _answer(self, question: str, original: str) -> AssistantOutcome:
        try:
            schema = await self.schema_cache.get_schema_description()
        except SchemaUnavailable as e:
            return AssistantFailure(
                original_question=original,
                reason=str(e),
                error_type=ErrorType.SCHEMA_UNAVAILABLE,
            )

        resolution = await self.retry_controller.resolve(question, schema)
        if not resolution.accepted:
            error_type = (
                ErrorType.VALIDATION_REJECTED
                if resolution.last_failure == FailureSource.VALIDATOR
                else ErrorType.GENERATION_FAILED
            )
            return AssistantFailure(
                original_question=original,
                reason=resolution.error or "Failed to generate a valid SQL query.",
                error_type=error_type,
                last_attempted_sql=resolution.last_sql,
                attempts=resolution.attempts,
            )

        try:
            result = await self.executor.execute(resolution.sql)
        except ExecutionFailed as e:
            return AssistantFailure(
                original_question=original,
                reason=str(e),
                error_type=ErrorType.EXECUTION_FAILED,
                last_attempted_sql=resolution.sql,
                attempts=resolution.attempts,
            )

        summary = await self.summarizer.summarize(question, result.rows, schema)

        logger.info(
            f"✅ Answered in {resolution.attempts} attempt(s), "
            f"{result.row_count} rows, {result.elapsed_seconds:.3f}s"
        )
        return AssistantSuccess(
            sql=resolution.sql,
            rows=result.rows,
            elapsed_seconds=result.elapsed_seconds,
            summary=summary,
            original_question=original,
        )
