"""
Result summarizer producing a one or two sentence answer.

Summarization is best effort: every failure is downgraded to an apology
string so that a query which ran successfully is never reported as failed.
"""

from typing import Any, Final

from loguru import logger

from dbchat.engines.types import SchemaDescription
from dbchat.llm.client import TextGenerationClient
from dbchat.utils.error_handler import SafetyBlocked, SummarizationFailed

from ..prompt_builders.output.summarizer import SummarizerPrompts

SUMMARY_FALLBACK: Final[str] = "Could not generate a summary for these results."
SUMMARY_SAFETY_FALLBACK: Final[str] = (
    "The summary could not be generated due to safety filters."
)


class ResultSummarizer:
    """Summarizes query results in plain language."""

    def __init__(
        self,
        client: TextGenerationClient,
        max_result_chars: int = 4000,
        max_tokens: int = 150,
    ) -> None:
        """
        Initialize the summarizer.

        Args:
            client: Text-generation client
            max_result_chars: Serialized result budget before truncation
            max_tokens: Output budget for the summary

        """
        self.client = client
        self.max_result_chars = max_result_chars
        self.max_tokens = max_tokens

    async def summarize(
        self, question: str, rows: Any, schema: SchemaDescription
    ) -> str:
        """Return a short answer to the question; never raises."""
        try:
            results_text, truncated = SummarizerPrompts.serialize_results(
                rows, self.max_result_chars
            )
        except (TypeError, ValueError) as e:
            logger.error(f"Could not serialize results for summary: {e}")
            return SUMMARY_FALLBACK

        if truncated:
            logger.info(
                f"Results truncated to {self.max_result_chars} characters for summary"
            )

        try:
            return await self._request_summary(question, results_text, schema)
        except SafetyBlocked as e:
            logger.warning(f"⚠️ Summary blocked by safety filters: {e}")
            return SUMMARY_SAFETY_FALLBACK
        except Exception as e:
            logger.error(f"Summary generation failed: {e}")
            return SUMMARY_FALLBACK

    async def _request_summary(
        self, question: str, results_text: str, schema: SchemaDescription
    ) -> str:
        summary = await self.client.generate(
            SummarizerPrompts.build_system_prompt(schema),
            SummarizerPrompts.build_task_prompt(question, results_text),
            max_tokens=self.max_tokens,
        )
        summary = (summary or "").strip()
        if not summary:
            raise SummarizationFailed("Summary model returned empty text")
        return summary
