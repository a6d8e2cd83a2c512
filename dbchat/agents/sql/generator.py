"""
SQL generator turning admin questions into candidate SELECT statements.

Generation is grounded on the cached schema description. The raw model output
is cleaned and checked for a SELECT prefix; anything else is reported as "no
usable candidate" (None) rather than as an error.
"""

import re
from dataclasses import replace
from typing import Final

from loguru import logger

from dbchat.engines.types import GenerationAttempt, SchemaDescription
from dbchat.llm.client import TextGenerationClient
from dbchat.utils.error_handler import (
    GenerationFailed,
    SafetyBlocked,
    TextGenerationError,
)
from dbchat.utils.langfuse_client import observe

from ..prompt_builders.prompts.sql_generator import UNSUPPORTED_SENTINEL
from ..prompt_builders.sql.generator import SQLGeneratorPrompts

SAFETY_FILTER_MESSAGE: Final[str] = (
    "The query could not be processed due to safety filters."
)
GENERATION_FAILED_MESSAGE: Final[str] = (
    "Failed to generate SQL query from natural language."
)

_FENCE_RE = re.compile(r"```[a-zA-Z]*[ \t]*\n|```")
_LINE_COMMENT_RE = re.compile(r"--.*$", re.MULTILINE)


def clean_generated_sql(raw: str | None) -> str | None:
    """
    Normalize model output into a candidate query.

    Args:
        raw: Text returned by the model

    Returns:
        Cleaned SELECT statement, or None when the output is the UNSUPPORTED
        sentinel, empty, or does not start with SELECT

    """
    if raw is None:
        return None

    text = raw.strip()
    if not text or text.upper() == UNSUPPORTED_SENTINEL:
        return None

    text = _FENCE_RE.sub("", text)
    text = _LINE_COMMENT_RE.sub("", text).strip()
    text = text.rstrip().rstrip(";").rstrip()

    if text.upper() == UNSUPPORTED_SENTINEL:
        return None
    if not text.upper().startswith("SELECT"):
        logger.warning(f"⚠️ Discarding non-SELECT candidate: {text[:80]}")
        return None
    return text


class QueryGenerator:
    """Generates one candidate query per attempt."""

    def __init__(self, client: TextGenerationClient, max_tokens: int = 500) -> None:
        """
        Initialize the generator.

        Args:
            client: Text-generation client, usually a FailoverTextGenerator
            max_tokens: Output budget for the SQL

        """
        self.client = client
        self.max_tokens = max_tokens

    @observe(name="sql_generation")
    async def generate(
        self, question: str, schema: SchemaDescription, attempt: GenerationAttempt
    ) -> str | None:
        """
        Produce a candidate query for the question.

        Args:
            question: Admin question
            schema: Schema description used as grounding
            attempt: Attempt index and feedback from the previous attempt

        Returns:
            Cleaned SELECT statement, or None if nothing usable came back

        Raises:
            GenerationFailed: If the generation call failed for this attempt

        """
        attempt = replace(attempt, question=question)
        system_prompt = SQLGeneratorPrompts.build_system_prompt(schema)
        task_prompt = SQLGeneratorPrompts.build_task_prompt(attempt)

        logger.info(
            f"🔄 Generating SQL (attempt {attempt.attempt_index + 1}"
            f"{', with feedback' if attempt.is_retry else ''})"
        )

        try:
            raw = await self.client.generate(
                system_prompt, task_prompt, max_tokens=self.max_tokens
            )
        except SafetyBlocked as e:
            logger.error(f"SQL generation blocked by safety filters: {e}")
            raise GenerationFailed(SAFETY_FILTER_MESSAGE) from e
        except TextGenerationError as e:
            logger.error(f"SQL generation failed: {e}")
            raise GenerationFailed(GENERATION_FAILED_MESSAGE) from e

        candidate = clean_generated_sql(raw)
        if candidate is None:
            logger.warning("⚠️ Model returned no usable SQL")
        else:
            logger.info(f"Generated SQL: {candidate[:200]}")
        return candidate
