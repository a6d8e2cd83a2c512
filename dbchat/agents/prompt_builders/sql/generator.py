"""
SQL generator prompt building utilities.

The system prompt carries the schema description and the generation rules and
stays identical across attempts. The task prompt changes per attempt: a plain
translation request first, then a repair request carrying the rejected SQL and
the reason it was rejected.
"""

from dbchat.engines.types import GenerationAttempt, SchemaDescription

from ..prompts import Prompts


class SQLGeneratorPrompts:
    """Utility class for building SQL generator prompts."""

    @staticmethod
    def build_system_prompt(schema: SchemaDescription) -> str:
        """
        Combine the schema description with the generation rules.

        Args:
            schema: Cached schema description, notes included

        Returns:
            System prompt text

        """
        return f"{schema.text}\n\n{Prompts.SQL_GENERATOR}"

    @staticmethod
    def build_task_prompt(attempt: GenerationAttempt) -> str:
        """
        Build the per-attempt task text.

        Args:
            attempt: Question plus any feedback from the previous attempt

        Returns:
            Task prompt text

        """
        if attempt.previous_sql and attempt.previous_error:
            return f"""The previous query written for this question was rejected.

Natural language query: "{attempt.question}"

Previous SQL:
{attempt.previous_sql}

Error:
{attempt.previous_error}

Fix the error and return the corrected PostgreSQL SELECT statement only."""

        if attempt.previous_error:
            return f"""Natural language query: "{attempt.question}"

The previous attempt did not produce a usable query ({attempt.previous_error}).
Return a single PostgreSQL SELECT statement only."""

        return f"""Natural language query: "{attempt.question}"

SQL Query:"""
