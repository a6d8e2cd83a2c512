"""Result summarizer prompt building utilities."""

from typing import Any, Final

from dbchat.engines.types import SchemaDescription
from dbchat.utils.data_processors import dump_rows, truncate_text

from ..prompts import Prompts

TRUNCATION_MARKER: Final[str] = "\n... (results truncated)"
NO_DATA_TEXT: Final[str] = "No data returned."


class SummarizerPrompts:
    """Utility class for building result summary prompts."""

    @staticmethod
    def build_system_prompt(schema: SchemaDescription) -> str:
        """Combine the schema description with the summary rules."""
        return f"{schema.text}\n\n{Prompts.RESULT_SUMMARIZER}"

    @staticmethod
    def serialize_results(rows: Any, max_chars: int) -> tuple[str, bool]:
        """
        Serialize rows to indented JSON within a character budget.

        Args:
            rows: Result rows
            max_chars: Character budget before truncation

        Returns:
            Tuple of (text, truncated flag)

        """
        if rows is None:
            return NO_DATA_TEXT, False
        return truncate_text(dump_rows(rows), max_chars, TRUNCATION_MARKER)

    @staticmethod
    def build_task_prompt(question: str, results_text: str) -> str:
        """Build the per-request summary task."""
        return f"""Original Question: "{question}"

Query Results (JSON format, potentially truncated):
```json
{results_text}
```

Based on the original question and the query results above, write a concise and direct natural language answer to the question."""
