"""Central registry for system prompts."""

from __future__ import annotations

from . import result_summarizer, sql_generator

PROMPT_REGISTRY = {
    "SQL_GENERATOR": sql_generator.PROMPT,
    "RESULT_SUMMARIZER": result_summarizer.PROMPT,
}


class Prompts:
    """Attribute-style access to system prompts."""

    SQL_GENERATOR = PROMPT_REGISTRY["SQL_GENERATOR"]
    RESULT_SUMMARIZER = PROMPT_REGISTRY["RESULT_SUMMARIZER"]


__all__ = ["PROMPT_REGISTRY", "Prompts"]
