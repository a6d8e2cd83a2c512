"""
Prompt builders for the assistant's agents.

System prompts live in ``prompts``; per-request prompt assembly lives next to
the agent that uses it.
"""

from .output import SummarizerPrompts
from .sql import SQLGeneratorPrompts

__all__ = ["SQLGeneratorPrompts", "SummarizerPrompts"]
