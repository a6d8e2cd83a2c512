"""Output prompt builders."""

from .summarizer import SummarizerPrompts

__all__ = ["SummarizerPrompts"]
