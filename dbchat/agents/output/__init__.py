"""Output agents."""

from .summarizer import ResultSummarizer

__all__ = ["ResultSummarizer"]
