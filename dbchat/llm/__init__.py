"""Text-generation clients used by the generator and summarizer."""

from .client import BedrockTextBackend, FailoverTextGenerator, TextGenerationClient

__all__ = ["BedrockTextBackend", "FailoverTextGenerator", "TextGenerationClient"]
