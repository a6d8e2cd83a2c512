"""SQL prompt builders."""

from .generator import SQLGeneratorPrompts

__all__ = ["SQLGeneratorPrompts"]
