"""
Langfuse configuration and decorator setup.

Tracing is switched on only when LANGFUSE_SECRET_KEY, LANGFUSE_PUBLIC_KEY and
LANGFUSE_HOST are all set. Otherwise ``observe`` is a pass-through decorator
and ``langfuse_context`` is None.
"""

import os

from dotenv import load_dotenv
from loguru import logger

load_dotenv()


def langfuse_configured() -> bool:
    """Return True when all Langfuse credentials are present."""
    required = ("LANGFUSE_SECRET_KEY", "LANGFUSE_PUBLIC_KEY", "LANGFUSE_HOST")
    missing = [name for name in required if not os.getenv(name)]
    if missing:
        logger.debug(f"Langfuse tracing disabled, missing: {', '.join(missing)}")
        return False
    return True


langfuse_enabled = langfuse_configured()

if langfuse_enabled:
    from langfuse.decorators import langfuse_context, observe

    logger.info("✅ Langfuse @observe decorator ready")
else:

    def observe(**kwargs):
        """
        No-op decorator when Langfuse is not configured.

        Args:
            **kwargs: Arbitrary keyword arguments ignored by this fallback

        Returns:
            A decorator that returns the original function unchanged

        """

        def decorator(func):
            return func

        return decorator

    langfuse_context = None


__all__ = ["langfuse_context", "langfuse_enabled", "observe"]
