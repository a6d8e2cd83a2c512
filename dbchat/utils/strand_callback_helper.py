"""Helper utilities for Strands agent usage tracking and Langfuse integration."""

from collections.abc import Callable
from typing import Any

from loguru import logger


def create_usage_callback() -> tuple[Callable, dict[str, Any]]:
    """
    Create callback handler for Strands agent usage tracking.

    Returns:
        Tuple of (callback_function, usage_container_dict)

    """
    usage_container: dict[str, Any] = {"last_usage": None}

    def usage_callback(**kwargs: Any) -> None:
        """Capture token usage when the agent reports it."""
        if "usage" in kwargs:
            usage_container["last_usage"] = kwargs["usage"]
            logger.debug(f"📊 Captured usage from Strands agent: {kwargs['usage']}")

    return usage_callback, usage_container


def update_langfuse_with_usage(
    usage_container: dict[str, Any],
    model_id: str,
    agent_name: str,
    langfuse_context,
) -> None:
    """
    Attach captured token usage to the current Langfuse observation.

    Args:
        usage_container: Container filled by the usage callback
        model_id: Model identifier reported to Langfuse
        agent_name: Name of the agent for logging
        langfuse_context: Langfuse context module, or None when tracing is off

    """
    usage = usage_container.get("last_usage")
    if not langfuse_context or not usage:
        return

    input_tokens = usage.get("inputTokens", usage.get("input_tokens", 0))
    output_tokens = usage.get("outputTokens", usage.get("output_tokens", 0))
    logger.debug(
        f"📊 {agent_name}: input={input_tokens}, output={output_tokens} tokens"
    )
    langfuse_context.update_current_observation(
        model=model_id,
        usage_details={
            "input": input_tokens,
            "output": output_tokens,
            "total": input_tokens + output_tokens,
        },
    )
