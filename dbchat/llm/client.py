"""
Text-generation clients backed by Strands agents on Amazon Bedrock.

``TextGenerationClient`` is the only contract the generator and summarizer
depend on. ``BedrockTextBackend`` talks to one model; ``FailoverTextGenerator``
tries several backends in order and moves on only when a backend is rate
limited.
"""

import asyncio
from typing import Any, Protocol

import boto3
from loguru import logger
from strands.agent import Agent
from strands.models.bedrock import BedrockModel
from strands.types.exceptions import ModelThrottledException

from dbchat.config.agent_model_config import get_agent_config
from dbchat.config.settings import BEDROCK_CONFIG
from dbchat.utils.error_handler import (
    RateLimited,
    SafetyBlocked,
    TextGenerationError,
)
from dbchat.utils.langfuse_client import langfuse_context, observe
from dbchat.utils.strand_callback_helper import (
    create_usage_callback,
    update_langfuse_with_usage,
)

SAFETY_STOP_REASONS = frozenset({"guardrail_intervened", "content_filtered"})


class TextGenerationClient(Protocol):
    """Anything that turns a system instruction and prompt into text."""

    async def generate(
        self, system_instruction: str, prompt: str, *, max_tokens: int | None = None
    ) -> str:
        """
        Generate text.

        Raises:
            RateLimited: Provider throttled the call
            SafetyBlocked: Provider refused on content-safety grounds
            TextGenerationError: Any other provider failure

        """
        ...


class BedrockTextBackend:
    """Single Bedrock model exposed as a TextGenerationClient."""

    def __init__(
        self,
        agent_name: str,
        model_id: str | None = None,
        aws_region: str | None = None,
        aws_profile: str | None = None,
        timeout_seconds: float = 60.0,
    ) -> None:
        """
        Initialize the backend from the agent model configuration.

        Args:
            agent_name: Key into ModelConfig, e.g. "SQLGenerator"
            model_id: Model identifier overriding the configured one
            aws_region: AWS region for Bedrock service
            aws_profile: Named AWS profile; the default credential chain when None
            timeout_seconds: Upper bound for one generation call

        """
        config = get_agent_config(agent_name, aws_region)

        self.agent_name = agent_name
        self.aws_region = aws_region or config["aws_region"]
        self.aws_profile = aws_profile or BEDROCK_CONFIG["aws_profile"]
        self.model_id = model_id or config["model_id"]
        self.temperature = config["temperature"]
        self.max_tokens = config["max_tokens"]
        self.timeout_seconds = timeout_seconds

        logger.info(f"✓ {agent_name} backend configured with {self.model_id}")

    def _build_agent(
        self, system_instruction: str, max_tokens: int, callback: Any
    ) -> Agent:
        """Build a fresh Strands agent; agents keep history, so one per call."""
        # BedrockModel takes either a session or a region, not both
        if self.aws_profile:
            location = {
                "boto_session": boto3.Session(
                    profile_name=self.aws_profile, region_name=self.aws_region
                )
            }
        else:
            location = {"region_name": self.aws_region}

        model = BedrockModel(
            model_id=self.model_id,
            **location,
            temperature=self.temperature,
            max_tokens=max_tokens,
            streaming=False,
        )
        return Agent(
            model=model,
            system_prompt=system_instruction,
            callback_handler=callback,
        )

    @observe(as_type="generation")
    async def generate(
        self, system_instruction: str, prompt: str, *, max_tokens: int | None = None
    ) -> str:
        """
        Run one generation call.

        Args:
            system_instruction: Stable instruction set as the system prompt
            prompt: Per-request task text
            max_tokens: Output budget overriding the configured one

        Returns:
            Generated text, stripped

        """
        usage_callback, usage_container = create_usage_callback()
        agent = self._build_agent(
            system_instruction, max_tokens or self.max_tokens, usage_callback
        )

        try:
            result = await asyncio.wait_for(
                agent.invoke_async(prompt), timeout=self.timeout_seconds
            )
        except ModelThrottledException as e:
            logger.warning(f"⚠️ {self.agent_name}: {self.model_id} rate limited: {e}")
            raise RateLimited(f"{self.model_id} is rate limited") from e
        except asyncio.TimeoutError as e:
            logger.error(
                f"{self.agent_name}: generation timed out after {self.timeout_seconds}s"
            )
            raise TextGenerationError("Text generation timed out") from e
        except Exception as e:
            if "blocked due to safety" in str(e).lower():
                logger.warning(f"⚠️ {self.agent_name}: safety filter blocked call")
                raise SafetyBlocked(str(e)) from e
            logger.error(f"{self.agent_name}: generation failed: {e}")
            raise TextGenerationError(str(e)) from e

        update_langfuse_with_usage(
            usage_container, self.model_id, self.agent_name, langfuse_context
        )

        if getattr(result, "stop_reason", None) in SAFETY_STOP_REASONS:
            logger.warning(
                f"⚠️ {self.agent_name}: response stopped by {result.stop_reason}"
            )
            raise SafetyBlocked(f"Response stopped by {result.stop_reason}")

        return str(result).strip()


class FailoverTextGenerator:
    """Tries backends in order, moving on only when one is rate limited."""

    def __init__(self, backends: list[TextGenerationClient]) -> None:
        """
        Initialize with an ordered list of backends.

        Args:
            backends: Primary first, fallbacks after

        """
        if not backends:
            raise ValueError("At least one backend is required")
        self.backends = backends

    async def generate(
        self, system_instruction: str, prompt: str, *, max_tokens: int | None = None
    ) -> str:
        """Generate with the first backend that is not rate limited."""
        last_error: RateLimited | None = None
        for index, backend in enumerate(self.backends):
            try:
                return await backend.generate(
                    system_instruction, prompt, max_tokens=max_tokens
                )
            except RateLimited as e:
                last_error = e
                if index + 1 < len(self.backends):
                    logger.warning("🔄 Primary model rate limited, failing over to backup")
        raise last_error
