"""
Framework-agnostic model configuration for agents.

Every component that talks to the text-generation service looks its model up
here by agent name, so models can be swapped through the environment without
touching code.
"""

import os
from typing import Any, Final

from loguru import logger


class ModelConfig:
    """Centralized model configuration for all agents."""

    AGENT_CONFIGS = {
        "SQLGenerator": {
            "model_id": "apac.anthropic.claude-sonnet-4-20250514-v1:0",
            "temperature": 0.1,
            "max_tokens": 500,
            "description": "Translate admin questions into read-only PostgreSQL",
        },
        "SQLGeneratorFallback": {
            "model_id": "anthropic.claude-3-haiku-20240307-v1:0",
            "temperature": 0.1,
            "max_tokens": 500,
            "description": "Backup SQL generation when the primary is rate limited",
        },
        "ResultSummarizer": {
            "model_id": "amazon.nova-lite-v1:0",
            "temperature": 0.2,
            "max_tokens": 150,
            "description": "One or two sentence answers from query results",
        },
    }

    # Default configuration for agents not explicitly configured
    DEFAULT_CONFIG: Final[dict[str, Any]] = {
        "model_id": "apac.anthropic.claude-sonnet-4-20250514-v1:0",
        "temperature": 0.3,
        "max_tokens": 1000,
        "description": "Default configuration",
    }

    def __init__(self, custom_configs: dict[str, dict[str, Any]] | None = None):
        """
        Initialize model configuration.

        Args:
            custom_configs: Optional overrides keyed by agent name,
                           e.g. {"ResultSummarizer": {"temperature": 0.0}}

        """
        self.agent_configs = {
            name: dict(config) for name, config in self.AGENT_CONFIGS.items()
        }
        self.default_config = dict(self.DEFAULT_CONFIG)

        if custom_configs:
            for agent_name, config in custom_configs.items():
                if agent_name in self.agent_configs:
                    self.agent_configs[agent_name].update(config)
                else:
                    self.agent_configs[agent_name] = {**self.default_config, **config}

        self._load_from_env()

    def _load_from_env(self) -> None:
        """Load model configurations from environment variables."""
        global_model = os.getenv("BEDROCK_MODEL_ID")
        if global_model:
            self.default_config["model_id"] = global_model

        # BEDROCK_MODEL_{AGENT}, BEDROCK_TEMP_{AGENT}, BEDROCK_TOKENS_{AGENT}
        for agent_name in self.agent_configs:
            env_prefix = agent_name.upper()

            model_id = os.getenv(f"BEDROCK_MODEL_{env_prefix}")
            if model_id:
                self.agent_configs[agent_name]["model_id"] = model_id

            temp = os.getenv(f"BEDROCK_TEMP_{env_prefix}")
            if temp:
                try:
                    self.agent_configs[agent_name]["temperature"] = float(temp)
                except ValueError:
                    logger.warning(
                        f"Ignoring BEDROCK_TEMP_{env_prefix}={temp!r}: not a number"
                    )

            tokens = os.getenv(f"BEDROCK_TOKENS_{env_prefix}")
            if tokens:
                try:
                    self.agent_configs[agent_name]["max_tokens"] = int(tokens)
                except ValueError:
                    logger.warning(
                        f"Ignoring BEDROCK_TOKENS_{env_prefix}={tokens!r}: not an integer"
                    )

    def get_agent_config(
        self, agent_name: str, aws_region: str | None = None
    ) -> dict[str, Any]:
        """
        Get complete configuration for an agent.

        Args:
            agent_name: Name of the agent
            aws_region: AWS region (defaults to AWS_REGION or ap-southeast-2)

        Returns:
            Dictionary with model configuration

        """
        config = self.agent_configs.get(agent_name, self.default_config).copy()
        config["aws_region"] = aws_region or os.getenv("AWS_REGION", "ap-southeast-2")
        return config

    def get_model_id(self, agent_name: str) -> str:
        """Get just the model ID for an agent."""
        return self.agent_configs.get(agent_name, self.default_config)["model_id"]


_global_config: ModelConfig | None = None


def get_model_config() -> ModelConfig:
    """Get the process-wide model configuration, creating it on first use."""
    global _global_config
    if _global_config is None:
        _global_config = ModelConfig()
    return _global_config


def get_agent_config(agent_name: str, aws_region: str | None = None) -> dict[str, Any]:
    """Shortcut for get_model_config().get_agent_config(...)."""
    return get_model_config().get_agent_config(agent_name, aws_region)
