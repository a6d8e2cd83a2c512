"""
Configuration module for dbchat.

Database connection settings, model provider settings and the tunable limits
of the query assistant.
"""

from .agent_model_config import ModelConfig, get_agent_config
from .settings import (
    BEDROCK_CONFIG,
    DATABASE_URL,
    DEFAULT_ASSISTANT_CONFIG,
    POSTGRES_CONFIG,
    SQLALCHEMY_DATABASE_URL,
    AssistantConfig,
    load_assistant_config,
)

__all__ = [
    "AssistantConfig",
    "BEDROCK_CONFIG",
    "DATABASE_URL",
    "DEFAULT_ASSISTANT_CONFIG",
    "ModelConfig",
    "POSTGRES_CONFIG",
    "SQLALCHEMY_DATABASE_URL",
    "get_agent_config",
    "load_assistant_config",
]
