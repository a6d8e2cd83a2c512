"""Database, model provider and assistant configuration for dbchat."""

import os
from pathlib import Path
from typing import Final

from dotenv import load_dotenv
from loguru import logger
from typing_extensions import TypedDict

from dbchat.utils.error_handler import ConfigurationError

# Look for .env in the project root first, then the working directory
_project_env = Path(__file__).parent.parent.parent / ".env"
_cwd_env = Path.cwd() / ".env"

for _env_path in (_project_env, _cwd_env):
    if _env_path.exists():
        load_dotenv(_env_path)
        logger.debug(f"✓ Loaded environment variables from {_env_path}")
        break
else:
    load_dotenv()


# PostgreSQL Configuration
POSTGRES_CONFIG = {
    "host": os.getenv("POSTGRES_HOST", "localhost"),
    "port": os.getenv("POSTGRES_PORT", "5432"),
    "user": os.getenv("POSTGRES_USER", "postgres"),
    "password": os.getenv("POSTGRES_PASSWORD", "postgres"),
    "database": os.getenv("POSTGRES_DATABASE", "postgres"),
    "sslmode": os.getenv("POSTGRES_SSLMODE", "prefer"),
}


def _build_database_url(config: dict[str, str]) -> str:
    """Build a postgresql:// URL from POSTGRES_CONFIG, sslmode included."""
    url = (
        f"postgresql://{config['user']}:{config['password']}"
        f"@{config['host']}:{config['port']}/{config['database']}"
    )
    if config.get("sslmode"):
        url += f"?sslmode={config['sslmode']}"
    return url


# Database URL (standard format for psycopg and alembic)
DATABASE_URL = os.getenv("DATABASE_URL", _build_database_url(POSTGRES_CONFIG))


def _build_sqlalchemy_url(database_url: str) -> str:
    """Ensure the SQLAlchemy URL uses the psycopg driver."""
    if database_url.startswith("postgresql+psycopg://"):
        return database_url

    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+psycopg://", 1)

    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+psycopg://", 1)

    return database_url


SQLALCHEMY_DATABASE_URL = os.getenv(
    "SQLALCHEMY_DATABASE_URL", _build_sqlalchemy_url(DATABASE_URL)
)


# AWS Bedrock Configuration
BEDROCK_CONFIG = {
    "aws_profile": os.getenv("AWS_PROFILE"),  # optional, uses IAM role if None
    "aws_region": os.getenv("AWS_REGION", "ap-southeast-2"),
}


# ============================================================================
# Assistant Settings
# ============================================================================


class AssistantConfig(TypedDict, total=False):
    """
    Tunable limits of the query assistant.

    Fields:
        max_retries: Regeneration attempts after the first one (default: 1)
        summary_max_chars: Serialized result budget for the summary (default: 4000)
        generation_timeout: Seconds allowed per text-generation call
        validation_timeout: Seconds allowed for the plan-only check
        execution_timeout: Seconds allowed for query execution
        connect_timeout: Seconds allowed to open a database connection
    """

    max_retries: int
    summary_max_chars: int
    generation_timeout: float
    validation_timeout: float
    execution_timeout: float
    connect_timeout: int


DEFAULT_ASSISTANT_CONFIG: Final[AssistantConfig] = {
    "max_retries": 1,
    "summary_max_chars": 4000,
    "generation_timeout": 60.0,
    "validation_timeout": 15.0,
    "execution_timeout": 60.0,
    "connect_timeout": 10,
}

_ENV_KEYS: Final[dict[str, tuple[str, type]]] = {
    "max_retries": ("DB_CHAT_MAX_RETRIES", int),
    "summary_max_chars": ("DB_CHAT_SUMMARY_MAX_CHARS", int),
    "generation_timeout": ("DB_CHAT_GENERATION_TIMEOUT", float),
    "validation_timeout": ("DB_CHAT_VALIDATION_TIMEOUT", float),
    "execution_timeout": ("DB_CHAT_EXECUTION_TIMEOUT", float),
    "connect_timeout": ("DB_CHAT_CONNECT_TIMEOUT", int),
}


def load_assistant_config(
    overrides: AssistantConfig | None = None,
) -> AssistantConfig:
    """
    Build the assistant configuration from defaults, environment and overrides.

    Args:
        overrides: Values that take precedence over the environment

    Returns:
        Complete AssistantConfig

    Raises:
        ConfigurationError: If a value is not a number or is out of range

    """
    config: AssistantConfig = {**DEFAULT_ASSISTANT_CONFIG}

    for key, (env_name, cast) in _ENV_KEYS.items():
        raw = os.getenv(env_name)
        if raw is None or raw.strip() == "":
            continue
        try:
            config[key] = cast(raw)
        except ValueError as e:
            raise ConfigurationError(
                f"{env_name} must be a {cast.__name__}, got {raw!r}"
            ) from e

    if overrides:
        config.update(overrides)

    if config["max_retries"] < 0:
        raise ConfigurationError("max_retries must be zero or greater")
    if config["summary_max_chars"] <= 0:
        raise ConfigurationError("summary_max_chars must be positive")
    for key in ("generation_timeout", "validation_timeout", "execution_timeout"):
        if config[key] <= 0:
            raise ConfigurationError(f"{key} must be positive")
    if config["connect_timeout"] <= 0:
        raise ConfigurationError("connect_timeout must be positive")

    return config
