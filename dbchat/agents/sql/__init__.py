"""SQL agents: generation, validation and the retry loop around them."""

from .generator import QueryGenerator, clean_generated_sql
from .retry import RetryController
from .validator import QueryValidator

__all__ = ["QueryGenerator", "QueryValidator", "RetryController", "clean_generated_sql"]
