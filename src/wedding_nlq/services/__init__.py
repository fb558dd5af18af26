"""Services package for wedding-nlq.

Main Components:
- ConfigService: environment-driven configuration and database engine creation
- LLMConfig: resolved provider credentials for SQL generation
"""

from .config_service import ConfigService, LLMConfig

__all__ = [
    "ConfigService",
    "LLMConfig",
]
