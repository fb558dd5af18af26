"""Configuration service for wedding-nlq.

This module centralizes environment variable handling for the report query
service: database engine creation, LLM provider selection and result size
budgets.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Final, Literal

import sqlalchemy as sa

from wedding_nlq.safety.policy import MAX_ROWS

Provider = Literal["openai", "gemini"]

DEFAULT_OPENAI_MODEL: Final[str] = "gpt-4o-mini"
DEFAULT_GEMINI_MODEL: Final[str] = "gemini-2.0-flash"


@dataclass(frozen=True, slots=True)
class LLMConfig:
    """Resolved LLM provider settings for one generation call."""

    provider: Provider
    model: str
    api_key: str | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def __repr__(self) -> str:
        # Keep the credential out of logs and tracebacks.
        return (
            f"LLMConfig(provider={self.provider!r}, model={self.model!r}, "
            f"api_key={'***' if self.api_key else None})"
        )


class ConfigService:
    """Service for managing configuration and database connections."""

    @staticmethod
    def get_database_url() -> str:
        """Get database URL from environment variable.

        Returns:
            Database URL string

        Raises:
            ValueError: If WEDDING_NLQ_DATABASE_URL environment variable is not set
        """
        database_url = os.getenv("WEDDING_NLQ_DATABASE_URL")
        if not database_url:
            error_msg = "WEDDING_NLQ_DATABASE_URL environment variable not set"
            raise ValueError(error_msg)
        return database_url

    @staticmethod
    def create_database_engine(url: str) -> sa.Engine:
        """Create SQLAlchemy database engine.

        Args:
            url: Database connection URL

        Returns:
            SQLAlchemy Engine instance
        """
        return sa.create_engine(url, pool_pre_ping=True)

    # ---- LLM configuration -----------------------------------------------
    @staticmethod
    def get_ai_provider() -> Provider:
        """Provider selected by AI_PROVIDER, else by which credential is present."""
        explicit = os.getenv("AI_PROVIDER", "").strip().lower()
        if explicit:
            return "gemini" if explicit == "gemini" else "openai"
        return "openai" if os.getenv("OPENAI_API_KEY") else "gemini"

    @staticmethod
    def get_llm_config() -> LLMConfig:
        """Resolve provider, model and credential for SQL generation.

        The returned config may be unconfigured (no api key); callers treat
        that as "AI service unavailable" rather than an error.
        """
        provider = ConfigService.get_ai_provider()
        if provider == "gemini":
            return LLMConfig(
                provider="gemini",
                model=os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
                api_key=os.getenv("GEMINI_API_KEY") or None,
            )
        return LLMConfig(
            provider="openai",
            model=os.getenv("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
            api_key=os.getenv("OPENAI_API_KEY") or None,
        )

    # ---- Result size budgets ---------------------------------------------
    @staticmethod
    def result_row_limit() -> int:
        """Maximum number of rows to return in results."""
        val = os.getenv("WEDDING_NLQ_ROW_LIMIT", str(MAX_ROWS))
        try:
            limit = int(val)
        except ValueError:
            limit = MAX_ROWS
        return max(1, limit)
