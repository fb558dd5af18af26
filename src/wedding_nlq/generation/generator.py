"""SQL generation through a configured LLM provider.

Turns a wedding admin's question into raw SQL text using a small PydanticAI
agent. The text is untrusted: callers must run it through the validator
before execution. One call per question, no retries, no streaming.
"""

from __future__ import annotations

from typing import Any, Protocol

from fastmcp.utilities.logging import get_logger
from pydantic_ai import Agent
from pydantic_ai.settings import ModelSettings

from wedding_nlq.generation.prompts import SCHEMA_DESCRIPTION
from wedding_nlq.services.config_service import ConfigService, LLMConfig

_logger = get_logger(__name__)

GENERATION_SETTINGS = ModelSettings(temperature=0.1, max_tokens=600)


class SqlAgent(Protocol):
    """Anything that answers a prompt the way ``pydantic_ai.Agent.run`` does."""

    async def run(self, user_prompt: str) -> Any: ...


def _build_model(llm: LLMConfig) -> Any:
    """Create the provider-specific model carrying the configured credential."""
    # Lazy imports keep the unused provider's SDK out of the import path
    if llm.provider == "gemini":
        from pydantic_ai.models.google import GoogleModel  # noqa: PLC0415
        from pydantic_ai.providers.google import GoogleProvider  # noqa: PLC0415

        return GoogleModel(llm.model, provider=GoogleProvider(api_key=llm.api_key))

    from pydantic_ai.models.openai import OpenAIChatModel  # noqa: PLC0415
    from pydantic_ai.providers.openai import OpenAIProvider  # noqa: PLC0415

    return OpenAIChatModel(llm.model, provider=OpenAIProvider(api_key=llm.api_key))


def build_sql_agent(llm: LLMConfig, model: Any | None = None) -> Agent[None, str]:
    """Create the PydanticAI agent that writes report SQL.

    Args:
        llm: Provider settings; must be configured unless ``model`` is given
        model: Optional pre-built model (tests pass pydantic-ai's TestModel)
    """
    return Agent(
        model=model if model is not None else _build_model(llm),
        system_prompt=SCHEMA_DESCRIPTION,
        output_type=str,
        model_settings=GENERATION_SETTINGS,
    )


async def generate_sql(
    question: str,
    llm: LLMConfig | None = None,
    *,
    agent: SqlAgent | None = None,
) -> str | None:
    """Ask the configured provider for SQL answering ``question``.

    Returns:
        The stripped response text, or None when no provider credential is
        configured or the provider returned no text.
    """
    if agent is None:
        llm = llm or ConfigService.get_llm_config()
        _logger.info(
            "Generating SQL (provider=%s, model=%s, question_length=%d)",
            llm.provider,
            llm.model,
            len(question),
        )
        if not llm.is_configured:
            _logger.warning("No API key configured for provider %s", llm.provider)
            return None
        agent = build_sql_agent(llm)

    result = await agent.run(question)
    text = result.output
    if not isinstance(text, str):
        return None
    return text.strip() or None
