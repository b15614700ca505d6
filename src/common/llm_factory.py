"""
LLM Factory Module.

Factory functions for the two chat providers. Services never instantiate
ChatOpenAI/ChatAnthropic directly, which keeps provider wiring in one
place and gives tests a single seam to patch.

Usage:
    from src.common.llm_factory import create_primary_llm, create_secondary_llm

    llm = create_primary_llm(model="gpt-4o-mini", temperature=0.7, max_tokens=500)
    response = await llm.ainvoke([SystemMessage(content="..."), HumanMessage(content="...")])
"""

import logging
from typing import Any, Optional

from langchain_anthropic import ChatAnthropic
from langchain_openai import ChatOpenAI

from src.common.config import Config
from src.common.error_handling import ConfigurationError

logger = logging.getLogger(__name__)


def create_primary_llm(
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    **kwargs: Any,
) -> ChatOpenAI:
    """
    Create the primary (OpenAI) chat model.

    Args:
        model: Model name (defaults to Config.PRIMARY_MODEL)
        temperature: Temperature (defaults to Config.ANALYTICAL_TEMPERATURE)
        max_tokens: Output token cap
        **kwargs: Additional ChatOpenAI parameters

    Raises:
        ConfigurationError: If OPENAI_API_KEY is not set
    """
    if not Config.OPENAI_API_KEY:
        raise ConfigurationError("OPENAI_API_KEY is not configured")

    effective_model = model or Config.PRIMARY_MODEL
    effective_temperature = temperature if temperature is not None else Config.ANALYTICAL_TEMPERATURE

    llm = ChatOpenAI(
        model=effective_model,
        temperature=effective_temperature,
        max_tokens=max_tokens,
        api_key=Config.OPENAI_API_KEY,
        timeout=Config.LLM_REQUEST_TIMEOUT,
        max_retries=0,
        **kwargs,
    )

    logger.debug(f"Created OpenAI LLM: model={effective_model}")
    return llm


def create_secondary_llm(
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    **kwargs: Any,
) -> ChatAnthropic:
    """
    Create the secondary (Anthropic) chat model used as fallback.

    Args:
        model: Model name (defaults to Config.SECONDARY_MODEL)
        temperature: Temperature (defaults to Config.ANALYTICAL_TEMPERATURE)
        max_tokens: Output token cap (Anthropic requires one)
        **kwargs: Additional ChatAnthropic parameters

    Raises:
        ConfigurationError: If ANTHROPIC_API_KEY is not set
    """
    if not Config.ANTHROPIC_API_KEY:
        raise ConfigurationError("ANTHROPIC_API_KEY is not configured")

    effective_model = model or Config.SECONDARY_MODEL
    effective_temperature = temperature if temperature is not None else Config.ANALYTICAL_TEMPERATURE

    llm = ChatAnthropic(
        model=effective_model,
        temperature=effective_temperature,
        max_tokens=max_tokens or 1024,
        api_key=Config.ANTHROPIC_API_KEY,
        timeout=Config.LLM_REQUEST_TIMEOUT,
        max_retries=0,
        **kwargs,
    )

    logger.debug(f"Created Anthropic LLM: model={effective_model}")
    return llm
