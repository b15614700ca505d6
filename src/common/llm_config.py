"""
Per-Step LLM Configuration System.

Each AI-backed operation has its own sampling settings, overridable per
step through environment variables for experimentation.

Usage:
    from src.common.llm_config import get_step_config

    config = get_step_config("suggest_skills")
    print(config.temperature)  # 0.7
    print(config.get_primary_model())  # "gpt-4o-mini"

    # Environment variable overrides:
    # LLM_MODEL_suggest_skills=gpt-4o            -> Primary model override
    # LLM_SECONDARY_MODEL_suggest_skills=...     -> Secondary model override
    # LLM_TEMPERATURE_suggest_skills=0.2
    # LLM_MAX_TOKENS_suggest_skills=800
    # LLM_USE_FALLBACK_suggest_skills=false      -> Primary only
"""

import os
import logging
from dataclasses import dataclass, replace
from typing import Optional, Dict

from src.common.config import Config

logger = logging.getLogger(__name__)


@dataclass
class StepConfig:
    """
    Configuration for a single LLM invocation step.

    Attributes:
        temperature: Sampling temperature sent to both providers
        max_tokens: Output token cap sent to both providers
        primary_model: Override the primary (OpenAI) model for this step
        secondary_model: Override the secondary (Anthropic) model for this step
        use_fallback: Whether to try the secondary provider when the primary fails
    """

    temperature: float = Config.ANALYTICAL_TEMPERATURE
    max_tokens: int = 1000
    primary_model: Optional[str] = None
    secondary_model: Optional[str] = None
    use_fallback: bool = True

    def get_primary_model(self) -> str:
        return self.primary_model or Config.PRIMARY_MODEL

    def get_secondary_model(self) -> str:
        return self.secondary_model or Config.SECONDARY_MODEL


# ===== DEFAULT STEP CONFIGURATIONS =====

STEP_CONFIGS: Dict[str, StepConfig] = {
    # Resume writing helpers
    "optimize_experience": StepConfig(temperature=Config.CREATIVE_TEMPERATURE, max_tokens=500),
    "suggest_skills": StepConfig(temperature=Config.CREATIVE_TEMPERATURE, max_tokens=500),

    # Analytics
    "generate_insights": StepConfig(temperature=Config.CREATIVE_TEMPERATURE, max_tokens=500),

    # Matching (JSON output)
    "match_resume_to_jobs": StepConfig(max_tokens=2000),
    "match_job_to_resumes": StepConfig(max_tokens=2000),
    "optimize_resume": StepConfig(max_tokens=2000),

    # Multimodal; both providers need a vision-capable model
    "analyze_portfolio": StepConfig(
        max_tokens=1500,
        primary_model=Config.VISION_MODEL,
    ),
}


def _get_env_override(step_name: str, setting: str) -> Optional[str]:
    """
    Get environment variable override for a step setting.

    Checks for environment variable in format: LLM_{SETTING}_{step_name}
    Example: LLM_TEMPERATURE_suggest_skills
    """
    env_var = f"LLM_{setting}_{step_name}"
    value = os.getenv(env_var)
    if value:
        logger.debug(f"Using env override {env_var}={value}")
    return value


def get_step_config(step_name: str) -> StepConfig:
    """
    Get configuration for a step, with environment variable overrides.

    Unknown steps get the default StepConfig. The returned object is a
    copy, so callers may adjust it freely.

    Args:
        step_name: The operation identifier (e.g., "optimize_resume")

    Returns:
        StepConfig with all settings resolved
    """
    config = replace(STEP_CONFIGS.get(step_name, StepConfig()))

    model_override = _get_env_override(step_name, "MODEL")
    if model_override:
        config.primary_model = model_override

    secondary_override = _get_env_override(step_name, "SECONDARY_MODEL")
    if secondary_override:
        config.secondary_model = secondary_override

    temperature_override = _get_env_override(step_name, "TEMPERATURE")
    if temperature_override:
        try:
            config.temperature = float(temperature_override)
        except ValueError:
            logger.warning(f"Invalid temperature override for {step_name}: {temperature_override}")

    max_tokens_override = _get_env_override(step_name, "MAX_TOKENS")
    if max_tokens_override:
        try:
            config.max_tokens = int(max_tokens_override)
        except ValueError:
            logger.warning(f"Invalid max_tokens override for {step_name}: {max_tokens_override}")

    fallback_enabled = _get_env_override(step_name, "USE_FALLBACK")
    if fallback_enabled is not None:
        config.use_fallback = fallback_enabled.lower() == "true"

    return config
