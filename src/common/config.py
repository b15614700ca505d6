"""
Configuration loader for the AI delegation layer.

Loads provider settings from environment variables (.env file).
Service-level settings (database, JWT secret, CORS) live in
api_service/config.py; this module only covers what the LLM helpers need.
"""

import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """
    Centralized configuration for the LLM providers.

    All values loaded from environment variables - NO SECRETS IN CODE.
    """

    # ===== LLM APIs =====
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    ANTHROPIC_API_KEY: str = os.getenv("ANTHROPIC_API_KEY", "")

    # ===== LLM Model Configuration =====
    # Primary provider handles every request first; secondary only on failure
    PRIMARY_MODEL: str = os.getenv("PRIMARY_MODEL", "gpt-4o-mini")
    SECONDARY_MODEL: str = os.getenv("SECONDARY_MODEL", "claude-3-5-haiku-20241022")
    # Must accept image content blocks
    VISION_MODEL: str = os.getenv("VISION_MODEL", "gpt-4o")

    # Temperature settings
    CREATIVE_TEMPERATURE: float = 0.7  # Rewriting, skill ideas, insights
    ANALYTICAL_TEMPERATURE: float = 0.5  # Matching and optimization JSON

    # Seconds; None leaves the provider client default in place
    LLM_REQUEST_TIMEOUT: Optional[float] = (
        float(os.getenv("LLM_REQUEST_TIMEOUT")) if os.getenv("LLM_REQUEST_TIMEOUT") else None
    )

    # ===== Portfolio fetching =====
    PORTFOLIO_FETCH_TIMEOUT: float = float(os.getenv("PORTFOLIO_FETCH_TIMEOUT", "15"))
    PORTFOLIO_MAX_IMAGES: int = 10

    @classmethod
    def validate(cls) -> None:
        """
        Validate that at least one provider is usable.
        Raises ValueError if neither API key is present.
        """
        if not cls.OPENAI_API_KEY and not cls.ANTHROPIC_API_KEY:
            raise ValueError(
                "Missing required configuration: OPENAI_API_KEY or ANTHROPIC_API_KEY. "
                "Please check your .env file."
            )

    @classmethod
    def summary(cls) -> str:
        """Return a summary of the current configuration (safe for logging)."""
        return f"""
Configuration Summary:
  Primary LLM: OpenAI {cls.PRIMARY_MODEL} {'✓' if cls.OPENAI_API_KEY else '✗ Missing'}
  Secondary LLM: Anthropic {cls.SECONDARY_MODEL} {'✓' if cls.ANTHROPIC_API_KEY else '✗ Missing'}
  Vision Model: {cls.VISION_MODEL}
        """.strip()
