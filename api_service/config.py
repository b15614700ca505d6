"""
API Service Configuration Module

Centralized configuration management with Pydantic validation.
All environment variables are validated at startup to catch misconfigurations early.
"""

import logging
from datetime import timedelta
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from src.common.config import Config as LLMConfig


class ServiceSettings(BaseSettings):
    """
    API service configuration with validation.

    All settings can be overridden via environment variables.
    """

    environment: str = Field(
        default="development",
        description="Environment: development, staging, production, test"
    )

    # === MongoDB ===
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    mongo_db_name: str = Field(
        default="job_copilot",
        description="MongoDB database name"
    )

    # === Security ===
    jwt_secret: Optional[str] = Field(
        default=None,
        description="HS256 signing secret for user and admin tokens"
    )
    admin_id: Optional[str] = Field(
        default=None,
        description="Email of the admin account created at startup"
    )
    admin_password: Optional[str] = Field(
        default=None,
        description="Password of the admin account created at startup"
    )
    user_token_days: int = Field(
        default=5,
        ge=1,
        le=90,
        description="User token lifetime in days"
    )
    admin_token_days: int = Field(
        default=1,
        ge=1,
        le=30,
        description="Admin token lifetime in days"
    )

    # === HTTP ===
    port: int = Field(
        default=5001,
        ge=1,
        le=65535,
        description="Port uvicorn binds when run as a script"
    )
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    # === Static client build ===
    serve_static: bool = Field(
        default=False,
        description="Serve the built client and fall back to index.html"
    )
    static_dir: str = Field(
        default="client/build",
        description="Directory holding the built client"
    )

    # === Logging ===
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )
    log_format: str = Field(
        default="simple",
        description="Log format: simple or json"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is a known value."""
        allowed = {"development", "staging", "production", "test"}
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"environment must be one of: {', '.join(sorted(allowed))}")
        return v_lower

    @field_validator("mongodb_uri")
    @classmethod
    def validate_uri_format(cls, v: str) -> str:
        """Basic URI format validation."""
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError(f"Invalid MongoDB URI format: {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v_upper = v.upper()
        if v_upper not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return v_upper

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if not self.cors_origins:
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def user_token_ttl(self) -> timedelta:
        return timedelta(days=self.user_token_days)

    @property
    def admin_token_ttl(self) -> timedelta:
        return timedelta(days=self.admin_token_days)

    def validate_production_config(self) -> List[str]:
        """
        Validate configuration is suitable for production.

        Returns list of warning/error messages.
        """
        issues = []

        if not self.jwt_secret:
            level = "CRITICAL" if self.is_production else "WARNING"
            issues.append(f"{level}: JWT_SECRET not set; authenticated routes will return 500")

        if self.is_production:
            if self.cors_origins.strip() == "*":
                issues.append("WARNING: CORS_ORIGINS allows every origin")
            if "localhost" in self.mongodb_uri:
                issues.append("WARNING: Using localhost MongoDB in production")
            if not self.admin_id or not self.admin_password:
                issues.append("WARNING: ADMIN_ID/ADMIN_PASSWORD not set; no admin will be bootstrapped")

        return issues

    class Config:
        env_prefix = ""  # No prefix, use exact env var names
        case_sensitive = False  # JWT_SECRET = jwt_secret
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_settings() -> ServiceSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for performance.
    Use this function to access configuration throughout the app.
    """
    return ServiceSettings()


def validate_config_on_startup() -> None:
    """
    Validate configuration at application startup.

    Raises ValueError with details if config is invalid.
    Logs warnings for non-critical issues.
    """
    logger = logging.getLogger(__name__)

    try:
        settings = get_settings()
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")

    for issue in settings.validate_production_config():
        if issue.startswith("CRITICAL"):
            raise ValueError(issue)
        logger.warning(issue)

    # Log loaded configuration (redact secrets)
    logger.info(f"Configuration loaded: environment={settings.environment}")
    logger.info(f"  mongodb_uri={'*****' if 'localhost' not in settings.mongodb_uri else settings.mongodb_uri}")
    logger.info(f"  mongo_db_name={settings.mongo_db_name}")
    logger.info(f"  jwt_secret={'set' if settings.jwt_secret else 'MISSING'}")
    logger.info(f"  admin_bootstrap={'enabled' if settings.admin_id and settings.admin_password else 'disabled'}")
    logger.info(f"  serve_static={settings.serve_static} ({settings.static_dir})")

    # AI routes fail per request without a provider key; the rest of the API still works
    try:
        LLMConfig.validate()
    except ValueError as e:
        logger.warning(str(e))
    logger.info(LLMConfig.summary())


# Convenience exports
settings = get_settings()
