"""
Configuration management via environment variables.

This module loads configuration from .env file using python-dotenv.
All configuration values are accessed through the Settings class.

Only the API key for the selected LLM provider is required; everything
else has a default suitable for local development.
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# Load .env file from project root
# This must happen before accessing os.environ
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)

SUPPORTED_PROVIDERS = ("groq", "google")

DEFAULT_MODELS = {
    "groq": "llama-3.3-70b-versatile",
    "google": "gemini-2.0-flash",
}


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    frozen=True makes the dataclass immutable, preventing accidental
    modification of settings at runtime.

    Attributes:
        app_name: Application identifier for logging
        app_env: Environment name (development, staging, production)
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        llm_provider: Which SDK answers questions ("groq" or "google")
        groq_api_key: API key for Groq LLM service
        google_api_key: API key for Google Gemini service
        llm_model: Model identifier sent to the provider
        llm_max_tokens: Maximum response length
        llm_timeout_seconds: Outbound call timeout, None waits indefinitely
        handbook_path: Bootstrap handbook JSON, None uses the bundled one
        response_cache_max_entries: Cache size cap, 0 means unbounded
        interaction_log_max_records: Log retention cap, 0 means unbounded
        enable_audit_logging: Log every HTTP request
    """
    # Application settings
    app_name: str
    app_env: str
    log_level: str

    # LLM settings
    llm_provider: str
    groq_api_key: str
    google_api_key: str
    llm_model: str
    llm_max_tokens: int
    llm_timeout_seconds: Optional[float]

    # Knowledge base
    handbook_path: Optional[Path]

    # Retention
    response_cache_max_entries: int
    interaction_log_max_records: int

    enable_audit_logging: bool

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env.lower() == "production"


def _get_env(key: str, default: Optional[str] = None) -> str:
    """
    Get environment variable with optional default.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value

    Raises:
        ValueError: If required variable is not set and no default provided
    """
    value = os.environ.get(key, default)
    if value is None:
        raise ValueError(
            f"Required environment variable '{key}' is not set. "
            f"Please check your .env file."
        )
    return value


def _get_optional_float(key: str) -> Optional[float]:
    """Parse an optional float; empty or unset means None."""
    raw = os.environ.get(key, "").strip()
    return float(raw) if raw else None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are read once at startup; maxsize=1 ensures only one
    instance exists. Call ``get_settings.cache_clear()`` in tests after
    changing the environment.

    Returns:
        Settings instance with all configuration values

    Raises:
        ValueError: If required environment variables are missing or
            LLM_PROVIDER is not supported
    """
    provider = _get_env("LLM_PROVIDER", "groq").strip().lower()
    if provider not in SUPPORTED_PROVIDERS:
        raise ValueError(
            f"Unsupported LLM_PROVIDER '{provider}'. "
            f"Expected one of: {', '.join(SUPPORTED_PROVIDERS)}"
        )

    # Only the selected provider's key is mandatory
    groq_api_key = _get_env("GROQ_API_KEY", None if provider == "groq" else "")
    google_api_key = _get_env("GOOGLE_API_KEY", None if provider == "google" else "")

    handbook = os.environ.get("HANDBOOK_PATH", "").strip()

    return Settings(
        # Application
        app_name=_get_env("APP_NAME", "FrontDeskAssistant"),
        app_env=_get_env("APP_ENV", "development"),
        log_level=_get_env("LOG_LEVEL", "INFO"),

        # LLM
        llm_provider=provider,
        groq_api_key=groq_api_key,
        google_api_key=google_api_key,
        llm_model=_get_env("LLM_MODEL", "").strip() or DEFAULT_MODELS[provider],
        llm_max_tokens=int(_get_env("LLM_MAX_TOKENS", "1024")),
        llm_timeout_seconds=_get_optional_float("LLM_TIMEOUT_SECONDS"),

        # Knowledge base
        handbook_path=Path(handbook) if handbook else None,

        # Retention (0 = unbounded)
        response_cache_max_entries=int(_get_env("RESPONSE_CACHE_MAX_ENTRIES", "0")),
        interaction_log_max_records=int(_get_env("INTERACTION_LOG_MAX_RECORDS", "0")),

        enable_audit_logging=_get_env("ENABLE_AUDIT_LOGGING", "true").lower() == "true",
    )
