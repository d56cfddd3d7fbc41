"""Environment-driven settings for the weather advisor."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables from a .env if present
load_dotenv()

DEFAULT_LLM_MODEL = "google/gemini-2.0-flash-exp:free"


@dataclass(frozen=True)
class Settings:
    # Provider credentials
    opencage_api_key: str | None = None
    openweather_api_key: str | None = None
    openrouter_api_key: str | None = None

    # Application
    app_url: str = "http://localhost:8000"
    app_env: str = "development"

    # LLM tuning
    llm_model: str = DEFAULT_LLM_MODEL
    llm_temperature: float = 0.7
    llm_timeout_seconds: float = 60.0
    llm_max_retries: int = 2

    # Providers and caching
    http_timeout_seconds: float = 30.0
    weather_cache_ttl_seconds: int = 15 * 60
    historical_cache_ttl_seconds: int = 24 * 60 * 60

    # Logging
    log_level: str = "INFO"
    log_dir: str | None = None

    # Front end -> API
    advisor_api_url: str = "http://localhost:8000"


def load_settings() -> Settings:
    return Settings(
        opencage_api_key=os.getenv("OPENCAGE_API_KEY"),
        openweather_api_key=os.getenv("OPENWEATHER_API_KEY"),
        openrouter_api_key=os.getenv("OPENROUTER_API_KEY"),
        app_url=os.getenv("APP_URL", "http://localhost:8000"),
        app_env=os.getenv("APP_ENV", "development"),
        llm_model=os.getenv("LLM_MODEL", DEFAULT_LLM_MODEL),
        llm_temperature=float(os.getenv("LLM_TEMPERATURE", "0.7")),
        llm_timeout_seconds=float(os.getenv("LLM_TIMEOUT_SECONDS", "60")),
        llm_max_retries=int(os.getenv("LLM_MAX_RETRIES", "2")),
        http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "30")),
        weather_cache_ttl_seconds=int(os.getenv("WEATHER_CACHE_TTL_SECONDS", "900")),
        historical_cache_ttl_seconds=int(os.getenv("HISTORICAL_CACHE_TTL_SECONDS", "86400")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_dir=os.getenv("LOG_DIR"),
        advisor_api_url=os.getenv("ADVISOR_API_URL", "http://localhost:8000"),
    )
