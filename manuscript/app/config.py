"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Vendor credentials (absence makes calls to that vendor fail fast)
    openai_api_key: SecretStr | None = None
    anthropic_api_key: SecretStr | None = None
    google_ai_api_key: SecretStr | None = None
    cohere_api_key: SecretStr | None = None
    azure_openai_api_key: SecretStr | None = None
    huggingface_api_key: SecretStr | None = None
    perplexity_api_key: SecretStr | None = None

    # Azure OpenAI deployment
    azure_openai_endpoint: str | None = None
    azure_openai_deployment: str = "gpt-4o"
    azure_openai_api_version: str = "2024-06-01"

    # Fixed model identifiers per vendor
    openai_model: str = "gpt-4o"
    anthropic_model: str = "claude-sonnet-4-20250514"
    google_model: str = "gemini-1.5-pro-latest"
    cohere_model: str = "command-r-plus"
    huggingface_model: str = "microsoft/DialoGPT-large"
    perplexity_model: str = "llama-3.1-sonar-small-128k-online"

    # Vendor endpoints (REST-backed vendors)
    google_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    cohere_base_url: str = "https://api.cohere.com/v2"
    huggingface_base_url: str = "https://api-inference.huggingface.co/models"
    perplexity_base_url: str = "https://api.perplexity.ai"

    # Completion limits
    llm_max_output_tokens: int = 4096
    llm_timeout_seconds: float = 120.0

    # Provider routing
    default_provider: str = "openai"
    fallback_provider: str | None = "google"
    synthesis_provider: str = "openai"

    # UI
    ui_origin: str = "http://localhost:5173"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
