"""
Copyright 2024 Job Search Copilot Contributors

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

"""
Configuration management for Job Search Copilot.

This module handles all configuration settings including:
- Environment variables
- Default provider credentials and models
- Fallback policy
- HTTP server limits
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_PROVIDERS = ("openai", "anthropic", "gemini", "ollama")

PLACEHOLDER_VALUES = {
    "your_openai_api_key_here",
    "your_anthropic_api_key_here",
    "your_gemini_api_key_here",
}


class Settings(BaseSettings):
    """Application settings with validation."""

    # Environment
    environment: str = Field(default="production")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)
    log_level: str = Field(default="INFO")

    # Default credentials, used when a request carries no apiKey
    openai_api_key: Optional[str] = Field(default=None)
    anthropic_api_key: Optional[str] = Field(default=None)
    gemini_api_key: Optional[str] = Field(default=None)

    # Provider selection
    default_llm_provider: str = Field(default="gemini")
    fallback_llm_provider: str = Field(default="gemini")
    enable_provider_fallback: bool = Field(default=True)

    # Default models
    openai_model: str = Field(default="gpt-4o")
    anthropic_model: str = Field(default="claude-3-7-sonnet-20250219")
    gemini_model: str = Field(default="gemini-pro")
    ollama_model: str = Field(default="gemma3:1b")

    # Ollama (local inference)
    ollama_base_url: str = Field(default="http://localhost:11434")
    ollama_timeout: float = Field(default=120.0)

    # Generation
    llm_max_tokens: int = Field(default=2048)

    # HTTP
    cors_allowed_origins: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"]
    )
    enable_api_csp_headers: bool = Field(default=False)
    api_rate_limit: int = Field(default=60)
    max_request_size_mb: int = Field(default=5)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("default_llm_provider", "fallback_llm_provider")
    @classmethod
    def validate_provider(cls, v):
        """Validate provider names."""
        if v.lower() not in SUPPORTED_PROVIDERS:
            raise ValueError(f"Provider must be one of: {', '.join(SUPPORTED_PROVIDERS)}")
        return v.lower()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get application settings.

    Settings are rebuilt on every call so default credentials are read at
    call time rather than captured at import.
    """
    return Settings()


def is_usable_key(value: Optional[str]) -> bool:
    """Return True if a credential is set and is not a template placeholder."""
    return bool(value and value.strip() and value.strip() not in PLACEHOLDER_VALUES)
