"""
LLM Provider Abstraction for Job Search Copilot.

This module provides a unified interface for different LLM providers.
"""

from jobcopilot.core.llm_providers.anthropic_provider import AnthropicProvider
from jobcopilot.core.llm_providers.base import (
    GenerationRequest,
    GenerationResponse,
    LLMProvider,
    ProviderConfig,
    ProviderType,
)
from jobcopilot.core.llm_providers.factory import get_available_providers, get_llm_provider
from jobcopilot.core.llm_providers.gemini_provider import GeminiProvider
from jobcopilot.core.llm_providers.ollama_provider import OllamaProvider
from jobcopilot.core.llm_providers.openai_provider import OpenAIProvider

__all__ = [
    "AnthropicProvider",
    "GeminiProvider",
    "GenerationRequest",
    "GenerationResponse",
    "LLMProvider",
    "OllamaProvider",
    "OpenAIProvider",
    "ProviderConfig",
    "ProviderType",
    "get_available_providers",
    "get_llm_provider",
]
