"""
Job Search Copilot - Core Module

This module contains the core functionality for the job search copilot:
- Provider adapters for OpenAI, Anthropic, Gemini and Ollama
- Prompt templates and structured response parsing
- Dispatch with provider fallback
"""

__version__ = "1.0.0"
__author__ = "Job Search Copilot Team"

# Export key classes and functions
from jobcopilot.core.dispatcher import (
    DispatchResult,
    LLMDispatcher,
    Operation,
    get_dispatcher,
)
from jobcopilot.core.exceptions import (
    AllProvidersFailedError,
    CredentialError,
    LLMError,
    ParseError,
    ProviderError,
    UnsupportedProviderError,
)
