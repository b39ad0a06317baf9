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
Error taxonomy for LLM operations.

Every error carries the HTTP status it maps to, so the API layer can turn
it into an ``{"error": message}`` response without inspecting its type.
"""

from typing import Optional


class LLMError(Exception):
    """Base class for provider and dispatch failures."""

    status_code = 500

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.provider = provider

    def __str__(self) -> str:
        return self.message


class CredentialError(LLMError):
    """No usable credential for the provider (missing or rejected)."""

    status_code = 400


class UnsupportedProviderError(LLMError):
    """Provider name is not one of the known providers."""

    status_code = 400


class ProviderError(LLMError):
    """Upstream call failed (network, HTTP status, SDK error)."""


class ParseError(LLMError):
    """Provider returned text that is not the JSON shape the operation needs."""


class AllProvidersFailedError(ProviderError):
    """Both the requested provider and the fallback provider failed."""

    def __init__(self, primary_error: LLMError, fallback_error: LLMError):
        message = (
            "Failed to get response from any AI provider "
            f"({primary_error.provider or 'unknown'}: {primary_error}; "
            f"{fallback_error.provider or 'unknown'}: {fallback_error})"
        )
        super().__init__(message, provider=fallback_error.provider)
        self.primary_error = primary_error
        self.fallback_error = fallback_error
