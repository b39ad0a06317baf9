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
OpenAI LLM Provider Implementation.

Provides integration with OpenAI API using the unified LLM provider interface.
"""

from typing import Any, Dict, List, Optional, Tuple

import openai
from openai import OpenAI

from jobcopilot.core.exceptions import CredentialError, LLMError
from jobcopilot.core.llm_providers.base import (
    GenerationRequest,
    LLMProvider,
    ProviderType,
)


class OpenAIProvider(LLMProvider):
    """OpenAI provider implementation using Chat Completions."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key. If None, uses environment variable.
            model: Model override. If None, uses OPENAI_MODEL.
        """
        super().__init__(api_key, model)

        # Set API key from settings if not provided
        if not self.api_key:
            self.api_key = self.settings.openai_api_key

    @property
    def provider_type(self) -> ProviderType:
        """Return the provider type."""
        return ProviderType.OPENAI

    def get_default_model(self) -> str:
        """Get the default OpenAI model."""
        return self.settings.openai_model

    @property
    def client(self) -> OpenAI:
        """Lazy load OpenAI client."""
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key)
            self.logger.info("OpenAI client initialized")
        return self._client

    def _build_messages(self, request: GenerationRequest) -> List[Dict[str, str]]:
        messages = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.extend(
            {"role": message.role, "content": message.content}
            for message in request.messages
        )
        return messages

    def _make_api_call(
        self, messages: List[Dict[str, str]], request: GenerationRequest, model: str
    ) -> Any:
        """Make API call to OpenAI."""
        api_params: Dict[str, Any] = {
            "model": model,
            "messages": messages,
            "max_tokens": request.max_tokens or self.settings.llm_max_tokens,
        }
        if request.json_output:
            api_params["response_format"] = {"type": "json_object"}

        return self.client.chat.completions.create(**api_params)

    def _parse_response(self, response: Any) -> Tuple[str, Optional[str], int, Optional[str]]:
        """Parse OpenAI response into (content, model, tokens_used, request_id)."""
        choice = response.choices[0] if getattr(response, "choices", None) else None
        message = getattr(choice, "message", None) if choice else None
        content = getattr(message, "content", None) or ""

        tokens_used = 0
        usage = getattr(response, "usage", None)
        if usage is not None:
            total_tokens = getattr(usage, "total_tokens", None)
            if isinstance(total_tokens, int):
                tokens_used = total_tokens

        model = getattr(response, "model", None)
        request_id = getattr(response, "id", None)
        return content, model if isinstance(model, str) else None, tokens_used, request_id

    def _translate_error(self, error: Exception) -> LLMError:
        if isinstance(error, (openai.AuthenticationError, openai.PermissionDeniedError)):
            return CredentialError(
                "OpenAI rejected the API key", provider=self.provider_type.value
            )
        return super()._translate_error(error)


def get_openai_provider(
    api_key: Optional[str] = None, model: Optional[str] = None
) -> OpenAIProvider:
    """
    Factory function to create OpenAI provider.

    Args:
        api_key: Optional API key override.
        model: Optional model override.

    Returns:
        Configured OpenAI provider.
    """
    return OpenAIProvider(api_key=api_key, model=model)
