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
Anthropic LLM Provider Implementation.

Provides integration with the Anthropic Messages API. The system prompt goes
in its own parameter and ``max_tokens`` is mandatory.
"""

from typing import Any, Dict, List, Optional, Tuple

import anthropic
from anthropic import Anthropic

from jobcopilot.core.exceptions import CredentialError, LLMError
from jobcopilot.core.llm_providers.base import (
    GenerationRequest,
    LLMProvider,
    ProviderType,
)


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider implementation."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """
        Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key. If None, uses environment variable.
            model: Model override. If None, uses ANTHROPIC_MODEL.
        """
        super().__init__(api_key, model)

        if not self.api_key:
            self.api_key = self.settings.anthropic_api_key

    @property
    def provider_type(self) -> ProviderType:
        """Return the provider type."""
        return ProviderType.ANTHROPIC

    def get_default_model(self) -> str:
        """Get the default Claude model."""
        return self.settings.anthropic_model

    @property
    def client(self) -> Anthropic:
        """Lazy load Anthropic client."""
        if self._client is None:
            self._client = Anthropic(api_key=self.api_key)
            self.logger.info("Anthropic client initialized")
        return self._client

    def _build_messages(self, request: GenerationRequest) -> List[Dict[str, str]]:
        return [
            {"role": message.role, "content": message.content}
            for message in request.messages
        ]

    def _make_api_call(
        self, messages: List[Dict[str, str]], request: GenerationRequest, model: str
    ) -> Any:
        """Make API call to Anthropic."""
        api_params: Dict[str, Any] = {
            "model": model,
            "max_tokens": request.max_tokens or self.settings.llm_max_tokens,
            "messages": messages,
        }
        if request.system_prompt:
            api_params["system"] = request.system_prompt

        return self.client.messages.create(**api_params)

    def _parse_response(self, response: Any) -> Tuple[str, Optional[str], int, Optional[str]]:
        """Parse Anthropic response into (content, model, tokens_used, request_id)."""
        # Only text blocks carry the reply
        content = "".join(
            block.text
            for block in getattr(response, "content", None) or []
            if getattr(block, "type", None) == "text"
        )

        tokens_used = 0
        usage = getattr(response, "usage", None)
        if usage is not None:
            input_tokens = getattr(usage, "input_tokens", None)
            output_tokens = getattr(usage, "output_tokens", None)
            if isinstance(input_tokens, int) and isinstance(output_tokens, int):
                tokens_used = input_tokens + output_tokens

        model = getattr(response, "model", None)
        return content, model if isinstance(model, str) else None, tokens_used, getattr(
            response, "id", None
        )

    def _translate_error(self, error: Exception) -> LLMError:
        if isinstance(
            error, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)
        ):
            return CredentialError(
                "Anthropic rejected the API key", provider=self.provider_type.value
            )
        return super()._translate_error(error)
