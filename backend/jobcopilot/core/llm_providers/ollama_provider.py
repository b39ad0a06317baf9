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
Ollama LLM Provider Implementation.

Provides integration with local Ollama models using the unified LLM provider interface.
Supports local model inference without requiring API keys.
"""

from typing import Any, Dict, List, Optional, Tuple

import httpx

from jobcopilot.core.exceptions import LLMError, ProviderError
from jobcopilot.core.llm_providers.base import (
    GenerationRequest,
    LLMProvider,
    ProviderType,
)


class OllamaProvider(LLMProvider):
    """Ollama provider implementation for local model inference."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        endpoint: Optional[str] = None,
    ):
        """
        Initialize Ollama provider.

        Args:
            api_key: Not used for Ollama (local inference), kept for interface compatibility.
            model: Model override. If None, uses OLLAMA_MODEL.
            endpoint: Ollama base URL. If None, uses OLLAMA_BASE_URL.
        """
        super().__init__(api_key, model)
        self.base_url = (endpoint or self.settings.ollama_base_url).rstrip("/")
        self.timeout = self.settings.ollama_timeout

    @property
    def provider_type(self) -> ProviderType:
        """Return the provider type."""
        return ProviderType.OLLAMA

    def get_default_model(self) -> str:
        """Get the default Ollama model."""
        return self.settings.ollama_model

    @property
    def client(self) -> httpx.Client:
        """Get HTTP client for Ollama API."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url, timeout=httpx.Timeout(self.timeout)
            )
        return self._client

    def check_connection(self) -> List[str]:
        """
        List models pulled on the Ollama server.

        Raises:
            ProviderError: If the server cannot be reached or answers with an error.
        """
        try:
            response = self.client.get("/api/tags")
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise self._translate_error(e) from e
        except ValueError as e:
            raise ProviderError(
                f"Ollama at {self.base_url} returned a non-JSON response",
                provider=self.provider_type.value,
            ) from e
        if not isinstance(data, dict):
            raise ProviderError(
                f"Ollama at {self.base_url} returned an unexpected response",
                provider=self.provider_type.value,
            )
        return [
            model["name"]
            for model in data.get("models") or []
            if isinstance(model, dict) and "name" in model
        ]

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
    ) -> Dict[str, Any]:
        """Make API call to Ollama."""
        payload: Dict[str, Any] = {
            "model": model,
            "messages": messages,
            "stream": False,
            "options": {
                "num_predict": request.max_tokens or self.settings.llm_max_tokens,
            },
        }
        if request.json_output:
            payload["format"] = "json"

        response = self.client.post("/api/chat", json=payload)
        response.raise_for_status()
        return response.json()

    def _parse_response(
        self, response: Dict[str, Any]
    ) -> Tuple[str, Optional[str], int, Optional[str]]:
        """Parse Ollama response into (content, model, tokens_used, request_id)."""
        content = (response.get("message") or {}).get("content") or ""

        tokens_used = (response.get("prompt_eval_count") or 0) + (
            response.get("eval_count") or 0
        )
        if not tokens_used and content:
            # Rough approximation: 1 token ~ 4 characters
            tokens_used = len(content) // 4

        # Ollama doesn't provide request IDs
        return content, response.get("model"), tokens_used, None

    def _translate_error(self, error: Exception) -> LLMError:
        if isinstance(error, httpx.HTTPStatusError):
            return ProviderError(
                f"Ollama returned HTTP {error.response.status_code}: {error.response.text}",
                provider=self.provider_type.value,
            )
        if isinstance(error, httpx.HTTPError):
            return ProviderError(
                f"Could not reach Ollama at {self.base_url}: {error}",
                provider=self.provider_type.value,
            )
        return super()._translate_error(error)
