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
Google Gemini LLM Provider Implementation.

Uses the google-genai SDK. Gemini names the assistant role ``model`` and
requires the conversation to start and end with a user turn.
"""

from typing import Any, List, Optional, Tuple

from google import genai
from google.genai import errors, types

from jobcopilot.core.exceptions import CredentialError, LLMError, ProviderError
from jobcopilot.core.llm_providers.base import (
    GenerationRequest,
    LLMProvider,
    ProviderType,
)


class GeminiProvider(LLMProvider):
    """Google Gemini provider implementation."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """
        Initialize Gemini provider.

        Args:
            api_key: Gemini API key. If None, uses environment variable.
            model: Model override. If None, uses GEMINI_MODEL.
        """
        super().__init__(api_key, model)

        if not self.api_key:
            self.api_key = self.settings.gemini_api_key

    @property
    def provider_type(self) -> ProviderType:
        """Return the provider type."""
        return ProviderType.GEMINI

    def get_default_model(self) -> str:
        """Get the default Gemini model."""
        return self.settings.gemini_model

    @property
    def client(self) -> "genai.Client":
        """Lazy load Gemini client."""
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
            self.logger.info("Gemini client initialized")
        return self._client

    def _build_messages(self, request: GenerationRequest) -> List[types.Content]:
        """Convert turns to Gemini contents, dropping leading assistant turns."""
        contents: List[types.Content] = []
        for message in request.messages:
            if not contents and message.role == "assistant":
                continue
            role = "model" if message.role == "assistant" else "user"
            contents.append(types.Content(role=role, parts=[types.Part(text=message.content)]))

        if not contents or contents[-1].role != "user":
            raise ProviderError(
                "Gemini conversation must end with a user message",
                provider=self.provider_type.value,
            )
        return contents

    def _make_api_call(
        self, messages: List[types.Content], request: GenerationRequest, model: str
    ) -> Any:
        """Make API call to Gemini."""
        config = types.GenerateContentConfig(
            system_instruction=request.system_prompt,
            max_output_tokens=request.max_tokens or self.settings.llm_max_tokens,
            response_mime_type="application/json" if request.json_output else None,
        )
        return self.client.models.generate_content(
            model=model,
            contents=messages,
            config=config,
        )

    def _parse_response(self, response: Any) -> Tuple[str, Optional[str], int, Optional[str]]:
        """Parse Gemini response into (content, model, tokens_used, request_id)."""
        content = getattr(response, "text", None) or ""

        tokens_used = 0
        usage = getattr(response, "usage_metadata", None)
        if usage is not None:
            total_tokens = getattr(usage, "total_token_count", None)
            if isinstance(total_tokens, int):
                tokens_used = total_tokens

        # Report the model that was requested
        return content, None, tokens_used, getattr(response, "response_id", None)

    def _translate_error(self, error: Exception) -> LLMError:
        if isinstance(error, errors.ClientError) and (
            error.code in (401, 403) or "api key" in str(error).lower()
        ):
            return CredentialError(
                "Gemini rejected the API key", provider=self.provider_type.value
            )
        return super()._translate_error(error)
