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
LLM Dispatcher.

Routes each operation to the selected provider and retries once on the
configured fallback provider when the selected one cannot serve the request.

States for a request:
- Selected: provider named in the request, else DEFAULT_LLM_PROVIDER
- CredentialCheck: required key missing goes to Fallback or is rejected
- Invoke: one adapter call
- Failure: one fallback call, then AllProvidersFailedError
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel

from jobcopilot.core.exceptions import (
    AllProvidersFailedError,
    CredentialError,
    LLMError,
    UnsupportedProviderError,
)
from jobcopilot.core.llm_providers.base import LLMProvider, ProviderConfig, ProviderType
from jobcopilot.core.llm_providers.factory import (
    APIKeyManager,
    get_llm_provider,
    parse_provider_type,
)
from jobcopilot.core.schemas import ChatResult
from jobcopilot.utils.config import Settings, get_settings
from jobcopilot.utils.logging import get_logger

logger = get_logger(__name__)


class Operation(Enum):
    """LLM operations exposed by the API."""

    CHAT = "chat"
    ANALYZE_RESUME = "analyze-resume"
    MATCH_RESUME = "match-resume"
    GENERATE_COVER_LETTER = "generate-cover-letter"
    GENERATE_INTERVIEW_QUESTIONS = "generate-interview-questions"
    GENERATE_INTERVIEW_ANSWER = "generate-interview-answer"


# Adapter method implementing each operation
OPERATION_HANDLERS: Dict[Operation, str] = {
    Operation.CHAT: "chat",
    Operation.ANALYZE_RESUME: "analyze_resume",
    Operation.MATCH_RESUME: "match_resume",
    Operation.GENERATE_COVER_LETTER: "generate_cover_letter",
    Operation.GENERATE_INTERVIEW_QUESTIONS: "generate_interview_questions",
    Operation.GENERATE_INTERVIEW_ANSWER: "generate_interview_answer",
}


@dataclass
class DispatchResult:
    """Outcome of a dispatched operation."""

    result: BaseModel
    provider: str
    model: str
    fallback_used: bool = False


class LLMDispatcher:
    """Runs operations with single-hop provider fallback."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        provider_factory: Callable[..., LLMProvider] = get_llm_provider,
        key_manager: Optional[APIKeyManager] = None,
    ):
        self.settings = settings or get_settings()
        self.provider_factory = provider_factory
        self.key_manager = key_manager or APIKeyManager(self.settings)

    @property
    def fallback_type(self) -> ProviderType:
        return ProviderType(self.settings.fallback_llm_provider)

    def invoke(
        self,
        provider_type: ProviderType,
        operation: Operation,
        payload: Dict[str, Any],
        config: Optional[ProviderConfig] = None,
    ) -> DispatchResult:
        """
        Run one operation on one provider, without fallback.

        Raises:
            LLMError: Whatever the provider raised.
        """
        provider = self.provider_factory(provider_type, config)
        try:
            handler = getattr(provider, OPERATION_HANDLERS[operation])
            result = handler(**payload)
            model = result.model if isinstance(result, ChatResult) else provider.model
            return DispatchResult(result=result, provider=provider_type.value, model=model)
        finally:
            provider.close()

    def _fallback_ready(self) -> bool:
        if not self.settings.enable_provider_fallback:
            return False
        return self.key_manager.get_api_key(self.fallback_type) is not None

    def _run_fallback(
        self, operation: Operation, payload: Dict[str, Any], reason: str
    ) -> DispatchResult:
        fallback_type = self.fallback_type
        logger.warning(f"Falling back to {fallback_type.value}: {reason}")

        # Environment credential and default model only
        outcome = self.invoke(fallback_type, operation, payload)
        outcome.fallback_used = True
        if isinstance(outcome.result, ChatResult):
            outcome.result = ChatResult(
                content=outcome.result.content,
                model=f"{outcome.result.model} (fallback)",
            )
            outcome.model = outcome.result.model
        return outcome

    def dispatch(
        self,
        operation: Operation,
        payload: Dict[str, Any],
        provider: Optional[str] = None,
        credential: Optional[str] = None,
        endpoint: Optional[str] = None,
        model: Optional[str] = None,
    ) -> DispatchResult:
        """
        Run an operation on the requested provider, falling back once if needed.

        Args:
            operation: Operation to run
            payload: Keyword arguments for the operation
            provider: Provider name; DEFAULT_LLM_PROVIDER when omitted
            credential: Request-scoped API key
            endpoint: Request-scoped Ollama base URL
            model: Request-scoped model override

        Returns:
            The normalized result with the provider and model that produced it.

        Raises:
            UnsupportedProviderError: Unknown provider and no fallback.
            CredentialError: No credential and no fallback.
            AllProvidersFailedError: Primary and fallback both failed.
            LLMError: Primary failed and no fallback was possible.
        """
        name = provider or self.settings.default_llm_provider

        try:
            provider_type = parse_provider_type(name)
        except UnsupportedProviderError as e:
            if self._fallback_ready():
                return self._run_fallback(operation, payload, str(e))
            raise

        can_fall_back = provider_type != self.fallback_type and self._fallback_ready()

        if self.key_manager.get_api_key(provider_type, credential) is None:
            error = CredentialError(
                f"{provider_type.display_name} API key not provided",
                provider=provider_type.value,
            )
            if can_fall_back:
                return self._run_fallback(operation, payload, str(error))
            raise error

        config = ProviderConfig(
            id=provider_type, credential=credential, endpoint=endpoint, model=model
        )
        try:
            return self.invoke(provider_type, operation, payload, config)
        except LLMError as primary_error:
            if not can_fall_back:
                raise
            logger.error(f"{provider_type.value} failed for {operation.value}: {primary_error}")
            try:
                return self._run_fallback(operation, payload, str(primary_error))
            except LLMError as fallback_error:
                raise AllProvidersFailedError(primary_error, fallback_error) from fallback_error


def get_dispatcher() -> LLMDispatcher:
    """Build a dispatcher bound to the current settings."""
    return LLMDispatcher()
