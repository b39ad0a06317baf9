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
Base LLM Provider Abstract Class.

Defines the common interface that all LLM providers must implement, and the
six job-search operations built on top of it. Concrete providers only supply
the wire format: message building, the API call, response unpacking and
error translation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

from jobcopilot.core.exceptions import CredentialError, LLMError, ProviderError
from jobcopilot.core.prompts import PromptType, get_prompt_manager
from jobcopilot.core.response_parser import parse_model
from jobcopilot.core.schemas import (
    ChatMessage,
    ChatResult,
    CoverLetter,
    InterviewAnswer,
    InterviewQuestions,
    JobMatch,
    ResumeAnalysis,
)
from jobcopilot.utils.config import get_settings, is_usable_key
from jobcopilot.utils.logging import get_logger


class ProviderType(Enum):
    """Available LLM provider types."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    OLLAMA = "ollama"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def requires_credential(self) -> bool:
        """Local inference needs no API key."""
        return self is not ProviderType.OLLAMA


_DISPLAY_NAMES = {
    ProviderType.OPENAI: "OpenAI",
    ProviderType.ANTHROPIC: "Anthropic",
    ProviderType.GEMINI: "Google Gemini",
    ProviderType.OLLAMA: "Ollama",
}


@dataclass
class ProviderConfig:
    """Per-request provider settings. Never persisted."""

    id: ProviderType
    credential: Optional[str] = None
    endpoint: Optional[str] = None  # Ollama only
    model: Optional[str] = None


@dataclass
class GenerationRequest:
    """Request for content generation."""

    messages: List[ChatMessage]
    system_prompt: Optional[str] = None
    json_output: bool = False
    max_tokens: Optional[int] = None
    model: Optional[str] = None


@dataclass
class GenerationResponse:
    """Response from content generation."""

    content: str
    model_used: str
    provider_used: str
    tokens_used: int
    generation_time: float
    request_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """
        Initialize the LLM provider.

        Args:
            api_key: API key for the provider. If None, subclasses read the
                environment default.
            model: Model override. If None, uses the provider default.
        """
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")
        self.settings = get_settings()
        self.prompt_manager = get_prompt_manager()
        self.api_key = api_key
        self.model = model or self.get_default_model()
        self._client = None

    @property
    @abstractmethod
    def provider_type(self) -> ProviderType:
        """Return the provider type."""

    @abstractmethod
    def get_default_model(self) -> str:
        """Get the default model for this provider."""

    @abstractmethod
    def _build_messages(self, request: GenerationRequest) -> Any:
        """Build messages in provider-specific format."""

    @abstractmethod
    def _make_api_call(self, messages: Any, request: GenerationRequest, model: str) -> Any:
        """Make the actual API call to the provider."""

    @abstractmethod
    def _parse_response(self, response: Any) -> Tuple[str, Optional[str], int, Optional[str]]:
        """Parse the provider response into (content, model, tokens_used, request_id)."""

    def _translate_error(self, error: Exception) -> LLMError:
        """Map a client or SDK exception onto the error taxonomy."""
        return ProviderError(
            f"{self.provider_type.display_name} request failed: {error}",
            provider=self.provider_type.value,
        )

    @property
    def requires_credential(self) -> bool:
        return self.provider_type.requires_credential

    def is_configured(self) -> bool:
        """Check if the provider has what it needs to make a call."""
        if not self.requires_credential:
            return True
        return is_usable_key(self.api_key)

    def close(self) -> None:
        """Release the underlying client, if one was created."""
        close = getattr(self._client, "close", None)
        if callable(close):
            close()
        self._client = None

    def generate_content(self, request: GenerationRequest) -> GenerationResponse:
        """
        Generate content using this provider.

        Args:
            request: Generation request with messages and parameters.

        Returns:
            Generation response with content and metadata.

        Raises:
            CredentialError: If no usable credential is set or the provider rejects it.
            ProviderError: If the call fails.
        """
        name = self.provider_type.display_name
        if not self.is_configured():
            raise CredentialError(
                f"{name} API key not provided", provider=self.provider_type.value
            )

        start_time = time.time()
        messages = self._build_messages(request)
        model = request.model or self.model

        self.logger.debug(
            f"Calling {name} with {model} "
            f"({len(request.messages)} messages, json={request.json_output})"
        )

        try:
            response = self._make_api_call(messages, request, model)
            content, model_reported, tokens_used, request_id = self._parse_response(
                response
            )
        except LLMError:
            raise
        except Exception as e:
            error = self._translate_error(e)
            self.logger.error(f"{name} API call failed: {error}")
            raise error from e

        generation_time = time.time() - start_time

        self.logger.info(
            f"{name} responded in {generation_time:.2f}s, tokens: {tokens_used}"
        )

        return GenerationResponse(
            content=content,
            model_used=model_reported or model,
            provider_used=self.provider_type.value,
            tokens_used=tokens_used,
            generation_time=generation_time,
            request_id=request_id,
        )

    def _run_prompt(self, prompt_type: PromptType, **fields: str) -> GenerationResponse:
        system_prompt, user_message = self.prompt_manager.build_prompt(prompt_type, **fields)
        request = GenerationRequest(
            messages=[ChatMessage(role="user", content=user_message)],
            system_prompt=system_prompt,
            json_output=self.prompt_manager.expects_json(prompt_type),
        )
        return self.generate_content(request)

    def chat(self, messages: Sequence[ChatMessage]) -> ChatResult:
        """Continue a conversation. Turn order is preserved."""
        response = self.generate_content(GenerationRequest(messages=list(messages)))
        return ChatResult(content=response.content, model=response.model_used)

    def analyze_resume(self, resume_text: str) -> ResumeAnalysis:
        """Score a resume and list strengths and improvements."""
        response = self._run_prompt(PromptType.RESUME_ANALYSIS, resume_text=resume_text)
        return parse_model(response.content, ResumeAnalysis, provider=self.provider_type.value)

    def match_resume(self, resume_text: str, job_description: str) -> JobMatch:
        """Compare a resume against a job description."""
        response = self._run_prompt(
            PromptType.JOB_MATCH,
            resume_text=resume_text,
            job_description=job_description,
        )
        return parse_model(response.content, JobMatch, provider=self.provider_type.value)

    def generate_cover_letter(self, resume_text: str, job_description: str) -> CoverLetter:
        """Write a cover letter for the job from the resume."""
        response = self._run_prompt(
            PromptType.COVER_LETTER,
            resume_text=resume_text,
            job_description=job_description,
        )
        return CoverLetter(cover_letter=response.content)

    def generate_interview_questions(self, job_description: str) -> InterviewQuestions:
        """Generate likely interview questions for a job description."""
        response = self._run_prompt(
            PromptType.INTERVIEW_QUESTIONS, job_description=job_description
        )
        return parse_model(
            response.content, InterviewQuestions, provider=self.provider_type.value
        )

    def generate_interview_answer(self, question: str, resume_text: str) -> InterviewAnswer:
        """Draft an answer to an interview question from the resume."""
        response = self._run_prompt(
            PromptType.INTERVIEW_ANSWER,
            resume_text=resume_text,
            question=question,
        )
        return InterviewAnswer(answer=response.content)
