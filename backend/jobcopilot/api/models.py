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

from datetime import datetime
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from jobcopilot.core.schemas import ChatMessage


class LLMRequest(BaseModel):
    """Fields shared by every LLM request: provider selection and overrides."""

    model_config = ConfigDict(populate_by_name=True)

    # Operation keyword arguments taken from the body, in order
    _operation_fields: ClassVar[Tuple[str, ...]] = ()

    provider: Optional[str] = Field(
        None, description="openai, anthropic, gemini or ollama. Defaults to DEFAULT_LLM_PROVIDER"
    )
    api_key: Optional[str] = Field(
        None, alias="apiKey", description="Request-scoped API key. Never stored"
    )
    model: Optional[str] = Field(None, description="Model override")
    endpoint: Optional[str] = Field(None, description="Ollama base URL override")

    def payload(self) -> Dict[str, Any]:
        """Keyword arguments for the operation."""
        return {name: getattr(self, name) for name in self._operation_fields}


class ChatRequest(LLMRequest):
    _operation_fields: ClassVar[Tuple[str, ...]] = ("messages",)

    messages: List[ChatMessage] = Field(..., min_length=1, description="Conversation so far")


class ResumeAnalysisRequest(LLMRequest):
    _operation_fields: ClassVar[Tuple[str, ...]] = ("resume_text",)

    resume_text: str = Field(..., alias="resumeText", min_length=1)


class JobMatchRequest(LLMRequest):
    _operation_fields: ClassVar[Tuple[str, ...]] = ("resume_text", "job_description")

    resume_text: str = Field(..., alias="resumeText", min_length=1)
    job_description: str = Field(..., alias="jobDescription", min_length=1)


class CoverLetterRequest(JobMatchRequest):
    pass


class InterviewQuestionsRequest(LLMRequest):
    _operation_fields: ClassVar[Tuple[str, ...]] = ("job_description",)

    job_description: str = Field(..., alias="jobDescription", min_length=1)


class InterviewAnswerRequest(LLMRequest):
    _operation_fields: ClassVar[Tuple[str, ...]] = ("question", "resume_text")

    question: str = Field(..., min_length=1)
    resume_text: str = Field(..., alias="resumeText", min_length=1)


class OllamaTestRequest(BaseModel):
    endpoint: Optional[str] = Field(None, description="Ollama base URL to probe")


class OllamaModelStatus(BaseModel):
    name: str
    status: str = "available"


class OllamaTestResponse(BaseModel):
    success: bool = Field(..., description="Whether the server answered")
    models: List[OllamaModelStatus] = Field(default_factory=list)
    message: Optional[str] = None
    error: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Human-readable error message")


class HealthResponse(BaseModel):
    status: str = Field("ok", description="Service status")
    timestamp: datetime = Field(default_factory=datetime.now)
    services: Dict[str, bool] = Field(
        default_factory=dict, description="Provider availability"
    )
