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
Direct provider endpoints.

``POST /api/llm/{provider}/{operation}`` runs one operation on exactly the
named provider, with no fallback. ``POST /api/llm/ollama/test`` probes an
Ollama server and lists its models.
"""

from typing import Any, Dict, Optional, Type

from fastapi import APIRouter, Body, Depends, HTTPException, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from jobcopilot.api.models import (
    ChatRequest,
    CoverLetterRequest,
    ErrorResponse,
    InterviewAnswerRequest,
    InterviewQuestionsRequest,
    JobMatchRequest,
    LLMRequest,
    OllamaModelStatus,
    OllamaTestRequest,
    OllamaTestResponse,
    ResumeAnalysisRequest,
)
from jobcopilot.core.dispatcher import LLMDispatcher, Operation, get_dispatcher
from jobcopilot.core.exceptions import LLMError
from jobcopilot.core.llm_providers.base import ProviderConfig
from jobcopilot.core.llm_providers.factory import parse_provider_type
from jobcopilot.core.llm_providers.ollama_provider import OllamaProvider
from jobcopilot.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/llm", tags=["llm"])

REQUEST_MODELS: Dict[Operation, Type[LLMRequest]] = {
    Operation.CHAT: ChatRequest,
    Operation.ANALYZE_RESUME: ResumeAnalysisRequest,
    Operation.MATCH_RESUME: JobMatchRequest,
    Operation.GENERATE_COVER_LETTER: CoverLetterRequest,
    Operation.GENERATE_INTERVIEW_QUESTIONS: InterviewQuestionsRequest,
    Operation.GENERATE_INTERVIEW_ANSWER: InterviewAnswerRequest,
}


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"Invalid request: {location}: {first['msg']}" if location else first["msg"]


@router.post(
    "/ollama/test",
    response_model=OllamaTestResponse,
    response_model_exclude_none=True,
)
def test_ollama_connection(request: Optional[OllamaTestRequest] = None):
    """Check that an Ollama server is reachable and list its models."""
    provider = OllamaProvider(endpoint=request.endpoint if request else None)
    try:
        names = provider.check_connection()
    except LLMError as e:
        logger.warning(f"Ollama connection test failed: {e}")
        return JSONResponse(
            status_code=500,
            content=OllamaTestResponse(success=False, error=str(e)).model_dump(
                exclude_none=True
            ),
        )
    finally:
        provider.close()

    return OllamaTestResponse(
        success=True,
        models=[OllamaModelStatus(name=name) for name in names],
        message=f"Connected to Ollama at {provider.base_url} ({len(names)} models)",
    )


@router.post(
    "/{provider}/{operation}",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def run_on_provider(
    provider: str,
    operation: str,
    response: Response,
    body: Dict[str, Any] = Body(...),
    dispatcher: LLMDispatcher = Depends(get_dispatcher),
):
    """Run an operation on the named provider only."""
    provider_type = parse_provider_type(provider)
    try:
        op = Operation(operation)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown operation: {operation}")

    try:
        request = REQUEST_MODELS[op].model_validate(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=_validation_message(e))

    config = ProviderConfig(
        id=provider_type,
        credential=request.api_key,
        endpoint=request.endpoint,
        model=request.model,
    )
    outcome = dispatcher.invoke(provider_type, op, request.payload(), config)
    response.headers["X-LLM-Provider"] = outcome.provider
    response.headers["X-LLM-Fallback"] = "false"
    return outcome.result.model_dump(by_alias=True)
