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
Job search assistant endpoints.

Each route runs one operation through the dispatcher. The provider that
answered, and whether the fallback was used, are reported in the
X-LLM-Provider and X-LLM-Fallback response headers.
"""

from fastapi import APIRouter, Depends, Response

from jobcopilot.api.models import (
    ChatRequest,
    CoverLetterRequest,
    ErrorResponse,
    InterviewAnswerRequest,
    InterviewQuestionsRequest,
    JobMatchRequest,
    LLMRequest,
    ResumeAnalysisRequest,
)
from jobcopilot.core.dispatcher import DispatchResult, LLMDispatcher, Operation, get_dispatcher
from jobcopilot.core.schemas import (
    ChatResult,
    CoverLetter,
    InterviewAnswer,
    InterviewQuestions,
    JobMatch,
    ResumeAnalysis,
)
from jobcopilot.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["assistant"],
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


def run_operation(
    dispatcher: LLMDispatcher,
    operation: Operation,
    request: LLMRequest,
    response: Response,
):
    """Dispatch a request and expose the serving provider in headers."""
    outcome: DispatchResult = dispatcher.dispatch(
        operation,
        request.payload(),
        provider=request.provider,
        credential=request.api_key,
        endpoint=request.endpoint,
        model=request.model,
    )
    response.headers["X-LLM-Provider"] = outcome.provider
    response.headers["X-LLM-Fallback"] = "true" if outcome.fallback_used else "false"
    logger.info(
        f"{operation.value} served by {outcome.provider} ({outcome.model})"
        + (" via fallback" if outcome.fallback_used else "")
    )
    return outcome.result


@router.post("/chat", response_model=ChatResult)
def chat(
    request: ChatRequest,
    response: Response,
    dispatcher: LLMDispatcher = Depends(get_dispatcher),
):
    """Continue a career-advice conversation."""
    return run_operation(dispatcher, Operation.CHAT, request, response)


@router.post("/resume/analyze", response_model=ResumeAnalysis)
def analyze_resume(
    request: ResumeAnalysisRequest,
    response: Response,
    dispatcher: LLMDispatcher = Depends(get_dispatcher),
):
    """Score a resume with strengths and improvements."""
    return run_operation(dispatcher, Operation.ANALYZE_RESUME, request, response)


@router.post("/resume/match", response_model=JobMatch)
def match_resume(
    request: JobMatchRequest,
    response: Response,
    dispatcher: LLMDispatcher = Depends(get_dispatcher),
):
    """Compare a resume with a job description."""
    return run_operation(dispatcher, Operation.MATCH_RESUME, request, response)


@router.post("/cover-letter/generate", response_model=CoverLetter)
def generate_cover_letter(
    request: CoverLetterRequest,
    response: Response,
    dispatcher: LLMDispatcher = Depends(get_dispatcher),
):
    return run_operation(dispatcher, Operation.GENERATE_COVER_LETTER, request, response)


@router.post("/interview/questions", response_model=InterviewQuestions)
def generate_interview_questions(
    request: InterviewQuestionsRequest,
    response: Response,
    dispatcher: LLMDispatcher = Depends(get_dispatcher),
):
    return run_operation(
        dispatcher, Operation.GENERATE_INTERVIEW_QUESTIONS, request, response
    )


@router.post("/interview/answer", response_model=InterviewAnswer)
def generate_interview_answer(
    request: InterviewAnswerRequest,
    response: Response,
    dispatcher: LLMDispatcher = Depends(get_dispatcher),
):
    return run_operation(
        dispatcher, Operation.GENERATE_INTERVIEW_ANSWER, request, response
    )
