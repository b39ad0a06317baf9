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
Canonical operation results.

These shapes are identical for every provider. Field names are snake_case in
Python and camelCase on the wire.
"""

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field


class CanonicalModel(BaseModel):
    """Base for results that accept and emit camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)


class ChatMessage(CanonicalModel):
    role: Literal["user", "assistant"] = Field(..., description="Message role")
    content: str = Field(..., description="Message content")


class ChatResult(CanonicalModel):
    content: str = Field(..., description="Assistant reply")
    model: str = Field(..., description="Model that produced the reply")


class ResumeAnalysis(CanonicalModel):
    score: float = Field(..., ge=0, le=100, description="Overall resume score")
    strengths: List[str] = Field(..., min_length=3, max_length=3)
    improvements: List[str] = Field(..., min_length=3, max_length=3)
    suggestions: str = Field(..., description="Specific suggestions to enhance the resume")


class JobMatch(CanonicalModel):
    match_percentage: float = Field(..., alias="matchPercentage", ge=0, le=100)
    matching_skills: List[str] = Field(..., alias="matchingSkills")
    missing_skills: List[str] = Field(..., alias="missingSkills")
    suggestions: str = Field(..., description="How to tailor the resume for this job")


class CoverLetter(CanonicalModel):
    cover_letter: str = Field(..., alias="coverLetter")


class InterviewQuestion(CanonicalModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    question: str


class InterviewQuestions(CanonicalModel):
    questions: List[InterviewQuestion] = Field(..., min_length=1)


class InterviewAnswer(CanonicalModel):
    answer: str
