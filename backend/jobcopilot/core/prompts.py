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
Prompt System for Job Search Copilot.

One fixed instruction template per operation, shared by every provider:
- Structured operations (analysis, matching, question generation) ask for strict JSON
- Free-text operations (cover letter, interview answer) describe tone and length
"""

from enum import Enum
from typing import Dict, Optional, Tuple

from jobcopilot.utils.logging import get_logger

logger = get_logger(__name__)

RESUME_ANALYSIS_PROMPT = """You are an expert resume analyst. Analyze the resume provided and give feedback on:
1. Overall resume score out of 100
2. Top 3 strengths
3. Top 3 areas for improvement
4. Specific suggestions to enhance the resume

Respond only with JSON in this format:
{
  "score": number,
  "strengths": [string, string, string],
  "improvements": [string, string, string],
  "suggestions": string
}"""

JOB_MATCH_PROMPT = """You are an expert job application analyst. Compare the resume to the job description and:
1. Calculate a match percentage (0-100)
2. Identify key matching skills
3. Identify missing skills or qualifications
4. Provide suggestions to tailor the resume for this specific job

Respond only with JSON in this format:
{
  "matchPercentage": number,
  "matchingSkills": [string, string, string],
  "missingSkills": [string, string, string],
  "suggestions": string
}"""

COVER_LETTER_PROMPT = """You are an expert cover letter writer. Create a professional cover letter based on the resume and job description provided.
The cover letter should:
1. Be professionally formatted
2. Highlight relevant skills and experiences from the resume
3. Connect the candidate's background to the job requirements
4. Include a compelling introduction and conclusion

The tone should be professional but conversational. Keep it to around 300-400 words."""

INTERVIEW_QUESTIONS_PROMPT = """You are an expert interview coach. Generate 5 likely interview questions for the job description provided.
Include both technical and behavioral questions relevant to the position.

Respond only with JSON in this format:
{
  "questions": [
    {"id": "q1", "question": "Question text here?"},
    {"id": "q2", "question": "Question text here?"},
    {"id": "q3", "question": "Question text here?"},
    {"id": "q4", "question": "Question text here?"},
    {"id": "q5", "question": "Question text here?"}
  ]
}"""

INTERVIEW_ANSWER_PROMPT = """You are an expert interview coach. Generate a strong answer to the interview question based on the candidate's resume.
The answer should:
1. Be concise but thorough (2-3 paragraphs)
2. Use the STAR method where applicable (Situation, Task, Action, Result)
3. Highlight relevant experience from the resume
4. Be conversational and authentic"""


class PromptType(Enum):
    """One prompt per templated LLM operation. Chat sends the conversation as-is."""

    RESUME_ANALYSIS = "resume_analysis"
    JOB_MATCH = "job_match"
    COVER_LETTER = "cover_letter"
    INTERVIEW_QUESTIONS = "interview_questions"
    INTERVIEW_ANSWER = "interview_answer"


# Ordered (label, field) pairs making up the user message
_USER_SECTIONS: Dict[PromptType, Tuple[Tuple[str, str], ...]] = {
    PromptType.RESUME_ANALYSIS: (("RESUME", "resume_text"),),
    PromptType.JOB_MATCH: (
        ("RESUME", "resume_text"),
        ("JOB DESCRIPTION", "job_description"),
    ),
    PromptType.COVER_LETTER: (
        ("RESUME", "resume_text"),
        ("JOB DESCRIPTION", "job_description"),
    ),
    PromptType.INTERVIEW_QUESTIONS: (("JOB DESCRIPTION", "job_description"),),
    PromptType.INTERVIEW_ANSWER: (
        ("RESUME", "resume_text"),
        ("INTERVIEW QUESTION", "question"),
    ),
}

_SYSTEM_PROMPTS: Dict[PromptType, str] = {
    PromptType.RESUME_ANALYSIS: RESUME_ANALYSIS_PROMPT,
    PromptType.JOB_MATCH: JOB_MATCH_PROMPT,
    PromptType.COVER_LETTER: COVER_LETTER_PROMPT,
    PromptType.INTERVIEW_QUESTIONS: INTERVIEW_QUESTIONS_PROMPT,
    PromptType.INTERVIEW_ANSWER: INTERVIEW_ANSWER_PROMPT,
}

JSON_PROMPT_TYPES = frozenset(
    {
        PromptType.RESUME_ANALYSIS,
        PromptType.JOB_MATCH,
        PromptType.INTERVIEW_QUESTIONS,
    }
)


class PromptManager:
    """Builds system and user prompts for each operation."""

    def __init__(self):
        """Initialize the prompt manager."""
        self.logger = get_logger(f"{__name__}.PromptManager")

    def build_system_prompt(self, prompt_type: PromptType) -> str:
        """Get the fixed instruction template for an operation."""
        return _SYSTEM_PROMPTS[prompt_type]

    def build_user_prompt(self, prompt_type: PromptType, **fields: str) -> str:
        """
        Build the user message from labelled sections.

        Args:
            prompt_type: Operation being prompted
            **fields: Section values keyed by field name (resume_text, ...)

        Returns:
            The user message, one ``LABEL:\\nvalue`` block per section

        Raises:
            KeyError: If a required section is missing
        """
        parts = []
        for label, field in _USER_SECTIONS[prompt_type]:
            parts.append(f"{label}:\n{fields[field]}")
        return "\n\n".join(parts)

    def build_prompt(self, prompt_type: PromptType, **fields: str) -> Tuple[str, str]:
        """Return ``(system_prompt, user_message)`` for an operation."""
        return self.build_system_prompt(prompt_type), self.build_user_prompt(
            prompt_type, **fields
        )

    def expects_json(self, prompt_type: PromptType) -> bool:
        """Whether the operation's template asks the model for JSON."""
        return prompt_type in JSON_PROMPT_TYPES


# Global instance
_prompt_manager: Optional[PromptManager] = None


def get_prompt_manager() -> PromptManager:
    """Get the global prompt manager instance."""
    global _prompt_manager
    if _prompt_manager is None:
        _prompt_manager = PromptManager()
    return _prompt_manager
