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
Tests for structured response parsing.
"""

import json

import pytest

from jobcopilot.core.exceptions import ParseError
from jobcopilot.core.response_parser import extract_json, parse_model
from jobcopilot.core.schemas import InterviewQuestions, JobMatch, ResumeAnalysis

VALID_ANALYSIS = {
    "score": 82,
    "strengths": ["Clear impact", "Relevant stack", "Concise"],
    "improvements": ["Add metrics", "Trim summary", "List certifications"],
    "suggestions": "Quantify the results of the data pipeline work.",
}


class TestExtractJson:
    """Test JSON extraction from model output."""

    def test_plain_json(self):
        assert extract_json(json.dumps(VALID_ANALYSIS)) == VALID_ANALYSIS

    def test_fenced_json(self):
        text = f"Here is the analysis:\n```json\n{json.dumps(VALID_ANALYSIS)}\n```\nGood luck!"
        assert extract_json(text) == VALID_ANALYSIS

    def test_fence_without_language(self):
        text = f"```\n{json.dumps(VALID_ANALYSIS)}\n```"
        assert extract_json(text) == VALID_ANALYSIS

    def test_object_embedded_in_prose(self):
        text = f"Sure! {json.dumps(VALID_ANALYSIS)} Let me know if you need more."
        assert extract_json(text) == VALID_ANALYSIS

    def test_braces_inside_strings(self):
        payload = {"suggestions": "Use {placeholders} sparingly", "score": 1}
        text = f"Result: {json.dumps(payload)} done"
        assert extract_json(text) == payload

    def test_idempotent_on_valid_json(self):
        once = extract_json(json.dumps(VALID_ANALYSIS))
        twice = extract_json(json.dumps(once))
        assert once == twice == VALID_ANALYSIS

    @pytest.mark.parametrize("text", ["", "   ", "\n"])
    def test_empty_response(self, text):
        with pytest.raises(ParseError, match="Empty response"):
            extract_json(text)

    def test_no_json(self):
        with pytest.raises(ParseError, match="Could not extract JSON from gemini response"):
            extract_json("I cannot help with that.", provider="gemini")

    def test_json_array_is_rejected(self):
        with pytest.raises(ParseError):
            extract_json("[1, 2, 3]")

    def test_error_carries_provider(self):
        with pytest.raises(ParseError) as exc_info:
            extract_json("no json here", provider="ollama")
        assert exc_info.value.provider == "ollama"
        assert exc_info.value.status_code == 500


class TestParseModel:
    """Test schema validation of extracted JSON."""

    def test_resume_analysis(self):
        result = parse_model(json.dumps(VALID_ANALYSIS), ResumeAnalysis)
        assert 0 <= result.score <= 100
        assert len(result.strengths) == 3
        assert len(result.improvements) == 3

    def test_resume_analysis_wrong_strength_count(self):
        bad = dict(VALID_ANALYSIS, strengths=["Only one"])
        with pytest.raises(ParseError, match="strengths"):
            parse_model(json.dumps(bad), ResumeAnalysis, provider="openai")

    def test_resume_analysis_score_out_of_range(self):
        bad = dict(VALID_ANALYSIS, score=140)
        with pytest.raises(ParseError, match="score"):
            parse_model(json.dumps(bad), ResumeAnalysis)

    def test_job_match_uses_camel_case(self):
        text = json.dumps(
            {
                "matchPercentage": 74,
                "matchingSkills": ["Python", "FastAPI"],
                "missingSkills": ["Kubernetes"],
                "suggestions": "Mention container orchestration experience.",
            }
        )
        result = parse_model(text, JobMatch)
        assert result.match_percentage == 74
        assert result.model_dump(by_alias=True)["missingSkills"] == ["Kubernetes"]

    def test_interview_question_ids_are_strings(self):
        text = json.dumps({"questions": [{"id": 1, "question": "Why us?"}]})
        result = parse_model(text, InterviewQuestions)
        assert result.questions[0].id == "1"

    def test_interview_questions_must_not_be_empty(self):
        with pytest.raises(ParseError):
            parse_model(json.dumps({"questions": []}), InterviewQuestions)

    def test_fractional_score_is_accepted(self):
        result = parse_model(json.dumps(dict(VALID_ANALYSIS, score=87.5)), ResumeAnalysis)
        assert result.score == 87.5

    def test_fractional_match_percentage_is_accepted(self):
        text = json.dumps(
            {
                "matchPercentage": 72.5,
                "matchingSkills": ["Python"],
                "missingSkills": ["Go"],
                "suggestions": "Highlight backend work.",
            }
        )
        result = parse_model(text, JobMatch)
        assert result.match_percentage == 72.5
        assert result.model_dump(by_alias=True)["matchPercentage"] == 72.5

    @pytest.mark.parametrize("percentage", [-1, 100.5, 140])
    def test_match_percentage_out_of_range(self, percentage):
        text = json.dumps(
            {
                "matchPercentage": percentage,
                "matchingSkills": [],
                "missingSkills": [],
                "suggestions": "",
            }
        )
        with pytest.raises(ParseError, match="matchPercentage"):
            parse_model(text, JobMatch)
