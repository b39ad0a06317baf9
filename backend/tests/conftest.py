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
Shared test fixtures.

Settings are read from the environment on every call, so each test starts
from a clean environment with no provider keys and no ``.env`` file.
"""

import pytest

ENV_VARS = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GEMINI_API_KEY",
    "DEFAULT_LLM_PROVIDER",
    "FALLBACK_LLM_PROVIDER",
    "ENABLE_PROVIDER_FALLBACK",
    "OPENAI_MODEL",
    "ANTHROPIC_MODEL",
    "GEMINI_MODEL",
    "OLLAMA_MODEL",
    "OLLAMA_BASE_URL",
    "OLLAMA_TIMEOUT",
    "LLM_MAX_TOKENS",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Remove provider configuration and run from an empty directory."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture(autouse=True)
def reset_rate_limit():
    """Start each test with an empty rate-limit window."""
    from jobcopilot.api import main

    main._rate_limit_bucket.clear()
    yield
    main._rate_limit_bucket.clear()


@pytest.fixture
def resume_text():
    return (
        "Jane Doe\nSenior Python Developer\n"
        "Experience: 6 years building FastAPI services and data pipelines.\n"
        "Skills: Python, FastAPI, PostgreSQL, Docker, AWS"
    )


@pytest.fixture
def job_description():
    return (
        "We are hiring a Backend Engineer to design REST APIs in Python. "
        "Requirements: FastAPI, PostgreSQL, Kubernetes, 5+ years experience."
    )
