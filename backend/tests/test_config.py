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
Tests for configuration and logging.
"""

import logging

from pydantic import ValidationError
from pythonjsonlogger.json import JsonFormatter
import pytest

from jobcopilot.utils.config import Settings, get_settings, is_usable_key
from jobcopilot.utils.logging import SecurityFilter, setup_logging


class TestSettings:
    """Test settings loading and validation."""

    def test_defaults(self):
        settings = get_settings()

        assert settings.default_llm_provider == "gemini"
        assert settings.fallback_llm_provider == "gemini"
        assert settings.enable_provider_fallback is True
        assert settings.ollama_base_url == "http://localhost:11434"
        assert settings.ollama_model == "gemma3:1b"
        assert settings.gemini_model == "gemini-pro"

    def test_read_at_call_time(self, monkeypatch):
        assert get_settings().openai_api_key is None

        monkeypatch.setenv("OPENAI_API_KEY", "sk-later")

        assert get_settings().openai_api_key == "sk-later"

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("ANTHROPIC_API_KEY=sk-ant-dotenv\nOLLAMA_TIMEOUT=30\n")

        settings = get_settings()

        assert settings.anthropic_api_key == "sk-ant-dotenv"
        assert settings.ollama_timeout == 30.0

    def test_provider_names_are_normalized(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_LLM_PROVIDER", "OpenAI")

        assert get_settings().default_llm_provider == "openai"

    def test_unknown_provider_rejected(self):
        with pytest.raises(ValidationError):
            Settings(fallback_llm_provider="mistral")

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD")

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("sk-real", True),
            (None, False),
            ("", False),
            ("   ", False),
            ("your_gemini_api_key_here", False),
        ],
    )
    def test_is_usable_key(self, value, expected):
        assert is_usable_key(value) is expected


class TestLogging:
    """Test logging setup and credential masking."""

    def _record(self, msg):
        return logging.LogRecord("test", logging.INFO, __file__, 1, msg, None, None)

    def test_masks_key_assignments(self):
        record = self._record("Calling provider with api_key=sk-abcdef1234567890")

        SecurityFilter().filter(record)

        assert "sk-abcdef" not in record.msg
        assert "api_key=***MASKED***" in record.msg

    def test_masks_raw_keys(self):
        record = self._record(
            "Rejected: sk-proj-ABCDEFGH12345678 and AIzaSyA1234567890abcdefghijkl"
        )

        SecurityFilter().filter(record)

        assert "ABCDEFGH" not in record.msg
        assert "AIzaSy" not in record.msg
        assert record.msg.count("***MASKED***") == 2

    def test_leaves_plain_messages(self):
        record = self._record("Gemini responded in 0.42s")

        assert SecurityFilter().filter(record) is True
        assert record.msg == "Gemini responded in 0.42s"

    def test_production_uses_json(self):
        root = logging.getLogger()
        saved = list(root.handlers)
        try:
            setup_logging(Settings(environment="production"))
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
        finally:
            root.handlers[:] = saved

    def test_development_uses_plain_text(self):
        root = logging.getLogger()
        saved = list(root.handlers)
        try:
            setup_logging(Settings(environment="development"))
            formatter = root.handlers[0].formatter
            assert not isinstance(formatter, JsonFormatter)
        finally:
            root.handlers[:] = saved
