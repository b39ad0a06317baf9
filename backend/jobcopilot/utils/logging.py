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
Logging configuration for Job Search Copilot.

This module provides centralized logging configuration with:
- JSON structured logging for production
- Readable console logging for development
- Security-aware logging (no credentials)
"""

import logging
from pathlib import Path
import re
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

from jobcopilot.utils.config import Settings


class SecurityFilter(logging.Filter):
    """Filter out sensitive information from logs."""

    SENSITIVE_KEYS = (
        "api_key",
        "apikey",
        "password",
        "token",
        "secret",
        "openai_api_key",
        "anthropic_api_key",
        "gemini_api_key",
    )

    # Raw key shapes that can leak through exception messages
    KEY_PATTERNS = (
        re.compile(r"sk-[A-Za-z0-9_\-]{8,}"),
        re.compile(r"AIza[0-9A-Za-z_\-]{20,}"),
    )

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter sensitive information from log records."""
        if isinstance(record.msg, str):
            msg = record.msg
            msg_lower = msg.lower()
            for sensitive_key in self.SENSITIVE_KEYS:
                index = msg_lower.find(f"{sensitive_key}=")
                if index != -1:
                    msg = msg[:index] + f"{sensitive_key}=***MASKED***"
                    msg_lower = msg.lower()
            for pattern in self.KEY_PATTERNS:
                msg = pattern.sub("***MASKED***", msg)
            record.msg = msg
        return True


def setup_logging(settings: Settings, log_file: Optional[Path] = None) -> None:
    """
    Setup logging configuration.

    Args:
        settings: Application settings
        log_file: Optional log file path
    """
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, settings.log_level))

    if settings.environment == "development":
        console_format = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        console_format = JsonFormatter("%(asctime)s %(name)s %(levelname)s %(message)s")

    console_handler.setFormatter(console_format)
    console_handler.addFilter(SecurityFilter())
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(
            JsonFormatter(
                "%(asctime)s %(name)s %(levelname)s %(funcName)s %(lineno)d %(message)s"
            )
        )
        file_handler.addFilter(SecurityFilter())
        root_logger.addHandler(file_handler)

    # SDK clients log request lines that can include headers
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)
    logging.getLogger("google_genai").setLevel(logging.WARNING)

    if settings.environment == "development":
        logging.getLogger("jobcopilot").setLevel(logging.DEBUG)
        console_handler.setLevel(logging.DEBUG)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name."""
    return logging.getLogger(name)
