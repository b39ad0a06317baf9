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
Structured response parsing.

Models asked for JSON sometimes wrap it in a markdown fence or add a sentence
of preamble. Extraction runs a fixed sequence of steps and the result is
always validated against the operation's schema, so non-conforming output
fails the same way every time.
"""

import json
import re
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from jobcopilot.core.exceptions import ParseError
from jobcopilot.utils.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_FENCE_PATTERN = re.compile(r"```(?:json|JSON)?[ \t]*\n?([\s\S]*?)```")


def _first_object_span(text: str) -> Optional[str]:
    """Return the first balanced ``{...}`` span, skipping braces inside strings."""
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if escaped:
            escaped = False
            continue
        if char == "\\" and in_string:
            escaped = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return None


def _loads_object(candidate: str) -> Optional[Dict[str, Any]]:
    try:
        value = json.loads(candidate)
    except (json.JSONDecodeError, TypeError):
        return None
    return value if isinstance(value, dict) else None


def extract_json(text: str, provider: Optional[str] = None) -> Dict[str, Any]:
    """
    Extract a JSON object from model output.

    Steps, in order: the whole text, the first fenced code block, the first
    balanced ``{...}`` span.

    Raises:
        ParseError: If the text is empty or no step yields a JSON object.
    """
    if not text or not text.strip():
        raise ParseError("Empty response from model", provider=provider)

    stripped = text.strip()

    parsed = _loads_object(stripped)
    if parsed is not None:
        return parsed

    fence = _FENCE_PATTERN.search(stripped)
    if fence:
        parsed = _loads_object(fence.group(1).strip())
        if parsed is not None:
            return parsed

    span = _first_object_span(stripped)
    if span is not None:
        parsed = _loads_object(span)
        if parsed is not None:
            logger.debug("Recovered JSON object from surrounding text")
            return parsed

    source = provider or "model"
    raise ParseError(f"Could not extract JSON from {source} response", provider=provider)


def parse_model(text: str, schema: Type[ModelT], provider: Optional[str] = None) -> ModelT:
    """Extract JSON from ``text`` and validate it against ``schema``."""
    data = extract_json(text, provider=provider)
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]) or "<root>" for error in e.errors()
        )
        source = provider or "model"
        raise ParseError(
            f"{source} response does not match the {schema.__name__} format ({fields})",
            provider=provider,
        ) from e
