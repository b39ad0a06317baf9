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
Model Catalogue for LLM Providers.

Lists the models offered in the UI for each provider. Requests may still name
a model that is not listed; the catalogue is informational.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class ModelConfig:
    """Configuration for a specific model."""

    name: str
    display_name: str
    provider: str
    is_default: bool = False
    supports_json_mode: bool = True
    max_output_tokens: int = 4096
    local: bool = False
    description: Optional[str] = None


MODEL_CONFIGS: Dict[str, ModelConfig] = {
    # OpenAI
    "gpt-4o": ModelConfig(
        name="gpt-4o",
        display_name="GPT-4o",
        provider="openai",
        is_default=True,
        max_output_tokens=16384,
        description="GPT-4o - Flagship multimodal model",
    ),
    "gpt-4-turbo": ModelConfig(
        name="gpt-4-turbo",
        display_name="GPT-4 Turbo",
        provider="openai",
    ),
    "gpt-3.5-turbo": ModelConfig(
        name="gpt-3.5-turbo",
        display_name="GPT-3.5 Turbo",
        provider="openai",
    ),
    # Anthropic
    "claude-3-7-sonnet-20250219": ModelConfig(
        name="claude-3-7-sonnet-20250219",
        display_name="Claude 3.7 Sonnet",
        provider="anthropic",
        is_default=True,
        supports_json_mode=False,
        max_output_tokens=8192,
    ),
    "claude-3-opus-20240229": ModelConfig(
        name="claude-3-opus-20240229",
        display_name="Claude 3 Opus",
        provider="anthropic",
        supports_json_mode=False,
    ),
    "claude-3-haiku-20240307": ModelConfig(
        name="claude-3-haiku-20240307",
        display_name="Claude 3 Haiku",
        provider="anthropic",
        supports_json_mode=False,
    ),
    # Google Gemini
    "gemini-pro": ModelConfig(
        name="gemini-pro",
        display_name="Gemini Pro",
        provider="gemini",
        is_default=True,
        max_output_tokens=8192,
    ),
    "gemini-1.5-pro": ModelConfig(
        name="gemini-1.5-pro",
        display_name="Gemini 1.5 Pro",
        provider="gemini",
        max_output_tokens=8192,
    ),
    "gemini-1.5-flash": ModelConfig(
        name="gemini-1.5-flash",
        display_name="Gemini 1.5 Flash",
        provider="gemini",
        max_output_tokens=8192,
    ),
    # Ollama (local, hardware-bound limits)
    "gemma3:1b": ModelConfig(
        name="gemma3:1b",
        display_name="Gemma 3 (1B)",
        provider="ollama",
        is_default=True,
        local=True,
    ),
    "llama3:8b": ModelConfig(
        name="llama3:8b",
        display_name="Llama 3 (8B)",
        provider="ollama",
        local=True,
    ),
    "mistral:7b": ModelConfig(
        name="mistral:7b",
        display_name="Mistral (7B)",
        provider="ollama",
        local=True,
    ),
    "phi3:mini": ModelConfig(
        name="phi3:mini",
        display_name="Phi-3 Mini",
        provider="ollama",
        local=True,
    ),
}


def get_model_config(model_name: str) -> Optional[ModelConfig]:
    """Get configuration for a specific model."""
    return MODEL_CONFIGS.get(model_name)


def get_models_for_provider(provider: str) -> List[ModelConfig]:
    """Get all models for a specific provider."""
    return [config for config in MODEL_CONFIGS.values() if config.provider == provider]


def get_model_display_info(model_name: str) -> Dict[str, Any]:
    """Get display information for a model."""
    config = get_model_config(model_name)
    if not config:
        return {"name": model_name, "display_name": model_name, "info": "Unknown model"}

    info_parts = []
    if config.local:
        info_parts.append("Local")
    if config.supports_json_mode:
        info_parts.append("JSON mode")
    output_tokens = (
        f"{config.max_output_tokens // 1000}K"
        if config.max_output_tokens >= 1000
        else str(config.max_output_tokens)
    )
    info_parts.append(f"{output_tokens} output tokens")

    return {
        "name": config.name,
        "display_name": config.display_name,
        "provider": config.provider,
        "is_default": config.is_default,
        "info": " • ".join(info_parts),
        "max_output_tokens": config.max_output_tokens,
    }


def get_provider_description(provider: str) -> str:
    """Get a description for a provider listing its available models."""
    models = get_models_for_provider(provider)
    if not models:
        return f"{provider.title()} - No models available"

    model_names = [model.display_name for model in models]
    if len(model_names) == 1:
        return f"{provider.title()} - {model_names[0]}"
    if len(model_names) == 2:
        return f"{provider.title()} - {model_names[0]} & {model_names[1]}"
    return f"{provider.title()} - {model_names[0]}, {model_names[1]} & more"
