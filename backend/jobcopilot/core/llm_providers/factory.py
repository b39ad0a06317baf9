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
LLM Provider Factory.

Factory functions to create LLM providers from a per-request ProviderConfig.
Credentials come from the request first and the environment second; nothing
is stored.
"""

from typing import Any, Callable, Dict, List, Optional

from jobcopilot.core.exceptions import CredentialError, UnsupportedProviderError
from jobcopilot.core.llm_providers.anthropic_provider import AnthropicProvider
from jobcopilot.core.llm_providers.base import LLMProvider, ProviderConfig, ProviderType
from jobcopilot.core.llm_providers.gemini_provider import GeminiProvider
from jobcopilot.core.llm_providers.model_config import (
    get_model_display_info,
    get_models_for_provider,
    get_provider_description,
)
from jobcopilot.core.llm_providers.ollama_provider import OllamaProvider
from jobcopilot.core.llm_providers.openai_provider import OpenAIProvider
from jobcopilot.utils.config import Settings, get_settings, is_usable_key
from jobcopilot.utils.logging import get_logger

logger = get_logger(__name__)

_PROVIDER_CLASSES: Dict[ProviderType, Callable[..., LLMProvider]] = {
    ProviderType.OPENAI: OpenAIProvider,
    ProviderType.ANTHROPIC: AnthropicProvider,
    ProviderType.GEMINI: GeminiProvider,
    ProviderType.OLLAMA: OllamaProvider,
}

_ENV_VARS = {
    ProviderType.OPENAI: "OPENAI_API_KEY",
    ProviderType.ANTHROPIC: "ANTHROPIC_API_KEY",
    ProviderType.GEMINI: "GEMINI_API_KEY",
}


def parse_provider_type(name: str) -> ProviderType:
    """
    Resolve a provider name from a request.

    Raises:
        UnsupportedProviderError: If the name is not a known provider.
    """
    try:
        return ProviderType((name or "").strip().lower())
    except ValueError:
        raise UnsupportedProviderError(f"Unsupported provider: {name}", provider=name)


class APIKeyManager:
    """Resolves API keys from the request and the environment, in that order."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """Initialize API key manager."""
        self.settings = settings or get_settings()

    def _env_key(self, provider_type: ProviderType) -> Optional[str]:
        return getattr(self.settings, f"{provider_type.value}_api_key", None)

    def get_api_key(
        self, provider: ProviderType, override_key: Optional[str] = None
    ) -> Optional[str]:
        """
        Retrieve the API key for a given provider, following this priority:
        1. Direct override (from the request)
        2. Environment variables (developer setup)

        Args:
            provider: Provider to resolve the key for
            override_key: Optional direct API key override

        Returns:
            The API key if found, ``"local"`` for Ollama, otherwise None.
        """
        if not provider.requires_credential:
            return "local"

        if is_usable_key(override_key):
            return override_key.strip()

        env_key = self._env_key(provider)
        if is_usable_key(env_key):
            return env_key.strip()

        return None

    def list_configured_providers(self) -> Dict[str, Dict[str, Any]]:
        """
        List all providers and their configuration status.

        Returns:
            Dictionary with provider configuration info. Keys themselves are never included.
        """
        result = {}
        for provider_type in ProviderType:
            if not provider_type.requires_credential:
                result[provider_type.value] = {
                    "has_env_key": False,
                    "configured": True,
                    "source": "local",
                }
                continue

            has_env_key = is_usable_key(self._env_key(provider_type))
            result[provider_type.value] = {
                "has_env_key": has_env_key,
                "configured": has_env_key,
                "source": "env" if has_env_key else "none",
            }
        return result


def get_api_key_manager() -> APIKeyManager:
    """Get an API key manager bound to the current settings."""
    return APIKeyManager()


def get_llm_provider(
    provider_type: ProviderType, config: Optional[ProviderConfig] = None
) -> LLMProvider:
    """
    Create an LLM provider instance for a request.

    Args:
        provider_type: The type of provider to create.
        config: Optional request-scoped credential, endpoint and model.

    Returns:
        Configured LLM provider instance.

    Raises:
        CredentialError: If the provider needs an API key and none is available.
    """
    config = config or ProviderConfig(id=provider_type)
    key_manager = get_api_key_manager()

    if provider_type == ProviderType.OLLAMA:
        return OllamaProvider(model=config.model, endpoint=config.endpoint)

    final_key = key_manager.get_api_key(provider_type, config.credential)
    if not final_key:
        raise CredentialError(
            f"{provider_type.display_name} API key not provided. "
            f"Pass apiKey in the request or set {_ENV_VARS[provider_type]}",
            provider=provider_type.value,
        )

    provider_cls = _PROVIDER_CLASSES[provider_type]
    return provider_cls(api_key=final_key, model=config.model)


def get_available_providers() -> Dict[ProviderType, bool]:
    """
    Get provider availability from the environment configuration.

    Returns:
        Dictionary mapping provider types to availability status.
    """
    status = get_api_key_manager().list_configured_providers()
    return {
        provider_type: status[provider_type.value]["configured"]
        for provider_type in ProviderType
    }


def _default_model(provider_type: ProviderType, settings: Settings) -> str:
    return getattr(settings, f"{provider_type.value}_model")


def list_provider_info() -> List[Dict[str, Any]]:
    """
    Get detailed information about all providers.

    Returns:
        List of dictionaries with provider information.
    """
    settings = get_settings()
    config_status = APIKeyManager(settings).list_configured_providers()

    info = []
    for provider_type in ProviderType:
        status = config_status[provider_type.value]
        info.append(
            {
                "type": provider_type.value,
                "name": provider_type.display_name,
                "configured": status["configured"],
                "key_source": status["source"],
                "requires_api_key": provider_type.requires_credential,
                "default_model": _default_model(provider_type, settings),
                "models": [
                    get_model_display_info(model.name)
                    for model in get_models_for_provider(provider_type.value)
                ],
                "description": get_provider_description(provider_type.value),
            }
        )
    return info
