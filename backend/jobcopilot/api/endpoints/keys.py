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
API Key Status Endpoints.

Reports which providers have a default credential in the environment.
Keys are supplied per request or by environment variables; nothing is
stored and no key is ever returned.
"""

from typing import Any, Dict, List

from fastapi import APIRouter
from pydantic import BaseModel, Field

from jobcopilot.core.llm_providers.factory import get_api_key_manager, list_provider_info
from jobcopilot.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/keys", tags=["api-keys"])


class ProviderStatusResponse(BaseModel):
    """Response model for provider status."""

    providers: Dict[str, Dict[str, Any]] = Field(
        ..., description="Provider configuration status"
    )
    has_any_configured: bool = Field(
        ..., description="Whether any cloud provider has an environment key"
    )


@router.get("/status", response_model=ProviderStatusResponse)
def get_api_key_status():
    """
    Get the status of all API key providers.

    Returns:
        Status of all providers without exposing actual keys.
    """
    config_status = get_api_key_manager().list_configured_providers()

    has_any_configured = any(
        status.get("has_env_key", False) for status in config_status.values()
    )

    logger.info(
        f"API key status requested - configured providers: {[k for k, v in config_status.items() if v.get('configured')]}"
    )

    return ProviderStatusResponse(
        providers=config_status,
        has_any_configured=has_any_configured,
    )


@router.get("/providers", response_model=List[Dict[str, Any]])
def get_provider_info():
    """
    Get detailed information about all providers.

    Returns:
        List of provider information including default model and catalogue.
    """
    provider_info = list_provider_info()
    logger.info(f"Provider info requested - {len(provider_info)} providers")
    return provider_info
