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
Model Information API Endpoints.

Provides endpoints for retrieving the model catalogue.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Path

from jobcopilot.core.llm_providers.model_config import (
    get_model_display_info,
    get_models_for_provider,
)
from jobcopilot.utils.config import SUPPORTED_PROVIDERS

router = APIRouter(prefix="/models", tags=["models"])


@router.get("/providers")
def get_provider_models() -> Dict[str, List[Dict[str, Any]]]:
    """Get all catalogued models grouped by provider with display information."""
    return {
        provider: [
            get_model_display_info(model.name)
            for model in get_models_for_provider(provider)
        ]
        for provider in SUPPORTED_PROVIDERS
    }


@router.get("/provider/{provider}")
def get_models_for_provider_endpoint(
    provider: str = Path(..., pattern="^[a-zA-Z0-9_-]+$", min_length=1, max_length=50)
) -> List[Dict[str, Any]]:
    """Get models for a specific provider with display information."""
    if provider not in SUPPORTED_PROVIDERS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid provider '{provider}'. Allowed providers: {', '.join(SUPPORTED_PROVIDERS)}",
        )

    return [
        get_model_display_info(model.name) for model in get_models_for_provider(provider)
    ]
