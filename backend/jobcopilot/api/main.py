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

import time
from typing import Dict
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobcopilot.api.endpoints import assistant, health, keys, llm, models
from jobcopilot.core.exceptions import LLMError
from jobcopilot.utils.config import get_settings
from jobcopilot.utils.logging import get_logger, setup_logging

# Configuration
settings = get_settings()
setup_logging(settings)

logger = get_logger(__name__)

app = FastAPI(
    title="Job Search Copilot API",
    description="AI-powered resume analysis, job matching, cover letters and interview prep",
    version="1.0.0",
)

# CORS middleware (env-driven)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Requested-With", "X-Request-ID"],
    expose_headers=["X-Request-ID", "X-LLM-Provider", "X-LLM-Fallback"],
)


# Security headers middleware (CSP disabled by default when served behind a proxy)
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    if settings.enable_api_csp_headers:
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; script-src 'self'; style-src 'self'; img-src 'self' data: https:; connect-src 'self'; font-src 'self'"
        )

    return response


# Request context: ID, body-size check, basic rate limiting, access log
_rate_limit_bucket: Dict[str, Dict[str, float]] = {}


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    # Assign or propagate request ID
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    # Basic body size guard based on Content-Length
    max_bytes = settings.max_request_size_mb * 1024 * 1024
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit():
        if int(content_length) > max_bytes:
            return JSONResponse(status_code=413, content={"error": "Request entity too large"})

    # Simple IP-based rate limiting (fixed one-minute window)
    client_ip = request.client.host if request.client else "unknown"
    now = time.time()
    window = 60.0
    limit = max(1, settings.api_rate_limit)
    expired = [
        ip
        for ip, entry in _rate_limit_bucket.items()
        if now - entry["window_start"] > window
    ]
    for ip in expired:
        del _rate_limit_bucket[ip]
    bucket = _rate_limit_bucket.get(client_ip, {"window_start": now, "count": 0.0})
    if now - bucket["window_start"] > window:
        bucket = {"window_start": now, "count": 0.0}
    bucket["count"] += 1.0
    _rate_limit_bucket[client_ip] = bucket
    if bucket["count"] > limit:
        return JSONResponse(status_code=429, content={"error": "Rate limit exceeded"})

    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Request-ID"] = request_id
    logger.info(
        f"request_id={request_id} {request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s"
    )
    return response


@app.exception_handler(LLMError)
async def llm_error_handler(request: Request, exc: LLMError):
    logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content={"error": f"Invalid request: {location}: {message}" if location else message},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# Include routers
app.include_router(health.router)
app.include_router(assistant.router)
app.include_router(llm.router)
app.include_router(keys.router)
app.include_router(models.router)


@app.on_event("startup")
async def startup_event():
    """Application startup event."""
    logger.info(
        f"Job Search Copilot backend starting (default provider: {settings.default_llm_provider}, "
        f"fallback: {settings.fallback_llm_provider if settings.enable_provider_fallback else 'disabled'})"
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
