"""Generation endpoint: relays a job post to the configured LLM provider.

Endpoints:
- GET /health
- OPTIONS /generate  (pre-flight, empty 200)
- POST /generate  { "description": "..." }
"""
from __future__ import annotations
import logging
import os
from typing import Any

import httpx
import yaml
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from kiss_proposal.common.errors import (
    ConfigurationError,
    ContractViolationError,
    InputError,
    MethodNotAllowedError,
    ProposalError,
    UpstreamError,
)
from kiss_proposal.common.logging_setup import setup_logging
from kiss_proposal.common.normalize import parse_generation
from kiss_proposal.common.schema import ErrorOut, GenerateIn, GenerateOut
from kiss_proposal.common.templates import load_template, load_tone_profiles, render_prompt
from kiss_proposal.providers import resolve_provider

LOGGER = logging.getLogger("kiss_proposal.serve.app")
setup_logging()

PROVIDER = resolve_provider(os.getenv("LLM_PROVIDER", "anthropic"), os.getenv("LLM_BASE_URL"))
MODEL_ID = os.getenv("LLM_MODEL") or PROVIDER.default_model
MAX_TOKENS = int(os.getenv("MAX_TOKENS", "1000"))
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "120"))
TONE_PROFILE = os.getenv("TONE_PROFILE", "kiss")
PROMPT_TEMPLATE_PATH = os.getenv("PROMPT_TEMPLATE_PATH")
TONE_PROFILES_PATH = os.getenv("TONE_PROFILES_PATH")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

app = FastAPI(title="KISS Proposal Generator")


@app.middleware("http")
async def _cors_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(ProposalError)
async def _proposal_error(request: Request, exc: ProposalError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=ErrorOut(error=exc.message).model_dump())


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorOut(error=message).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def _bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    LOGGER.info("Rejected request body: %s", exc.errors())
    return JSONResponse(status_code=400, content=ErrorOut(error="Description is required").model_dump())


@app.on_event("startup")
def _validate_config_on_startup() -> None:
    """Warn early about a malformed template or an unknown tone profile."""
    try:
        template = load_template(PROMPT_TEMPLATE_PATH)
        if "{{input}}" not in template:
            LOGGER.warning("Prompt template has no {{input}} placeholder")
        if TONE_PROFILE not in load_tone_profiles(TONE_PROFILES_PATH):
            LOGGER.warning("Tone profile %r is not defined", TONE_PROFILE)
    except (OSError, ValueError, yaml.YAMLError) as e:
        LOGGER.warning("Failed to read prompt configuration: %s", e)
    LOGGER.info("Serving provider=%s model=%s tone=%s", PROVIDER.name, MODEL_ID, TONE_PROFILE)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "provider": PROVIDER.name, "model": MODEL_ID}


def _build_prompt(description: str) -> str:
    try:
        profiles = load_tone_profiles(TONE_PROFILES_PATH)
        template = load_template(PROMPT_TEMPLATE_PATH)
    except (OSError, ValueError, yaml.YAMLError) as e:
        LOGGER.error("Prompt configuration could not be loaded: %s", e)
        raise ConfigurationError("Prompt configuration could not be loaded.") from e
    profile = profiles.get(TONE_PROFILE)
    if profile is None:
        raise ConfigurationError(f"Tone profile '{TONE_PROFILE}' is not configured.")
    return render_prompt(template, description, profile)


def _call_provider(prompt: str, api_key: str) -> dict[str, Any]:
    """Single outbound call. Returns the decoded success envelope."""
    url, headers, payload = PROVIDER.build_request(prompt, api_key, MODEL_ID, MAX_TOKENS)
    try:
        with httpx.Client(timeout=REQUEST_TIMEOUT) as client:
            r = client.post(url, headers=headers, json=payload)
    except httpx.HTTPError as e:
        LOGGER.error("%s request failed: %s", PROVIDER.name, e)
        raise UpstreamError("Provider request failed")

    if not r.is_success:
        try:
            error_body = r.json()
        except ValueError:
            LOGGER.error("%s returned %s with an unreadable body", PROVIDER.name, r.status_code)
            raise UpstreamError("API request failed")
        LOGGER.error("%s API error %s: %s", PROVIDER.name, r.status_code, error_body)
        message = PROVIDER.error_message(error_body) or "API request failed"
        raise UpstreamError(message, status_code=r.status_code)

    try:
        data = r.json()
    except ValueError as e:
        LOGGER.error("%s returned a non-JSON success body", PROVIDER.name)
        raise ContractViolationError(f"Unexpected response format from {PROVIDER.name}") from e
    if not isinstance(data, dict):
        raise ContractViolationError(f"Unexpected response format from {PROVIDER.name}")
    return data


@app.options("/generate")
def generate_preflight() -> Response:
    return Response(status_code=200)


@app.post("/generate", response_model=GenerateOut)
def generate(body: GenerateIn) -> GenerateOut:
    if not body.description or not body.description.strip():
        raise InputError("Description is required")

    api_key = os.getenv(PROVIDER.api_key_env)
    if not api_key:
        LOGGER.error("%s is not set", PROVIDER.api_key_env)
        raise ConfigurationError(
            f"API key not configured. Please add {PROVIDER.api_key_env} to environment variables."
        )

    prompt = _build_prompt(body.description)
    data = _call_provider(prompt, api_key)
    text = PROVIDER.extract_answer_text(data)
    try:
        result = parse_generation(text)
    except ContractViolationError:
        LOGGER.error("Model reply is not valid proposal JSON: %.200s", text)
        raise

    LOGGER.info(
        "Generated proposal: %d chars, %d special instructions",
        len(result.proposal),
        len(result.special_instructions_found),
    )
    return result


@app.api_route("/generate", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"], include_in_schema=False)
def generate_wrong_method() -> None:
    raise MethodNotAllowedError("Method not allowed")
