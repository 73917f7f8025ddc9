"""Scrape endpoints.

Routes
------
POST /scrape            Body: {"url": "...", "prompt": "...", "provider"?: "..."}
GET  /scrape/presets    Ready-made extraction instructions
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from backend.api.auth import require_token
from backend.scraper.backends import build_backend
from backend.scraper.errors import InvalidInputError, ScraperError
from backend.scraper.fetcher import validate_url
from backend.scraper.pipeline import scrape_with_ai
from backend.scraper.presets import PRESET_PROMPTS

router = APIRouter(dependencies=[Depends(require_token)])

# ScrapeResult.error_kind → HTTP status
_STATUS_BY_KIND = {
    "invalid_input": 400,
    "configuration": 500,
    "fetch": 502,
    "backend": 502,
    "parse": 500,
}


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ScrapeRequest(BaseModel):
    # Loosely typed so missing/wrong values produce a 400 with a clear message
    # instead of FastAPI's generic 422.
    url: Optional[Any] = None
    prompt: Optional[Any] = None
    provider: Optional[Any] = None


class ScrapeResponse(BaseModel):
    success: bool
    data: str
    url: str
    provider: str


class PresetResponse(BaseModel):
    key: str
    label: str
    prompt: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=ScrapeResponse)
def scrape_endpoint(body: ScrapeRequest) -> Any:
    """Fetch ``url`` and return the model's answer to ``prompt``."""
    if not body.url or not isinstance(body.url, str):
        return _error(400, "URL is required")
    if not body.prompt or not isinstance(body.prompt, str):
        return _error(400, "Prompt is required")
    if body.provider is not None and not isinstance(body.provider, str):
        return _error(400, "Provider must be a string")

    try:
        validate_url(body.url)
    except InvalidInputError:
        return _error(400, "Invalid URL format")

    try:
        backend = build_backend(body.provider)
    except ScraperError as exc:
        return _error(_STATUS_BY_KIND.get(exc.kind, 500), str(exc))

    result = scrape_with_ai(body.url, body.prompt, backend=backend)
    if not result.success:
        return _error(_STATUS_BY_KIND.get(result.error_kind, 500), result.error)

    return {
        "success": True,
        "data": result.data,
        "url": result.url,
        "provider": result.provider,
    }


@router.get("/presets", response_model=list[PresetResponse])
def list_presets() -> list[dict[str, str]]:
    """Return the built-in extraction instructions."""
    return [
        {"key": key, "label": preset.label, "prompt": preset.prompt}
        for key, preset in PRESET_PROMPTS.items()
    ]
