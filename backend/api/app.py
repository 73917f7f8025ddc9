"""FastAPI application factory.

Routers
-------
    /scrape    — AI-assisted page scraping and preset instructions

Errors
------
Every error response has the shape ``{"error": "<message>"}``, including the
ones raised as :class:`HTTPException` (e.g. 401 from the auth dependency).
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.config import configure_logging

from backend.api.routers import scrape as scrape_router


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    configure_logging()

    app = FastAPI(
        title="Scraper API",
        description=(
            "Fetches a web page, reduces it to its visible content and asks a "
            "language model to extract the requested information."
        ),
        version="0.1.0",
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.include_router(scrape_router.router, prefix="/scrape", tags=["scrape"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn backend.api.app:app --reload
app = create_app()
