"""Scrape a page and extract fields from it with a language model.

``scrape_with_ai`` is the single entry point used by the HTTP router and the
CLI.  It never raises: every failure is reported as a failed
:class:`ScrapeResult` carrying a human-readable message and an
``error_kind`` (see :mod:`backend.scraper.errors`).
"""

from __future__ import annotations

import logging

from backend.config import settings
from backend.scraper import extractor
from backend.scraper.backends import CompletionBackend, build_backend, resolve_provider
from backend.scraper.errors import InvalidInputError, ScraperError
from backend.scraper.fetcher import validate_url
from backend.scraper.models import ExtractionRequest, Provider, ScrapeResult
from backend.scraper.prompt import SYSTEM_PROMPT, build_prompt

logger = logging.getLogger(__name__)

NO_RESPONSE_PLACEHOLDER = "No response generated"


def _echoed_provider(
    provider: Provider | str | None, backend: CompletionBackend | None
) -> str:
    """Best-effort provider name for the result, even when resolution fails."""
    if backend is not None:
        return backend.name
    try:
        return resolve_provider(provider).value
    except InvalidInputError:
        return str(provider)


def scrape_with_ai(
    url: str,
    prompt: str,
    provider: Provider | str | None = None,
    *,
    backend: CompletionBackend | None = None,
) -> ScrapeResult:
    """Fetch *url*, then ask a model to answer *prompt* about its content.

    Steps:
        1. Validate the URL and the prompt (no network activity).
        2. Resolve the backend: an injected *backend* wins, otherwise
           ``build_backend(provider)`` checks the credential.
        3. Fetch and parse the page into ``ScrapedContent``.
        4. Build the bounded prompt.
        5. Call the backend once; an empty answer becomes a placeholder.

    Args:
        url: Absolute ``http``/``https`` URL of the page.
        prompt: Free-text description of what to extract.
        provider: Backend name; ``None`` selects the default provider.
        backend: Pre-built backend, used instead of *provider* when given.

    Returns:
        A successful result with ``data`` set, or a failed one with ``error``
        and ``error_kind`` set.  Never partial.
    """
    request = ExtractionRequest(
        url=url, prompt=prompt, provider=_echoed_provider(provider, backend)
    )

    try:
        validate_url(url)
        if not isinstance(prompt, str) or not prompt.strip():
            raise InvalidInputError("Prompt is required")

        if backend is None:
            backend = build_backend(provider)

        content = extractor.fetch_and_parse(url)
        user_message = build_prompt(content, prompt)

        answer = backend.generate_completion(
            SYSTEM_PROMPT, user_message, settings.max_output_tokens
        )
    except ScraperError as exc:
        logger.warning("Scrape of %s failed (%s): %s", url, exc.kind, exc)
        return ScrapeResult.failed(request, str(exc), exc.kind)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error while scraping %s", url)
        return ScrapeResult.failed(
            request, str(exc) or "Unknown error occurred", ScraperError.kind
        )

    logger.info("Scrape of %s via %s succeeded", url, request.provider)
    return ScrapeResult.ok(request, answer or NO_RESPONSE_PLACEHOLDER)
