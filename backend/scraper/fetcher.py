"""HTTP fetcher: one plain GET per call, no caching and no retries."""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

import httpx

from backend.config import settings
from backend.scraper.errors import FetchError, InvalidInputError
from backend.scraper.models import RawPage

logger = logging.getLogger(__name__)

# Some origins reject requests without a browser-like UA and Accept headers.
_BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

_ALLOWED_SCHEMES = ("http", "https")


def validate_url(url: str) -> str:
    """Return *url* unchanged if it is an absolute ``http(s)`` URL with a host.

    Raises:
        InvalidInputError: For anything else (relative paths, other schemes,
            unparseable ports, non-string input).
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidInputError("Invalid URL: a URL is required")
    try:
        parts = urlsplit(url.strip())
        # Accessing .port validates it (raises ValueError when out of range).
        parts.port
    except ValueError as exc:
        raise InvalidInputError(f"Invalid URL: {url!r} ({exc})") from exc
    if parts.scheme.lower() not in _ALLOWED_SCHEMES or not parts.hostname:
        raise InvalidInputError(f"Invalid URL: {url!r}")
    return url


def fetch_page(url: str) -> RawPage:
    """Fetch *url* and return a :class:`RawPage`.

    Raises:
        InvalidInputError: If *url* is not a well-formed absolute URL.
        FetchError: If the server answers outside the 2xx range or the
            request cannot complete.
    """
    validate_url(url)
    logger.info("Fetching %s", url)

    try:
        with httpx.Client(
            headers=_BROWSER_HEADERS,
            timeout=settings.request_timeout,
            follow_redirects=True,
        ) as client:
            response = client.get(url)
    except httpx.HTTPError as exc:
        raise FetchError(f"Failed to fetch URL: {exc}") from exc

    if not response.is_success:
        raise FetchError(
            f"Failed to fetch URL: {response.status_code} {response.reason_phrase}"
        )

    logger.debug("Fetched %s (%d bytes)", url, len(response.content))
    return RawPage(url=url, html=response.text, status_code=response.status_code)
