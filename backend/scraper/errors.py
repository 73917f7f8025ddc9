"""Exception hierarchy for the scrape pipeline.

Every failure the pipeline can report derives from :class:`ScraperError` and
carries a short ``kind`` string.  ``scrape_with_ai`` copies that string into
``ScrapeResult.error_kind`` so callers (the HTTP router, the CLI) can map a
failure to a status code without inspecting exception types.
"""

from __future__ import annotations


class ScraperError(Exception):
    """Base class for all pipeline failures."""

    kind = "unexpected"


class InvalidInputError(ScraperError):
    """Malformed URL, empty prompt or unknown provider.  Raised before any I/O."""

    kind = "invalid_input"


class FetchError(ScraperError):
    """The page could not be retrieved (non-2xx status or transport error)."""

    kind = "fetch"


class ParseError(ScraperError):
    """The response body could not be reduced to :class:`ScrapedContent`."""

    kind = "parse"


class BackendError(ScraperError):
    """The model provider call failed."""

    kind = "backend"


class ConfigurationError(ScraperError):
    """No credential is configured for the selected provider."""

    kind = "configuration"
