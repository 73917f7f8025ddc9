"""Scraper package — web fetch, content extraction and AI field extraction."""

from backend.scraper.backends import CompletionBackend, build_backend
from backend.scraper.errors import (
    BackendError,
    ConfigurationError,
    FetchError,
    InvalidInputError,
    ParseError,
    ScraperError,
)
from backend.scraper.extractor import extract_content, fetch_and_parse
from backend.scraper.fetcher import fetch_page, validate_url
from backend.scraper.models import (
    DEFAULT_PROVIDER,
    ExtractionRequest,
    Link,
    Provider,
    RawPage,
    ScrapedContent,
    ScrapeResult,
)
from backend.scraper.pipeline import scrape_with_ai
from backend.scraper.prompt import build_prompt

__all__ = [
    "BackendError",
    "CompletionBackend",
    "ConfigurationError",
    "DEFAULT_PROVIDER",
    "ExtractionRequest",
    "FetchError",
    "InvalidInputError",
    "Link",
    "ParseError",
    "Provider",
    "RawPage",
    "ScrapeResult",
    "ScrapedContent",
    "ScraperError",
    "build_backend",
    "build_prompt",
    "extract_content",
    "fetch_and_parse",
    "fetch_page",
    "scrape_with_ai",
    "validate_url",
]
