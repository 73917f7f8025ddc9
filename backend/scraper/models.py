"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Provider(str, Enum):
    """Supported completion backends.  The first member is the default."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    OLLAMA = "ollama"


DEFAULT_PROVIDER = list(Provider)[0]


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int


@dataclass
class Link:
    """A single outbound anchor: its visible text and its ``href``."""

    text: str
    href: str


@dataclass
class ScrapedContent:
    """Structured summary of a page, produced fresh for every scrape."""

    title: str
    text: str
    links: List[Link] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass
class ExtractionRequest:
    """What the caller asked for: a page, an instruction and a backend."""

    url: str
    prompt: str
    provider: str = DEFAULT_PROVIDER.value


@dataclass
class ScrapeResult:
    """Outcome of :func:`backend.scraper.pipeline.scrape_with_ai`.

    Exactly one of ``data`` / ``error`` is set, depending on ``success``.
    """

    success: bool
    url: str
    prompt: str
    provider: str
    data: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def ok(cls, request: ExtractionRequest, data: str) -> "ScrapeResult":
        return cls(
            success=True,
            url=request.url,
            prompt=request.prompt,
            provider=request.provider,
            data=data,
        )

    @classmethod
    def failed(
        cls, request: ExtractionRequest, error: str, error_kind: str
    ) -> "ScrapeResult":
        return cls(
            success=False,
            url=request.url,
            prompt=request.prompt,
            provider=request.provider,
            error=error,
            error_kind=error_kind,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": self.success,
            "url": self.url,
            "prompt": self.prompt,
            "provider": self.provider,
        }
        if self.success:
            payload["data"] = self.data
        else:
            payload["error"] = self.error
        return payload
