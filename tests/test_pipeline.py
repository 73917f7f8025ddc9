"""Tests for ``scrape_with_ai`` — the fetch → prompt → model orchestration.

Page fetches are served by ``respx``; backends are small fakes or
``MagicMock`` spies implementing :class:`CompletionBackend`.
"""

from __future__ import annotations

from typing import Optional
from unittest.mock import MagicMock, patch

import httpx
import pytest
import respx

from backend.scraper.backends import CompletionBackend
from backend.scraper.errors import BackendError, ParseError
from backend.scraper.pipeline import NO_RESPONSE_PLACEHOLDER, scrape_with_ai
from backend.scraper.prompt import MAX_LINKS, MAX_TEXT_CHARS, SYSTEM_PROMPT

_EXAMPLE_HTML = (
    "<html><head><title>Example</title></head>"
    "<body><nav>skip</nav><p>Hello   world</p></body></html>"
)


class RecordingBackend(CompletionBackend):
    """Backend that records every call and returns a canned answer."""

    def __init__(self, answer: Optional[str] = "Hello world", name: str = "fake") -> None:
        self._answer = answer
        self._name = name
        self.calls: list[tuple[str, str, int]] = []

    @property
    def name(self) -> str:
        return self._name

    def generate_completion(self, system: str, user: str, max_tokens: int) -> Optional[str]:
        self.calls.append((system, user, max_tokens))
        return self._answer


@pytest.fixture()
def example_page():
    with respx.mock:
        route = respx.get("https://example.com/").mock(
            return_value=httpx.Response(200, text=_EXAMPLE_HTML)
        )
        yield route


# ---------------------------------------------------------------------------
# Success path
# ---------------------------------------------------------------------------

class TestScrapeSuccess:
    def test_end_to_end_example(self, example_page) -> None:
        backend = RecordingBackend(answer="The greeting is 'Hello world'.")
        result = scrape_with_ai("https://example.com", "Extract the greeting", backend=backend)

        assert result.success is True
        assert result.data == "The greeting is 'Hello world'."
        assert result.url == "https://example.com"
        assert result.prompt == "Extract the greeting"
        assert result.provider == "fake"
        assert result.error is None

        system, user, max_tokens = backend.calls[0]
        assert system == SYSTEM_PROMPT
        assert "Hello world" in user
        assert "skip" not in user
        assert user.rstrip().endswith(
            "Please extract the requested information from the webpage content above."
        )
        assert max_tokens > 0

    def test_provider_omitted_defaults_to_first_supported(self, example_page, monkeypatch) -> None:
        monkeypatch.setattr("backend.config.settings.anthropic_api_key", "sk-ant-test")
        with patch(
            "backend.scraper.backends.AnthropicBackend.generate_completion",
            return_value="ok",
        ) as mock_generate:
            result = scrape_with_ai("https://example.com", "Extract the greeting")

        assert result.success is True
        assert result.provider == "anthropic"
        mock_generate.assert_called_once()

    def test_explicit_provider_is_echoed(self, example_page, monkeypatch) -> None:
        monkeypatch.setattr("backend.config.settings.openai_api_key", "sk-openai-test")
        with patch(
            "backend.scraper.backends.OpenAIBackend.generate_completion",
            return_value="ok",
        ):
            result = scrape_with_ai("https://example.com", "Extract", "openai")

        assert result.success is True
        assert result.provider == "openai"

    def test_no_text_from_backend_uses_placeholder(self, example_page) -> None:
        result = scrape_with_ai(
            "https://example.com", "Extract", backend=RecordingBackend(answer=None)
        )
        assert result.success is True
        assert result.data == NO_RESPONSE_PLACEHOLDER

    def test_large_page_is_capped(self) -> None:
        links = "".join(f'<a href="https://example.com/{i}">L{i}</a> ' for i in range(80))
        html = f"<html><body><p>{'word ' * 20_000}</p>{links}</body></html>"
        backend = RecordingBackend()
        with respx.mock:
            respx.get("https://big.example/").mock(return_value=httpx.Response(200, text=html))
            result = scrape_with_ai("https://big.example/", "Extract", backend=backend)

        assert result.success is True
        user = backend.calls[0][1]
        content_section = user.split("## Webpage Content\n", 1)[1].split("\n\n## Links Found", 1)[0]
        assert len(content_section) == MAX_TEXT_CHARS
        assert user.count("\n- L") == MAX_LINKS


# ---------------------------------------------------------------------------
# Failure paths
# ---------------------------------------------------------------------------

class TestScrapeFailure:
    @pytest.mark.parametrize("url", ["not-a-url", "ftp://example.com", "https://", ""])
    def test_invalid_url_never_reaches_backend(self, url: str) -> None:
        spy = MagicMock(spec=CompletionBackend)
        spy.name = "spy"
        with respx.mock(assert_all_called=False) as mock:
            result = scrape_with_ai(url, "Extract", backend=spy)
            assert mock.calls.call_count == 0

        assert result.success is False
        assert result.error_kind == "invalid_input"
        assert "Invalid URL" in result.error
        assert result.data is None
        spy.generate_completion.assert_not_called()

    def test_empty_prompt_rejected(self) -> None:
        backend = RecordingBackend()
        result = scrape_with_ai("https://example.com", "   ", backend=backend)

        assert result.success is False
        assert result.error_kind == "invalid_input"
        assert backend.calls == []

    def test_unknown_provider_rejected(self) -> None:
        result = scrape_with_ai("https://example.com", "Extract", "gemini")

        assert result.success is False
        assert result.error_kind == "invalid_input"
        assert result.provider == "gemini"

    def test_missing_credential_is_configuration_failure(self, monkeypatch) -> None:
        monkeypatch.setattr("backend.config.settings.anthropic_api_key", "")
        with respx.mock(assert_all_called=False) as mock:
            result = scrape_with_ai("https://example.com", "Extract")
            assert mock.calls.call_count == 0

        assert result.success is False
        assert result.error_kind == "configuration"
        assert "ANTHROPIC_API_KEY" in result.error

    def test_fetch_failure_reported(self) -> None:
        backend = RecordingBackend()
        with respx.mock:
            respx.get("https://example.com/gone").mock(return_value=httpx.Response(410))
            result = scrape_with_ai("https://example.com/gone", "Extract", backend=backend)

        assert result.success is False
        assert result.error_kind == "fetch"
        assert "410" in result.error
        assert backend.calls == []

    def test_parse_failure_reported(self) -> None:
        with patch(
            "backend.scraper.extractor.fetch_and_parse",
            side_effect=ParseError("Failed to parse page: bad markup"),
        ):
            result = scrape_with_ai("https://example.com", "Extract", backend=RecordingBackend())

        assert result.success is False
        assert result.error_kind == "parse"

    def test_backend_error_does_not_raise(self, example_page) -> None:
        backend = MagicMock(spec=CompletionBackend)
        backend.name = "broken"
        backend.generate_completion.side_effect = BackendError("broken request failed: 529")

        result = scrape_with_ai("https://example.com", "Extract", backend=backend)

        assert result.success is False
        assert result.error == "broken request failed: 529"
        assert result.error_kind == "backend"
        assert result.provider == "broken"
        assert result.data is None

    def test_unexpected_exception_does_not_raise(self, example_page) -> None:
        backend = MagicMock(spec=CompletionBackend)
        backend.name = "weird"
        backend.generate_completion.side_effect = KeyError("content")

        result = scrape_with_ai("https://example.com", "Extract", backend=backend)

        assert result.success is False
        assert result.error_kind == "unexpected"
        assert "content" in result.error

    def test_failed_result_to_dict(self) -> None:
        result = scrape_with_ai("bad", "Extract", backend=RecordingBackend())
        payload = result.to_dict()

        assert payload["success"] is False
        assert payload["url"] == "bad"
        assert payload["prompt"] == "Extract"
        assert "error" in payload
        assert "data" not in payload
