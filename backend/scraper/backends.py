"""Completion backends for the field-extraction call.

Backends
--------
``anthropic`` (default)
    ``langchain_anthropic.ChatAnthropic``.  Requires ``ANTHROPIC_API_KEY``.
    Configure via ``ANTHROPIC_CHAT_MODEL``.

``openai``
    ``langchain_openai.ChatOpenAI``.  Requires ``OPENAI_API_KEY``.
    Configure via ``OPENAI_CHAT_MODEL``.

``ollama``
    ``langchain_ollama.ChatOllama`` against a local Ollama server.
    Configure via ``OLLAMA_BASE_URL`` and ``OLLAMA_CHAT_MODEL``.

All backends share one interface: ``generate_completion(system, user,
max_tokens) -> str | None``.  The orchestrator only ever talks to that
interface; ``build_backend`` picks the concrete class once, at the boundary.
Adding a provider means adding a :class:`Provider` member, one subclass and
one entry in ``_BACKENDS``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from backend.config import Settings, settings as default_settings
from backend.scraper.errors import BackendError, ConfigurationError, InvalidInputError
from backend.scraper.models import DEFAULT_PROVIDER, Provider

logger = logging.getLogger(__name__)


def first_text_block(content: Any) -> Optional[str]:
    """Return the first textual block of a chat-model message ``content``.

    LangChain messages carry either a plain string or a list of content
    blocks (strings or ``{"type": ..., ...}`` dicts).  Returns ``None`` when
    no non-empty text is present.
    """
    if isinstance(content, str):
        return content or None
    if isinstance(content, list):
        for block in content:
            if isinstance(block, str) and block:
                return block
            if isinstance(block, dict) and block.get("type") == "text" and block.get("text"):
                return block["text"]
    return None


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class CompletionBackend(ABC):
    """Generate one text completion from a system instruction and a user message."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier echoed in :class:`ScrapeResult`."""

    @abstractmethod
    def generate_completion(
        self, system: str, user: str, max_tokens: int
    ) -> Optional[str]:
        """Return the model's first text block, or ``None`` if it produced none.

        Raises:
            BackendError: If the provider call fails.
        """


class ChatModelBackend(CompletionBackend):
    """Shared request/response handling for LangChain chat models."""

    def __init__(self, config: Settings | None = None) -> None:
        self._settings = config or default_settings

    @abstractmethod
    def _chat_model(self, max_tokens: int) -> Any:
        """Return a configured LangChain chat model."""

    def generate_completion(
        self, system: str, user: str, max_tokens: int
    ) -> Optional[str]:
        from langchain_core.messages import HumanMessage, SystemMessage

        logger.info("Dispatching extraction prompt to %s (%d chars)", self.name, len(user))
        try:
            llm = self._chat_model(max_tokens)
            response = llm.invoke([SystemMessage(content=system), HumanMessage(content=user)])
        except Exception as exc:  # noqa: BLE001
            raise BackendError(f"{self.name} request failed: {exc}") from exc

        content = response.content if hasattr(response, "content") else response
        return first_text_block(content)


# ---------------------------------------------------------------------------
# Concrete backends
# ---------------------------------------------------------------------------

class AnthropicBackend(ChatModelBackend):
    @property
    def name(self) -> str:
        return Provider.ANTHROPIC.value

    def _chat_model(self, max_tokens: int) -> Any:
        from langchain_anthropic import ChatAnthropic

        return ChatAnthropic(
            model=self._settings.anthropic_chat_model,
            api_key=self._settings.anthropic_api_key,
            max_tokens=max_tokens,
            temperature=0,
        )


class OpenAIBackend(ChatModelBackend):
    @property
    def name(self) -> str:
        return Provider.OPENAI.value

    def _chat_model(self, max_tokens: int) -> Any:
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=self._settings.openai_chat_model,
            api_key=self._settings.openai_api_key,
            max_tokens=max_tokens,
            temperature=0,
        )


class OllamaBackend(ChatModelBackend):
    """Local Ollama server; needs no credential."""

    @property
    def name(self) -> str:
        return Provider.OLLAMA.value

    def _chat_model(self, max_tokens: int) -> Any:
        from langchain_ollama import ChatOllama

        return ChatOllama(
            model=self._settings.ollama_chat_model,
            base_url=self._settings.ollama_base_url,
            num_predict=max_tokens,
            temperature=0,
        )


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

_BACKENDS: dict[Provider, type[ChatModelBackend]] = {
    Provider.ANTHROPIC: AnthropicBackend,
    Provider.OPENAI: OpenAIBackend,
    Provider.OLLAMA: OllamaBackend,
}

# Environment variable that must be non-empty for each keyed provider.
_CREDENTIALS: dict[Provider, tuple[str, str]] = {
    Provider.ANTHROPIC: ("anthropic_api_key", "ANTHROPIC_API_KEY"),
    Provider.OPENAI: ("openai_api_key", "OPENAI_API_KEY"),
}


def resolve_provider(provider: Provider | str | None) -> Provider:
    """Map *provider* to a :class:`Provider`; ``None``/empty gives the default.

    Raises:
        InvalidInputError: If *provider* is not a supported backend.
    """
    if provider is None or provider == "":
        return DEFAULT_PROVIDER
    try:
        return Provider(provider)
    except ValueError as exc:
        supported = ", ".join(p.value for p in Provider)
        raise InvalidInputError(
            f"Unsupported provider {provider!r}. Use one of: {supported}"
        ) from exc


def build_backend(
    provider: Provider | str | None = None,
    config: Settings | None = None,
) -> CompletionBackend:
    """Return the backend for *provider*, checking its credential is present.

    Raises:
        InvalidInputError: If *provider* is unknown.
        ConfigurationError: If the provider's API key is not configured.
    """
    config = config or default_settings
    selected = resolve_provider(provider)

    if selected in _CREDENTIALS:
        attr, env_var = _CREDENTIALS[selected]
        if not getattr(config, attr):
            raise ConfigurationError(
                f"AI service not configured: {env_var} environment variable is not set."
            )

    return _BACKENDS[selected](config)
