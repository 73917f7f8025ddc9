"""Content extraction: turns page markup into a :class:`ScrapedContent`.

Boilerplate (scripts, navigation, hidden elements, ...) is removed from the
parse tree in a single pass *before* any field is read, so nothing inside a
removed element can leak into the title, links, metadata or text.
"""

from __future__ import annotations

import re
from typing import Dict, List

from bs4 import BeautifulSoup, Tag

from backend.scraper.errors import ParseError
from backend.scraper.fetcher import fetch_page
from backend.scraper.models import Link, ScrapedContent

_REMOVED_TAGS = frozenset(
    {
        "script",
        "style",
        "noscript",
        "iframe",
        "svg",
        "nav",
        "footer",
        "header",
        "aside",
    }
)

_DISPLAY_NONE = re.compile(r"display\s*:\s*none", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def _is_boilerplate(tag: Tag) -> bool:
    """Return ``True`` for elements that never count as visible content."""
    if tag.name in _REMOVED_TAGS:
        return True
    if tag.has_attr("hidden"):
        return True
    if "hidden" in (tag.get("class") or []):
        return True
    style = tag.get("style")
    return bool(style and _DISPLAY_NONE.search(style))


def _strip_boilerplate(soup: BeautifulSoup) -> None:
    for tag in soup.find_all(_is_boilerplate):
        # Descendants of an already-removed element are destroyed with it.
        if not tag.decomposed:
            tag.decompose()


def _extract_title(soup: BeautifulSoup) -> str:
    """``<title>`` text, else the first ``<h1>``, else empty string."""
    for name in ("title", "h1"):
        tag = soup.find(name)
        if tag is not None:
            text = tag.get_text().strip()
            if text:
                return text
    return ""


def _extract_metadata(soup: BeautifulSoup) -> Dict[str, str]:
    metadata: Dict[str, str] = {}
    for meta in soup.find_all("meta"):
        key = meta.get("name") or meta.get("property")
        content = meta.get("content")
        if key and content:
            metadata[key] = content
    return metadata


def _extract_links(soup: BeautifulSoup) -> List[Link]:
    """Return anchors in document order.

    Anchors without visible text, fragment-only hrefs (``#anchor``) and
    ``javascript:`` pseudo-URLs are excluded.  Duplicates are kept.
    """
    links: List[Link] = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        text = _collapse(anchor.get_text())
        if not href or not text:
            continue
        if href.startswith("#") or href.lower().startswith("javascript:"):
            continue
        links.append(Link(text=text, href=href))
    return links


def _body_text(soup: BeautifulSoup) -> str:
    """Collapsed visible text of ``<body>``.

    ``html.parser`` does not create an implied ``<body>`` when the tag is
    omitted; the whole document is used instead, minus its ``<title>``.
    Mutates *soup*, so call it after every other field is read.
    """
    if soup.body is not None:
        return _collapse(soup.body.get_text())
    for tag in soup.find_all("title"):
        tag.decompose()
    return _collapse(soup.get_text())


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_content(html: str) -> ScrapedContent:
    """Reduce *html* to a :class:`ScrapedContent`.

    Raises:
        ParseError: If the markup cannot be parsed.
    """
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as exc:  # noqa: BLE001
        raise ParseError(f"Failed to parse page: {exc}") from exc

    _strip_boilerplate(soup)

    title = _extract_title(soup)
    links = _extract_links(soup)
    metadata = _extract_metadata(soup)
    return ScrapedContent(
        title=title,
        text=_body_text(soup),
        links=links,
        metadata=metadata,
    )


def fetch_and_parse(url: str) -> ScrapedContent:
    """Fetch *url* live and return its :class:`ScrapedContent`.

    Raises:
        InvalidInputError: If *url* is malformed (no request is made).
        FetchError: If the page cannot be retrieved.
        ParseError: If the body cannot be parsed.
    """
    raw = fetch_page(url)
    return extract_content(raw.html)
