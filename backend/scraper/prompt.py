"""Prompt construction for the field-extraction call.

The model never sees more than ``MAX_TEXT_CHARS`` characters of body text or
more than ``MAX_LINKS`` links, however large the source page is.
"""

from __future__ import annotations

from backend.scraper.models import ScrapedContent

MAX_TEXT_CHARS = 50_000
MAX_LINKS = 50

SYSTEM_PROMPT = """\
You are an AI assistant that extracts specific information from webpage content.
You will be given the text content of a webpage and a user's request for what information to extract.
Analyze the content carefully and extract exactly what the user asks for.
If the information is not found, say so clearly.
Be concise and direct in your response.
Format your response in a clean, readable way. Use JSON format when extracting structured data."""


def build_prompt(content: ScrapedContent, instruction: str) -> str:
    """Return the user message for *content* and the caller's *instruction*.

    Sections, in order: title, metadata, body text, links, separator, request.
    """
    metadata = "\n".join(f"{key}: {value}" for key, value in content.metadata.items())
    links = "\n".join(f"- {link.text}: {link.href}" for link in content.links[:MAX_LINKS])

    return (
        "## Webpage Title\n"
        f"{content.title}\n\n"
        "## Webpage Metadata\n"
        f"{metadata}\n\n"
        "## Webpage Content\n"
        f"{content.text[:MAX_TEXT_CHARS]}\n\n"
        "## Links Found\n"
        f"{links}\n\n"
        "---\n\n"
        "## User Request\n"
        f"{instruction}\n\n"
        "Please extract the requested information from the webpage content above."
    )
