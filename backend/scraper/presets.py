"""Ready-made extraction instructions offered by the CLI and the HTTP API."""

from __future__ import annotations

from typing import Dict, NamedTuple


class Preset(NamedTuple):
    label: str
    prompt: str


PRESET_PROMPTS: Dict[str, Preset] = {
    "company": Preset(
        "Company Info",
        "Extract the company name, description, and what they do",
    ),
    "contacts": Preset(
        "Contact Details",
        "Find all contact information: emails, phone numbers, and addresses",
    ),
    "team": Preset(
        "Team Members",
        "List all team members with their names, titles, and LinkedIn profiles if available",
    ),
    "pricing": Preset(
        "Pricing",
        "Extract all pricing information, plans, and features",
    ),
    "products": Preset(
        "Products",
        "List all products or services offered with their descriptions",
    ),
}
