"""Scraper CLI — entry-point for the scrape pipeline.

Usage:
    python cli/main.py --help

Commands:
    fetch     → fetch a page and print its extracted content (no model call)
    scrape    → fetch a page and ask a model to extract information from it
    presets   → list the built-in extraction instructions
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from backend.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
from typing import Optional

import typer

from backend.config import configure_logging
from backend.scraper.errors import ScraperError
from backend.scraper.extractor import fetch_and_parse
from backend.scraper.models import DEFAULT_PROVIDER, Provider
from backend.scraper.pipeline import scrape_with_ai
from backend.scraper.presets import PRESET_PROMPTS

app = typer.Typer(
    name="scraper",
    help="AI-assisted web page scraper.",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (default: LOG_LEVEL or INFO)."
    ),
) -> None:
    """AI-assisted web page scraper."""
    configure_logging(log_level)


@app.command("fetch")
def fetch(
    url: str = typer.Option(..., help="URL to fetch."),
) -> None:
    """Fetch a URL and print its extracted title, metadata, links and text."""
    typer.echo(f"[fetch] Fetching {url!r} …")
    try:
        content = fetch_and_parse(url)
    except ScraperError as exc:
        typer.echo(f"[fetch] ❌ {exc}")
        raise typer.Exit(code=1)

    typer.echo(f"[fetch] Title  : {content.title or '(none)'}")
    typer.echo(f"[fetch] Words  : {len(content.text.split())}")
    typer.echo(f"[fetch] Links  : {len(content.links)}")
    for key, value in content.metadata.items():
        typer.echo(f"[fetch] Meta   : {key}: {value}")
    typer.echo("")
    typer.echo(content.text)


@app.command("scrape")
def scrape(
    url: str = typer.Option(..., help="URL to scrape."),
    prompt: Optional[str] = typer.Option(None, help="What to extract from the page."),
    preset: Optional[str] = typer.Option(
        None, help="Use a built-in instruction instead of --prompt (see `presets`)."
    ),
    provider: Provider = typer.Option(DEFAULT_PROVIDER, help="Model backend."),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON."),
) -> None:
    """Scrape a URL and extract information from it with a language model."""
    if preset is not None:
        if preset not in PRESET_PROMPTS:
            typer.echo(f"[scrape] Unknown preset {preset!r}. Use: {' | '.join(PRESET_PROMPTS)}")
            raise typer.Exit(code=1)
        prompt = PRESET_PROMPTS[preset].prompt
    if not prompt:
        typer.echo("[scrape] Either --prompt or --preset is required.")
        raise typer.Exit(code=1)

    if not as_json:
        typer.echo(f"[scrape] {url!r} via {provider.value} …")
    result = scrape_with_ai(url, prompt, provider)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    elif result.success:
        typer.echo("\n" + "=" * 72)
        typer.echo(result.data)
        typer.echo("=" * 72)
    else:
        typer.echo(f"[scrape] ❌ {result.error}")

    if not result.success:
        raise typer.Exit(code=1)


@app.command("presets")
def presets() -> None:
    """List the built-in extraction instructions."""
    for key, preset in PRESET_PROMPTS.items():
        typer.echo(f"  {key:<10} {preset.label}: {preset.prompt}")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
