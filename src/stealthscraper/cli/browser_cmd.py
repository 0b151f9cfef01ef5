"""CLI commands that drive a real browser."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console

browser_app = typer.Typer(help="Run browser sessions (bot test, page state dump).")
console = Console()


def _resolve_proxy(url: Optional[str], username: Optional[str], password: Optional[str]) -> dict[str, Any] | None:
    """CLI flags win over ``settings.proxy``; no URL anywhere means no proxy."""
    from stealthscraper.settings import get_settings

    cfg = get_settings().proxy
    if not (url or cfg.configured):
        return None
    return {
        "url": url or cfg.url,
        "username": username or cfg.username,
        "password": password or cfg.password,
    }


@browser_app.command("bot-test")
def bot_test(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Screenshot path (defaults to settings.bot_test)."),
) -> None:
    """Load a bot-detection page and screenshot the verdict."""
    from stealthscraper.exceptions import ScraperError
    from stealthscraper.scraper import Scraper

    try:
        path = asyncio.run(Scraper().bot_test(output))
    except ScraperError as e:
        console.print(f"[red]Bot test failed:[/red] {e}")
        raise typer.Exit(code=1)
    console.print(f"[green]✓[/green] Bot test screenshot written to {path}")


@browser_app.command("dump")
def dump_state(
    url: str = typer.Argument(..., help="Page to open."),
    state: Optional[Path] = typer.Option(None, "--state", help="JSON state from a previous dump to restore before reading."),
    scroll: bool = typer.Option(False, "--scroll", help="Scroll to the bottom before reading state."),
    load_more: Optional[str] = typer.Option(None, "--load-more", help="Selector of a 'load more' button to press."),
    max_presses: int = typer.Option(5, "--max-presses", help="Ceiling for --load-more presses."),
    proxy_url: Optional[str] = typer.Option(None, "--proxy-url", help="Proxy server URL."),
    proxy_username: Optional[str] = typer.Option(None, "--proxy-username", help="Proxy username."),
    proxy_password: Optional[str] = typer.Option(None, "--proxy-password", help="Proxy password."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the state JSON here instead of stdout."),
) -> None:
    """Open URL and print its cookies and local storage as JSON.

    The output can be fed back with ``--state`` to restore a session.
    """
    from stealthscraper.exceptions import ScraperError
    from stealthscraper.scraper import Scraper
    from stealthscraper.settings import get_settings

    if state is not None and not state.exists():
        console.print(f"[red]File not found:[/red] {state}")
        raise typer.Exit(code=1)

    interaction = get_settings().interaction

    try:
        scraper = Scraper(proxy=_resolve_proxy(proxy_url, proxy_username, proxy_password))
    except ScraperError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(code=1)

    async def _collect(browser: Any) -> dict[str, Any]:
        page = await scraper.new_page(browser)
        await scraper.go_to(page, url)

        if state is not None:
            saved = json.loads(state.read_text(encoding="utf-8"))
            await scraper.set_cookies(page, saved.get("cookies") or [])
            await scraper.set_local_storage(page, saved.get("localStorage") or {})
            await scraper.go_to(page, url)

        if load_more:
            presses = await scraper.press_load_more_button(
                page,
                load_more,
                max_presses,
                interaction.load_more_min_wait_ms,
                interaction.load_more_max_wait_ms,
            )
            console.print(f"Pressed {load_more} {presses} time(s)", style="dim")
        if scroll:
            await scraper.auto_scroll(page)

        return {
            "url": url,
            "cookies": await scraper.get_cookies(page),
            "localStorage": json.loads(await scraper.get_local_storage(page)),
        }

    try:
        result = asyncio.run(scraper.scrape(_collect))
    except ScraperError as e:
        console.print(f"[red]Scrape failed:[/red] {e}")
        raise typer.Exit(code=1)

    payload = json.dumps(result, indent=2, default=str)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload, encoding="utf-8")
        console.print(f"[green]✓[/green] State written to {output}")
    else:
        console.print_json(payload)
