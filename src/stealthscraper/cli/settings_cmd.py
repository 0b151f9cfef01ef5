"""CLI commands for inspecting and validating scraper settings."""

from __future__ import annotations

import json

import typer
from rich.console import Console

settings_app = typer.Typer(help="Inspect and validate scraper configuration.")
console = Console()


@settings_app.command("show")
def show_settings() -> None:
    """Display the currently resolved settings (proxy password masked)."""
    from stealthscraper.settings import get_settings

    data = get_settings().model_dump(mode="json")
    if data["proxy"]["password"]:
        data["proxy"]["password"] = "********"
    console.print_json(json.dumps(data, indent=2, default=str))


@settings_app.command("validate")
def validate_settings() -> None:
    """Validate settings and report any issues."""
    from stealthscraper.exceptions import ConfigurationError
    from stealthscraper.models import ProxyCredentials
    from stealthscraper.settings import get_settings

    try:
        settings = get_settings()
        if settings.proxy.configured:
            ProxyCredentials.parse(settings.proxy.model_dump())
    except ConfigurationError as e:
        console.print(f"[red]✗[/red] Proxy settings are incomplete: {e}")
        raise typer.Exit(code=1)
    except Exception as e:
        console.print(f"[red]✗[/red] Settings validation failed: {e}")
        raise typer.Exit(code=1)

    console.print("[green]✓[/green] Settings are valid.")
    console.print(f"  Environment: {settings.env}")
    console.print(f"  Headless: {settings.browser.headless}")
    console.print(f"  Proxy: {settings.proxy.url or 'none'}")
