"""Unified CLI entry point for stealthscraper.

Config precedence: settings.default.toml -> settings.<env>.toml -> settings.local.toml -> env vars (SCRAPER_* with double underscores) -> CLI flags.
"""

from __future__ import annotations

import logging
import sys

import typer

from stealthscraper.cli.browser_cmd import browser_app
from stealthscraper.cli.settings_cmd import settings_app

try:
    from importlib.metadata import version

    VERSION = version("stealthscraper")
except Exception:
    VERSION = "unknown"

APP_HELP = (
    "stealthscraper: stealth headless-browser sessions from the command line. "
    "Config precedence: settings.default.toml -> settings.<env>.toml -> settings.local.toml "
    "-> env vars (SCRAPER_* with __) -> CLI flags."
)

app = typer.Typer(add_completion=True, help=APP_HELP)

app.add_typer(browser_app, name="browser")
app.add_typer(settings_app, name="settings")


def configure_logging(level: str) -> None:
    """Send log records to stderr at *level*."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stderr,
    )
    # Quieten noisy libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    """Show help when no subcommand is provided."""
    if version:
        typer.echo(f"stealthscraper {VERSION}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    from stealthscraper.settings import get_settings

    configure_logging("DEBUG" if verbose else get_settings().logging.level)


if __name__ == "__main__":
    app()
