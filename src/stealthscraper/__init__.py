"""Thin Playwright facade for stealthy page scraping."""

from __future__ import annotations

try:
    from importlib.metadata import version

    __version__ = version("stealthscraper")
except Exception:
    __version__ = "0.0.0"
