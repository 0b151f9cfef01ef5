"""Layered settings (TOML files + SCRAPER_* environment variables)."""

from stealthscraper.settings.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
