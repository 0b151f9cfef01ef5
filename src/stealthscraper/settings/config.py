"""Configuration loader for stealthscraper using Pydantic settings.

Config precedence (highest wins):
  1. CLI flags / constructor arguments (where applicable)
  2. Environment variables (SCRAPER_* with __ for nesting)
  3. settings.local.toml
  4. settings.<env>.toml
  5. settings.default.toml
"""

from __future__ import annotations

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

_THIS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = Path(os.getenv("SCRAPER_PROJECT_ROOT", _THIS_DIR.parents[2]))
CONFIG_DIR = PROJECT_ROOT / "config"

ENV_VAR_NAME = "SCRAPER_ENV"
DEFAULT_ENV = "local"


def _resolve_env() -> str:
    return (os.getenv(ENV_VAR_NAME) or DEFAULT_ENV).strip()


def _load_toml(path: Path) -> dict[str, Any]:
    if path.is_file():
        with open(path, "rb") as f:
            return tomllib.load(f)
    return {}


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------

# Default Chromium flags dropped at launch. A browser missing its extensions
# and default apps fingerprints as automated.
DEFAULT_IGNORED_ARGS: tuple[str, ...] = (
    "--disable-extensions",
    "--disable-default-apps",
    "--disable-component-extensions-with-background-pages",
)


class BrowserSettings(BaseSettings):
    """Browser launch defaults."""

    model_config = SettingsConfigDict(env_prefix="SCRAPER_BROWSER__")

    headless: bool = True
    # Empty means "the Chromium binary managed by Playwright".
    executable_path: str = ""
    # An empty list keeps every Playwright default flag.
    ignore_default_args: list[str] = Field(default_factory=lambda: list(DEFAULT_IGNORED_ARGS))
    args: list[str] = Field(default_factory=list)
    apply_stealth: bool = True
    navigation_timeout_ms: int = 30_000


class ProxySettings(BaseSettings):
    """Authenticated proxy used by the CLI when no flags are given."""

    model_config = SettingsConfigDict(env_prefix="SCRAPER_PROXY__")

    url: str = ""
    username: str = ""
    password: str = ""

    @property
    def configured(self) -> bool:
        return bool(self.url)


class InteractionSettings(BaseSettings):
    """Timing knobs for page interaction helpers."""

    model_config = SettingsConfigDict(env_prefix="SCRAPER_INTERACTION__")

    load_more_min_wait_ms: int = 2000
    load_more_max_wait_ms: int = 4000
    scroll_distance_px: int = 100
    scroll_interval_ms: int = 100


class BotTestSettings(BaseSettings):
    """Bot-detection diagnostic configuration."""

    model_config = SettingsConfigDict(env_prefix="SCRAPER_BOT_TEST__")

    url: str = "https://bot.sannysoft.com"
    wait_ms: int = 5000
    screenshot_path: str = "bot-test-result.png"


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="SCRAPER_LOGGING__")

    level: str = "INFO"


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """Root scraper settings with nested sections."""

    model_config = SettingsConfigDict(
        env_prefix="SCRAPER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    env: str = Field(default_factory=_resolve_env)
    project_root: Path = Field(default=PROJECT_ROOT)
    debug: bool = False

    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    interaction: InteractionSettings = Field(default_factory=InteractionSettings)
    bot_test: BotTestSettings = Field(default_factory=BotTestSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @model_validator(mode="before")
    @classmethod
    def _merge_toml_files(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Layer TOML config files before env var overrides."""
        defaults = _load_toml(CONFIG_DIR / "settings.default.toml")
        env_name = (values.get("env") or os.getenv(ENV_VAR_NAME) or DEFAULT_ENV).strip()
        env_overrides = _load_toml(CONFIG_DIR / f"settings.{env_name}.toml")
        local_overrides = _load_toml(CONFIG_DIR / "settings.local.toml")

        # Merge: defaults < env-specific < local < explicit values
        merged: dict[str, Any] = {}
        for layer in (defaults, env_overrides, local_overrides, values):
            for key, val in layer.items():
                if isinstance(val, dict) and isinstance(merged.get(key), dict):
                    merged[key] = {**merged[key], **val}
                else:
                    merged[key] = val
        return merged


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton settings instance (cached)."""
    return Settings()
