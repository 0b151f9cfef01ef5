"""Unit tests for scraper settings.

Covers default loading, TOML profile layering and env var overrides for
the browser, proxy, interaction, bot_test and logging sections.
"""

from __future__ import annotations


class TestSettings:
    """Core settings loading and override mechanics."""

    def test_default_settings_load(self, monkeypatch):
        """Settings should load without any env overrides."""
        monkeypatch.delenv("SCRAPER_ENV", raising=False)
        from stealthscraper.settings import get_settings

        s = get_settings()
        assert s.env == "local"
        assert s.browser.headless is True

    def test_get_settings_is_cached(self):
        from stealthscraper.settings import get_settings

        assert get_settings() is get_settings()

    def test_env_override(self, monkeypatch):
        """SCRAPER_BROWSER__HEADLESS should override the default."""
        monkeypatch.setenv("SCRAPER_BROWSER__HEADLESS", "false")
        from stealthscraper.settings.config import Settings

        s = Settings()
        assert s.browser.headless is False

    def test_ci_profile_adds_container_args(self, monkeypatch):
        """SCRAPER_ENV=ci should load settings.ci.toml."""
        monkeypatch.setenv("SCRAPER_ENV", "ci")
        from stealthscraper.settings.config import Settings

        s = Settings()
        assert s.env == "ci"
        assert "--no-sandbox" in s.browser.args
        assert s.logging.level == "DEBUG"

    def test_multiple_section_overrides(self, monkeypatch):
        """Multiple env overrides across sections should all apply."""
        monkeypatch.setenv("SCRAPER_PROXY__URL", "http://gate:7000")
        monkeypatch.setenv("SCRAPER_INTERACTION__SCROLL_DISTANCE_PX", "250")
        monkeypatch.setenv("SCRAPER_BOT_TEST__WAIT_MS", "1000")
        from stealthscraper.settings.config import Settings

        s = Settings()
        assert s.proxy.url == "http://gate:7000"
        assert s.proxy.configured is True
        assert s.interaction.scroll_distance_px == 250
        assert s.bot_test.wait_ms == 1000


class TestBrowserSettings:
    """Browser launch defaults."""

    def test_defaults(self):
        from stealthscraper.settings.config import Settings

        s = Settings()
        assert s.browser.executable_path == ""
        assert "--disable-extensions" in s.browser.ignore_default_args
        assert s.browser.apply_stealth is True
        assert s.browser.navigation_timeout_ms == 30_000


class TestInteractionSettings:
    """Load-more and scroll timings."""

    def test_defaults(self):
        from stealthscraper.settings.config import Settings

        s = Settings()
        assert s.interaction.load_more_min_wait_ms == 2000
        assert s.interaction.load_more_max_wait_ms == 4000
        assert s.interaction.scroll_distance_px == 100
        assert s.interaction.scroll_interval_ms == 100


class TestProxySettings:
    """Proxy section defaults to no proxy."""

    def test_not_configured_by_default(self, monkeypatch):
        monkeypatch.delenv("SCRAPER_PROXY__URL", raising=False)
        from stealthscraper.settings.config import Settings

        s = Settings()
        assert s.proxy.configured is False


class TestBotTestSettings:
    """Bot-detection diagnostic defaults."""

    def test_defaults(self):
        from stealthscraper.settings.config import Settings

        s = Settings()
        assert s.bot_test.url == "https://bot.sannysoft.com"
        assert s.bot_test.wait_ms == 5000
        assert s.bot_test.screenshot_path == "bot-test-result.png"
