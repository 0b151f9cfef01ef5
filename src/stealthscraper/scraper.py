"""Browser session facade.

``Scraper`` binds a fixed set of launch options and an optional proxy to a
small async call surface. Every browser or page operation forwards to a
``BrowserDriver`` (Playwright by default); driver errors propagate
unchanged. The only resource guarantee is ``scrape()``, which always closes
the browser it opened.

Usage::

    scraper = Scraper(proxy={"url": "http://gate:7000", "username": "u", "password": "p"})

    async def collect(browser):
        page = await scraper.new_page(browser)
        await scraper.go_to(page, "https://example.com")
        await scraper.auto_scroll(page)
        return await scraper.get_cookies(page)

    cookies = await scraper.scrape(collect)
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from pathlib import Path
from typing import Any, TypeVar

from pydantic import ValidationError

from stealthscraper import utils
from stealthscraper.browser.driver import BrowserDriver
from stealthscraper.exceptions import ConfigurationError
from stealthscraper.models import LaunchOptions, ProxyCredentials

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _deserialize(payload: Any, what: str) -> Any:
    """Parse *payload* when it is a JSON string, otherwise return it untouched."""
    if not isinstance(payload, str):
        return payload
    try:
        return json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Serialized {what} is not valid JSON: {exc}") from exc


class Scraper:
    """Facade over a browser driver with fixed launch options and proxy.

    Args:
        launch_options: Launch options (model or mapping). Defaults to the
            driver's stealth defaults.
        proxy: Proxy credentials (model or mapping with ``url``,
            ``username`` and ``password``).
        driver: Driver implementation. Defaults to ``PlaywrightDriver``.

    Raises:
        ConfigurationError: If *proxy* is missing any required field or
            *launch_options* does not validate.
    """

    def __init__(
        self,
        launch_options: LaunchOptions | Mapping[str, Any] | None = None,
        proxy: ProxyCredentials | Mapping[str, Any] | None = None,
        *,
        driver: BrowserDriver | None = None,
    ) -> None:
        if driver is None:
            from stealthscraper.browser.playwright_driver import PlaywrightDriver

            driver = PlaywrightDriver()
        self._driver = driver

        # Validate before touching the options so a bad proxy leaves them as given.
        credentials = ProxyCredentials.parse(proxy) if proxy is not None else None

        if launch_options is None:
            options = driver.default_launch_options()
        elif isinstance(launch_options, LaunchOptions):
            options = launch_options.model_copy(deep=True)
        else:
            try:
                options = LaunchOptions.model_validate(dict(launch_options))
            except ValidationError as exc:
                raise ConfigurationError(f"Invalid launch options: {exc}") from exc

        if credentials is not None:
            options = options.with_proxy_server(credentials.url)

        self._launch_options = options
        self._proxy = credentials

        logger.info(
            "New scraper with launch options %s (proxy=%s)",
            options.to_launch_kwargs(),
            credentials.url if credentials else None,
        )

    @property
    def launch_options(self) -> LaunchOptions:
        """A copy of the launch options this scraper launches browsers with."""
        return self._launch_options.model_copy(deep=True)

    @property
    def proxy(self) -> ProxyCredentials | None:
        return self._proxy

    @property
    def driver(self) -> BrowserDriver:
        return self._driver

    # ------------------------------------------------------------------
    # Session helpers
    # ------------------------------------------------------------------

    async def scrape(self, scraping_function: Callable[[Any], Awaitable[T] | T]) -> T:
        """Run *scraping_function* with a fresh browser and always close it.

        The function's return value (awaited when it is a coroutine) or its
        exception is propagated unchanged.
        """
        browser = await self.new_browser()
        try:
            result = scraping_function(browser)
            if inspect.isawaitable(result):
                result = await result
            return result
        finally:
            await self.close_browser(browser)

    async def bot_test(self, screenshot_path: str | Path | None = None) -> Path:
        """Check whether a stealth browser is flagged as headless.

        Opens a throwaway browser with the default launch options, loads the
        bot-detection page, waits for its checks and writes a full-page
        screenshot of the verdict.

        Returns:
            Path of the screenshot file.
        """
        from stealthscraper.settings import get_settings

        cfg = get_settings().bot_test
        path = Path(screenshot_path or cfg.screenshot_path)

        # Resolving the managed Chromium binary runs a blocking Playwright call.
        options = await asyncio.to_thread(self._driver.default_launch_options)
        browser = await self._driver.launch(options)
        try:
            logger.info("Checking the bot tests at %s", cfg.url)
            page = await self._driver.new_page(browser)
            await self._driver.goto(page, cfg.url)
            await self.wait(cfg.wait_ms)
            await self._driver.screenshot(page, path, full_page=True)
        finally:
            await self._driver.close(browser)
        logger.info("All done, check the bot result screenshot at %s", path)
        return path

    # ------------------------------------------------------------------
    # Browser
    # ------------------------------------------------------------------

    async def new_browser(self) -> Any:
        return await self._driver.launch(self._launch_options)

    async def close_browser(self, browser: Any) -> None:
        await self._driver.close(browser)

    async def get_pages(self, browser: Any) -> list[Any]:
        return await self._driver.pages(browser)

    async def get_default_page(self, browser: Any) -> Any:
        """Return the first page of *browser* in creation order."""
        return await self._driver.default_page(browser)

    async def new_page(self, browser: Any) -> Any:
        """Open a stealth page, authenticated against the proxy when one is set."""
        return await self._driver.new_page(browser, self._proxy)

    # ------------------------------------------------------------------
    # Page
    # ------------------------------------------------------------------

    async def disable_webdriver(self, page: Any) -> None:
        await self._driver.disable_webdriver(page)

    async def go_to(self, page: Any, url: str) -> None:
        await self._driver.goto(page, url)

    async def get_cookies(self, page: Any) -> list[dict[str, Any]]:
        return await self._driver.cookies(page)

    async def set_cookies(self, page: Any, cookies: str | list[dict[str, Any]]) -> None:
        """Set cookies from a JSON string or an already-parsed list."""
        await self._driver.set_cookies(page, _deserialize(cookies, "cookies"))

    async def get_local_storage(self, page: Any) -> str:
        """Return the page's local storage serialized as a JSON string."""
        return await self._driver.local_storage(page)

    async def set_local_storage(self, page: Any, local_storage: str | dict[str, Any]) -> None:
        """Set local storage from a JSON string or an already-parsed mapping."""
        await self._driver.set_local_storage(page, _deserialize(local_storage, "local storage"))

    async def press_load_more_button(
        self,
        page: Any,
        query: str,
        max_button_presses: int,
        min_wait_time: int = 2000,
        max_wait_time: int = 4000,
    ) -> int:
        """Press the element matching *query* until it disappears or the ceiling is hit.

        The element is located again after each random wait. Pages do not
        always remove the button once everything is loaded, so
        *max_button_presses* is what bounds the loop.

        Args:
            page: Page to act on.
            query: Selector of the button, e.g. ``'#loadMoreButton'``.
            max_button_presses: Maximum number of presses.
            min_wait_time: Lower bound of the wait between presses (ms).
            max_wait_time: Upper term of the wait between presses (ms), see
                ``utils.random_wait_ms``.

        Returns:
            Number of presses performed.
        """
        presses = 0
        if max_button_presses < 1:
            return presses

        button = await self._driver.query_selector(page, query)
        while button is not None:
            await self._driver.click(button)
            presses += 1
            if presses >= max_button_presses:
                break

            await self.wait_random(min_wait_time, max_wait_time)
            button = await self._driver.query_selector(page, query)

        logger.debug("Pressed %s %d time(s)", query, presses)
        return presses

    async def auto_scroll(self, page: Any) -> None:
        """Scroll *page* to the bottom to trigger lazy loading."""
        await self._driver.auto_scroll(page)

    # ------------------------------------------------------------------
    # Utils
    # ------------------------------------------------------------------

    async def wait(self, time_ms: float) -> None:
        await utils.wait(time_ms)

    async def wait_random(self, min_time_ms: int, max_time_ms: int) -> int:
        return await utils.wait_random(min_time_ms, max_time_ms)

    def array_chunk(self, items: Sequence[T], chunk_size: int) -> list[list[T]]:
        return utils.array_chunk(items, chunk_size)
