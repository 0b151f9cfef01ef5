"""Playwright (async API) implementation of ``BrowserDriver``.

Every method is a direct call into Playwright with a little glue around it:
stealth patches on new pages, proxy credentials, cookie normalisation and
JSON (de)serialisation of local storage. Playwright failures surface as
``DriverError`` with the original exception chained.

Requires ``playwright install chromium`` to have been run at least once.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator

from playwright.async_api import Browser, ElementHandle, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from stealthscraper.browser import stealth
from stealthscraper.browser.driver import BrowserDriver
from stealthscraper.exceptions import DriverError
from stealthscraper.models import LaunchOptions, ProxyCredentials

logger = logging.getLogger(__name__)

# Keys accepted by BrowserContext.add_cookies(); anything else is dropped.
_COOKIE_KEYS = frozenset(
    {"name", "value", "url", "domain", "path", "expires", "httpOnly", "secure", "sameSite"}
)

_GET_LOCAL_STORAGE_JS = "() => JSON.stringify(window.localStorage)"

_SET_LOCAL_STORAGE_JS = """
(storage) => {
    for (const key in storage) {
        localStorage.setItem(key, storage[key]);
    }
}
"""

_CLICK_JS = "(el) => el.click()"

# Resolves once the accumulated scroll distance covers the scrollable height.
_AUTO_SCROLL_JS = """
async ([distance, interval]) => {
    await new Promise((resolve) => {
        let totalHeight = 0;
        const timer = setInterval(() => {
            const scrollHeight = document.body.scrollHeight;
            window.scrollBy(0, distance);
            totalHeight += distance;
            if (totalHeight >= scrollHeight - window.innerHeight) {
                clearInterval(timer);
                resolve();
            }
        }, interval);
    });
}
"""


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    """Re-raise Playwright errors raised inside the block as ``DriverError``."""
    try:
        yield
    except PlaywrightError as exc:
        raise DriverError(operation, exc.message) from exc


@lru_cache(maxsize=1)
def managed_chromium_path() -> str:
    """Return the path of the Chromium binary installed by Playwright.

    Resolved through the sync API on a worker thread so it also works when
    called from inside a running event loop. Cached for the process lifetime.
    """
    from playwright.sync_api import sync_playwright

    def _resolve() -> str:
        with sync_playwright() as pw:
            return pw.chromium.executable_path

    with ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(_resolve).result()


def normalize_cookies(cookies: list[dict[str, Any]], page_url: str) -> list[dict[str, Any]]:
    """Prepare cookies for ``add_cookies()``.

    Unknown keys (``size``, ``session``, ``priority``...) are dropped and
    cookies carrying neither ``url`` nor ``domain`` are scoped to *page_url*.
    """
    prepared = []
    for cookie in cookies:
        c = {k: v for k, v in cookie.items() if k in _COOKIE_KEYS}
        if "url" not in c and "domain" not in c:
            c["url"] = page_url
        prepared.append(c)
    return prepared


class PlaywrightDriver(BrowserDriver):
    """Chromium through Playwright, one Playwright runtime per launched browser."""

    def __init__(self) -> None:
        from stealthscraper.settings import get_settings

        s = get_settings()
        self._apply_stealth: bool = s.browser.apply_stealth
        self._navigation_timeout_ms: int = s.browser.navigation_timeout_ms
        self._configured_executable: str = s.browser.executable_path
        self._scroll_distance: int = s.interaction.scroll_distance_px
        self._scroll_interval: int = s.interaction.scroll_interval_ms
        self._runtimes: dict[Browser, Playwright] = {}

    # ------------------------------------------------------------------
    # Browser
    # ------------------------------------------------------------------

    def default_launch_options(self) -> LaunchOptions:
        executable = self._configured_executable or managed_chromium_path()
        return stealth.default_launch_options(executable)

    async def launch(self, options: LaunchOptions) -> Browser:
        kwargs = options.to_launch_kwargs()
        logger.info("Launching browser with options %s", kwargs)
        pw = await async_playwright().start()
        try:
            with _translate_errors("launch"):
                browser = await pw.chromium.launch(**kwargs)
        except Exception:
            await pw.stop()
            raise
        self._runtimes[browser] = pw
        return browser

    async def close(self, browser: Browser) -> None:
        pw = self._runtimes.pop(browser, None)
        try:
            with _translate_errors("close"):
                await browser.close()
        finally:
            if pw is not None:
                await pw.stop()
        logger.info("Browser closed")

    async def pages(self, browser: Browser) -> list[Page]:
        return [page for context in browser.contexts for page in context.pages]

    async def default_page(self, browser: Browser) -> Page:
        # A freshly launched Playwright browser has no pages yet; open one
        # with the same patches as any other page.
        pages = await self.pages(browser)
        if pages:
            return pages[0]
        return await self.new_page(browser)

    async def new_page(self, browser: Browser, proxy: ProxyCredentials | None = None) -> Page:
        context_args: dict[str, Any] = {}
        if proxy is not None:
            context_args["http_credentials"] = {"username": proxy.username, "password": proxy.password}

        with _translate_errors("new_page"):
            page = await browser.new_page(**context_args)
            page.set_default_navigation_timeout(self._navigation_timeout_ms)
            if self._apply_stealth:
                await stealth.apply_stealth(page)
            else:
                await stealth.disable_webdriver(page)
        if proxy is not None:
            logger.debug("Page authenticated against proxy %s", proxy.url)
        return page

    # ------------------------------------------------------------------
    # Page
    # ------------------------------------------------------------------

    async def disable_webdriver(self, page: Page) -> None:
        with _translate_errors("disable_webdriver"):
            await stealth.disable_webdriver(page)

    async def goto(self, page: Page, url: str) -> None:
        with _translate_errors("goto"):
            await page.goto(url)
            await page.wait_for_selector("body")
        logger.info("Navigated to %s", url)

    async def cookies(self, page: Page) -> list[dict[str, Any]]:
        url = page.url
        with _translate_errors("cookies"):
            if url.startswith(("http://", "https://")):
                return list(await page.context.cookies(url))
            return list(await page.context.cookies())

    async def set_cookies(self, page: Page, cookies: list[dict[str, Any]]) -> None:
        with _translate_errors("set_cookies"):
            await page.context.add_cookies(normalize_cookies(cookies, page.url))

    async def local_storage(self, page: Page) -> str:
        with _translate_errors("local_storage"):
            return await page.evaluate(_GET_LOCAL_STORAGE_JS)

    async def set_local_storage(self, page: Page, storage: dict[str, Any]) -> None:
        with _translate_errors("set_local_storage"):
            await page.evaluate(_SET_LOCAL_STORAGE_JS, storage)

    async def query_selector(self, page: Page, query: str) -> ElementHandle | None:
        with _translate_errors("query_selector"):
            return await page.query_selector(query)

    async def click(self, element: ElementHandle) -> None:
        with _translate_errors("click"):
            await element.evaluate(_CLICK_JS)

    async def auto_scroll(self, page: Page) -> None:
        with _translate_errors("auto_scroll"):
            await page.evaluate(_AUTO_SCROLL_JS, [self._scroll_distance, self._scroll_interval])

    async def screenshot(self, page: Page, path: Path, *, full_page: bool = True) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with _translate_errors("screenshot"):
            await page.screenshot(path=str(path), full_page=full_page)
        logger.info("Screenshot saved: %s", path)
        return path
