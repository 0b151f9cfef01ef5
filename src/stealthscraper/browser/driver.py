"""Abstract browser driver interface.

The scraper facade only talks to a ``BrowserDriver``. Browser, page and
element handles are opaque to it: whatever the driver returns is handed
back to the driver unchanged.
"""

from __future__ import annotations

import abc
from pathlib import Path
from typing import Any

from stealthscraper.models import LaunchOptions, ProxyCredentials


class BrowserDriver(abc.ABC):
    """One coroutine per automation primitive the facade needs."""

    # ------------------------------------------------------------------
    # Browser
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def default_launch_options(self) -> LaunchOptions:
        """Return the options used when the caller supplies none."""

    @abc.abstractmethod
    async def launch(self, options: LaunchOptions) -> Any:
        """Launch a browser process and return its handle."""

    @abc.abstractmethod
    async def close(self, browser: Any) -> None:
        """Close *browser* and release everything it owns."""

    @abc.abstractmethod
    async def pages(self, browser: Any) -> list[Any]:
        """Return every open page of *browser* in creation order."""

    @abc.abstractmethod
    async def default_page(self, browser: Any) -> Any:
        """Return the first page of *browser*, opening one via ``new_page`` when it has none."""

    @abc.abstractmethod
    async def new_page(self, browser: Any, proxy: ProxyCredentials | None = None) -> Any:
        """Open a stealth-patched page, authenticated against *proxy* when given."""

    # ------------------------------------------------------------------
    # Page
    # ------------------------------------------------------------------

    @abc.abstractmethod
    async def disable_webdriver(self, page: Any) -> None:
        """Make ``navigator.webdriver`` read ``false`` on *page*."""

    @abc.abstractmethod
    async def goto(self, page: Any, url: str) -> None:
        """Navigate *page* to *url* and wait for the document body."""

    @abc.abstractmethod
    async def cookies(self, page: Any) -> list[dict[str, Any]]:
        """Return the cookies visible to *page*."""

    @abc.abstractmethod
    async def set_cookies(self, page: Any, cookies: list[dict[str, Any]]) -> None:
        """Add *cookies* to *page*."""

    @abc.abstractmethod
    async def local_storage(self, page: Any) -> str:
        """Return ``window.localStorage`` of *page* serialized as JSON."""

    @abc.abstractmethod
    async def set_local_storage(self, page: Any, storage: dict[str, Any]) -> None:
        """Write every key of *storage* into ``window.localStorage`` of *page*."""

    @abc.abstractmethod
    async def query_selector(self, page: Any, query: str) -> Any | None:
        """Return the first element matching *query*, or ``None``."""

    @abc.abstractmethod
    async def click(self, element: Any) -> None:
        """Click *element* from inside the page."""

    @abc.abstractmethod
    async def auto_scroll(self, page: Any) -> None:
        """Scroll *page* step by step until the bottom is reached."""

    @abc.abstractmethod
    async def screenshot(self, page: Any, path: Path, *, full_page: bool = True) -> Path:
        """Write a PNG screenshot of *page* to *path* and return the path."""
