"""Browser anti-detection: default launch options and page stealth patches.

Two layers make an automated Chromium look like a regular browser:

- Launch level: run headless but keep the extension / default-app machinery
  that automation normally disables (``ignore_default_args``).
- Page level: the ``playwright-stealth`` evasions (user-agent, plugins,
  chrome.runtime, permissions...) plus a ``navigator.webdriver`` override.

Usage::

    from stealthscraper.browser.stealth import apply_stealth, default_launch_options

    options = default_launch_options(executable_path)
    browser = await pw.chromium.launch(**options.to_launch_kwargs())
    page = await browser.new_page()
    await apply_stealth(page)
"""

from __future__ import annotations

import logging

from playwright_stealth import Stealth

from stealthscraper.models import LaunchOptions

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Launch defaults
# ---------------------------------------------------------------------------

# Injected via page.add_init_script(); a regular browser reports false.
WEBDRIVER_SCRIPT: str = "Object.defineProperty(navigator, 'webdriver', {get: () => false})"

_stealth = Stealth()


def default_launch_options(executable_path: str) -> LaunchOptions:
    """Build the default stealth launch options.

    Headless mode, the configured ignored default args and the explicit
    browser binary. Headless flag, ignored args and extra args come from
    ``settings.browser``.

    Args:
        executable_path: Path to the automation-capable browser binary.
    """
    from stealthscraper.settings import get_settings

    browser = get_settings().browser
    options = LaunchOptions(
        headless=browser.headless,
        ignore_default_args=list(browser.ignore_default_args),
        executable_path=executable_path,
    )
    if browser.args:
        options.args = list(browser.args)
    return options


# ---------------------------------------------------------------------------
# Page patches
# ---------------------------------------------------------------------------


async def disable_webdriver(page) -> None:
    """Make ``navigator.webdriver`` read ``false`` in every new document."""
    await page.add_init_script(WEBDRIVER_SCRIPT)


async def apply_stealth(page) -> None:
    """Apply the playwright-stealth evasions and the webdriver override.

    Call this **before** navigating so the scripts run in every frame from
    the start.

    Args:
        page: Playwright ``Page`` object.
    """
    await _stealth.apply_stealth_async(page)
    await disable_webdriver(page)
    logger.debug("Stealth scripts injected")
