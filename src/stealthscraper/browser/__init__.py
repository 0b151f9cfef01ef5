"""Browser automation modules (Playwright).

``driver`` defines the ``BrowserDriver`` interface the scraper facade
talks to, ``playwright_driver`` implements it on top of Playwright's async
API, and ``stealth`` holds the anti-detection launch defaults and page
patches.
"""
