"""
Browser Façade
==============
One Playwright browser session per test class, driven through the sync API.
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit

from playwright.sync_api import Download, Page, sync_playwright

from ..config import Config, get_config

logger = logging.getLogger(__name__)


class Browser:
    """
    Thin wrapper over a Playwright page.

    Downloads triggered by the page are saved into the configured downloads
    folder under the file name suggested by the server.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or get_config()
        self.downloads_folder = Path(self.config.test_downloads_folder)
        self.downloads_folder.mkdir(parents=True, exist_ok=True)

        self._playwright = sync_playwright().start()
        browser_type = getattr(self._playwright, self.config.browser)
        self._browser = browser_type.launch(
            headless=self.config.headless,
            slow_mo=self.config.slow_mo,
        )
        self._context = self._browser.new_context(accept_downloads=True)
        self.page: Page = self._context.new_page()
        self.page.set_default_timeout(self.config.test_timeout * 1000)
        self.page.on("download", self._save_download)
        self.is_closed = False
        logger.info("Started %s browser (headless=%s)", self.config.browser, self.config.headless)

    def _save_download(self, download: Download) -> None:
        target = self.downloads_folder / download.suggested_filename
        download.save_as(target)
        logger.debug("Saved download to %s", target)

    def go_to_url(self, url: str) -> None:
        self.page.goto(url)
        self.wait_for_page_load()

    def wait_for_page_load(self) -> None:
        self.page.wait_for_load_state("load")

    def add_cookie(self, name: str, value: str, is_secure: bool, is_http_only: bool) -> None:
        """Set a cookie on the domain of the page currently shown."""
        host = urlsplit(self.page.url).hostname
        if not host:
            raise RuntimeError("Navigate to the app before adding cookies")
        self._context.add_cookies([
            {
                "name": name,
                "value": value,
                "domain": host,
                "path": "/",
                "secure": is_secure,
                "httpOnly": is_http_only,
            }
        ])

    def close(self) -> None:
        if self.is_closed:
            return
        self._context.close()
        self._browser.close()
        self._playwright.stop()
        self.is_closed = True
        logger.info("Browser closed")
