"""
Base page object.
"""

import logging
from abc import ABC, abstractmethod
from typing import Type, TypeVar

from ..errors import IncorrectPageError
from ..file_helper import wait_for
from .browser import Browser

logger = logging.getLogger(__name__)

P = TypeVar("P", bound="AppPage")

# Page checks retry while client-side rendering settles
PAGE_CHECK_RETRY_COUNT = 3
PAGE_CHECK_RETRY_DELAY_MS = 500


class AppPage(ABC):
    """Wraps the UI interactions of one application page."""

    def __init__(self, browser: Browser):
        self.browser = browser

    @property
    def page(self):
        return self.browser.page

    @abstractmethod
    def is_correct_page(self) -> bool:
        """Whether the browser is currently showing this page."""

    @staticmethod
    def get_new_page_instance(browser: Browser, page_type: Type[P]) -> P:
        """Build ``page_type`` for the page currently loaded in ``browser``.

        Raises:
            IncorrectPageError: If the loaded page is not a ``page_type``.
        """
        instance = page_type(browser)
        instance.wait_for_page_to_load()
        for attempt in range(PAGE_CHECK_RETRY_COUNT):
            if instance.is_correct_page():
                return instance
            if attempt < PAGE_CHECK_RETRY_COUNT - 1:
                wait_for(PAGE_CHECK_RETRY_DELAY_MS)
        raise IncorrectPageError(page_type.__name__, browser.page.url)

    def wait_for_page_to_load(self) -> None:
        self.browser.wait_for_page_load()

    def get_page_title(self) -> str:
        return self.page.title()

    def get_page_source(self) -> str:
        return self.page.content()

    def is_element_present(self, selector: str) -> bool:
        return self.page.locator(selector).count() > 0

    def fill_text_box(self, selector: str, value: str) -> None:
        self.page.fill(selector, value)

    def click(self, selector: str) -> None:
        self.page.click(selector)
