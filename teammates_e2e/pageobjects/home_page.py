from .app_page import AppPage


class HomePage(AppPage):
    """Public landing page, shown after logout."""

    TITLE_MARKER = "TEAMMATES"

    def is_correct_page(self) -> bool:
        return self.TITLE_MARKER in self.get_page_title()
