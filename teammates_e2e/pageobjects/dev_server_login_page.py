from .app_page import AppPage


class DevServerLoginPage(AppPage):
    """Stub login page served by the local development server."""

    EMAIL_INPUT = "#email"
    IS_ADMIN_CHECKBOX = "#isAdmin"
    LOGIN_BUTTON = "#btn-login"

    def is_correct_page(self) -> bool:
        return "Not logged in" in self.get_page_source()

    def login_as_user(self, user_id: str, is_admin: bool = False) -> None:
        self.fill_text_box(self.EMAIL_INPUT, user_id)
        if is_admin:
            self.page.check(self.IS_ADMIN_CHECKBOX)
        self.click(self.LOGIN_BUTTON)
        self.wait_for_page_to_load()
