"""Admin UI login and logout."""

from __future__ import annotations

from .browser import BrowserSession, Locator, WaitKind
from .config import Credentials
from .platform import AppHandle
from .shared.logging import get_logger

logger = get_logger(__name__)

ADMIN_PATH = "_admin"

USERNAME_INPUT = Locator.by_id("usernameInput")
PASSWORD_INPUT = Locator.by_id("passwordInput")
LOGIN_BUTTON = Locator.by_id("loginButton")
MENU_BUTTON = Locator.by_id("burgerMenuButton")
LOGOUT_ENTRY = Locator.by_xpath('//span[text() = "Logout"]')


class AuthFlow:
    """Log in and out of the admin UI.

    Both operations start from a known page, so calling ``login`` from a
    logged-out browser or ``logout`` from a logged-in one always behaves
    the same way.
    """

    def __init__(self, session: BrowserSession, credentials: Credentials):
        self.session = session
        self.credentials = credentials

    def login(self, handle: AppHandle) -> None:
        """Log in and wait until the authenticated menu shows."""
        self.session.clear_cookies()
        self.session.navigate(handle.url(ADMIN_PATH))

        self.session.wait(USERNAME_INPUT)
        self.session.send_keys(USERNAME_INPUT, self.credentials.username)
        self.session.send_keys(PASSWORD_INPUT, self.credentials.password)
        self.session.click(LOGIN_BUTTON)

        self.session.wait(MENU_BUTTON)
        logger.info("logged in", fqdn=handle.fqdn)

    def logout(self, handle: AppHandle) -> None:
        """Log out through the menu and wait for the login form."""
        self.session.navigate(handle.url(ADMIN_PATH))

        self.session.wait(MENU_BUTTON)
        self.session.click(MENU_BUTTON)

        # The menu slides open; the entry only takes clicks once it stops moving.
        self.session.wait(LOGOUT_ENTRY, WaitKind.SETTLED)
        self.session.click(LOGOUT_ENTRY)

        self.session.wait(USERNAME_INPUT)
        logger.info("logged out", fqdn=handle.fqdn)
