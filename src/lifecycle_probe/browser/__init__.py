"""Browser automation package.

Bounded UI waits and the run-scoped browser session, built on Selenium.
"""

from .session import BrowserSession, chrome_driver
from .wait import DEFAULT_TIMEOUT, Locator, WaitKind, element_rect_settled, wait_for

__all__ = [
    "BrowserSession",
    "chrome_driver",
    "Locator",
    "WaitKind",
    "wait_for",
    "element_rect_settled",
    "DEFAULT_TIMEOUT",
]
