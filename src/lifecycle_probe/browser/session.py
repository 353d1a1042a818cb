"""Long-lived browser automation session.

One session serves the whole lifecycle run. Use it as a context manager
so the browser is quit however the run ends.
"""

from __future__ import annotations

from typing import Any, Callable

from selenium import webdriver
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement

from ..errors import PreconditionError
from ..shared.logging import get_logger
from .wait import DEFAULT_TIMEOUT, Locator, WaitKind, wait_for

logger = get_logger(__name__)

WINDOW_SIZE = (1280, 1024)


def chrome_driver(headless: bool = False, window_size: tuple[int, int] = WINDOW_SIZE) -> WebDriver:
    """Start a Chrome WebDriver.

    Args:
        headless: Run without a visible window
        window_size: Browser window (width, height)

    Returns:
        Chrome WebDriver
    """
    options = Options()
    options.add_argument(f"--window-size={window_size[0]},{window_size[1]}")
    if headless:
        options.add_argument("--headless=new")
    return webdriver.Chrome(options=options)


class BrowserSession:
    """Navigation, cookies and element interaction on one browser."""

    def __init__(
        self,
        headless: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        driver_factory: Callable[[], WebDriver] | None = None,
    ):
        """Initialize browser session.

        Args:
            headless: Run Chrome headless (ignored with driver_factory)
            timeout: Default bound for waits, in seconds
            driver_factory: Callable returning a WebDriver; defaults to Chrome
        """
        self.headless = headless
        self.timeout = timeout
        self._driver_factory = driver_factory or (lambda: chrome_driver(headless=headless))
        self._driver: WebDriver | None = None

    def __enter__(self) -> BrowserSession:
        self.open()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._driver is not None

    @property
    def driver(self) -> WebDriver:
        """The underlying WebDriver."""
        if self._driver is None:
            raise PreconditionError(message="Browser session is not open")
        return self._driver

    def open(self) -> None:
        """Start the browser."""
        if self._driver is None:
            self._driver = self._driver_factory()
            logger.info("browser started", headless=self.headless)

    def close(self) -> None:
        """Quit the browser. Safe to call more than once."""
        if self._driver is None:
            return
        driver, self._driver = self._driver, None
        driver.quit()
        logger.info("browser closed")

    def navigate(self, url: str) -> None:
        logger.debug("navigate", url=url)
        self.driver.get(url)

    def blank(self) -> None:
        """Park the browser on an empty page."""
        self.navigate("about:blank")

    def clear_cookies(self) -> None:
        self.driver.delete_all_cookies()

    def find(self, locator: Locator) -> WebElement:
        return self.driver.find_element(*locator.as_tuple())

    def wait(
        self,
        locator: Locator,
        kind: WaitKind = WaitKind.VISIBLE,
        timeout: float | None = None,
    ) -> WebElement:
        """Wait for an element using the session's default timeout."""
        return wait_for(self.driver, locator, kind, self.timeout if timeout is None else timeout)

    def send_keys(self, locator: Locator, text: str) -> None:
        self.find(locator).send_keys(text)

    def click(self, locator: Locator) -> None:
        self.find(locator).click()
