"""Bounded waits for UI conditions.

Every wait first requires the element to be present in the DOM, then
(optionally) visible, clickable or settled in place. Each phase is bounded
by the same timeout; exceeding it is the only way a wait ends early.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from selenium.common.exceptions import StaleElementReferenceException, TimeoutException
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from ..errors import wait_timeout

DEFAULT_TIMEOUT = 10.0
DEFAULT_POLL_FREQUENCY = 0.5


class WaitKind(Enum):
    """Condition a wait blocks on."""

    PRESENT = "present"
    VISIBLE = "visible"
    CLICKABLE = "clickable"
    SETTLED = "settled"


@dataclass(frozen=True)
class Locator:
    """Declarative element reference."""

    by: str
    value: str

    @classmethod
    def by_id(cls, element_id: str) -> Locator:
        return cls(By.ID, element_id)

    @classmethod
    def by_text(cls, text: str) -> Locator:
        """Element whose own text node equals ``text`` exactly."""
        return cls(By.XPATH, f'//*[text()="{text}"]')

    @classmethod
    def by_xpath(cls, xpath: str) -> Locator:
        return cls(By.XPATH, xpath)

    def as_tuple(self) -> tuple[str, str]:
        return (self.by, self.value)

    def __str__(self) -> str:
        return f"{self.by}={self.value}"


class element_rect_settled:
    """Clickable, and at the same position and size on two polls in a row.

    ``element_to_be_clickable`` already holds on the first frame of a
    slide-in, so an animated element needs its rect to stop changing too.
    """

    def __init__(self, locator: tuple[str, str]):
        self.locator = locator
        self._last_rect: dict | None = None

    def __call__(self, driver: WebDriver) -> WebElement | bool:
        try:
            element = driver.find_element(*self.locator)
            if not (element.is_displayed() and element.is_enabled()):
                self._last_rect = None
                return False
            rect = element.rect
        except StaleElementReferenceException:
            self._last_rect = None
            return False
        if rect == self._last_rect:
            return element
        self._last_rect = rect
        return False


def wait_for(
    driver: WebDriver,
    locator: Locator,
    kind: WaitKind = WaitKind.VISIBLE,
    timeout: float = DEFAULT_TIMEOUT,
    poll_frequency: float = DEFAULT_POLL_FREQUENCY,
) -> WebElement:
    """Block until ``locator`` satisfies ``kind`` or ``timeout`` elapses.

    Args:
        driver: Selenium WebDriver
        locator: Element to wait for
        kind: Condition to reach
        timeout: Bound in seconds for each phase
        poll_frequency: Seconds between polls

    Returns:
        The located element

    Raises:
        WaitTimeoutError: If the condition does not hold in time
    """
    wait = WebDriverWait(driver, timeout, poll_frequency=poll_frequency)
    target = locator.as_tuple()

    try:
        element = wait.until(EC.presence_of_element_located(target))
    except TimeoutException:
        raise wait_timeout(str(locator), WaitKind.PRESENT.value, timeout) from None

    if kind is WaitKind.PRESENT:
        return element

    if kind is WaitKind.VISIBLE:
        condition = EC.visibility_of_element_located(target)
    elif kind is WaitKind.CLICKABLE:
        condition = EC.element_to_be_clickable(target)
    else:
        condition = element_rect_settled(target)
    try:
        return wait.until(condition)
    except TimeoutException:
        raise wait_timeout(str(locator), kind.value, timeout) from None
