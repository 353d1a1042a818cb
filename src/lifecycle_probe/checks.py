"""Postcondition checks against the app.

UI checks wait for text to render. A deleted file must both 404 over plain
HTTP and be absent from the data-plane listing.
"""

from __future__ import annotations

import httpx

from .auth import ADMIN_PATH
from .browser import BrowserSession, Locator
from .dataplane import DataPlaneClient
from .errors import AssertionFailure, assertion_failed
from .platform import AppHandle
from .shared.logging import get_logger

logger = get_logger(__name__)


class Checks:
    """UI, HTTP and listing assertions."""

    def __init__(
        self,
        session: BrowserSession,
        dataplane: DataPlaneClient,
        http_timeout: float = 30.0,
    ):
        """Initialize checks.

        Args:
            session: Browser session for UI checks
            dataplane: Data-plane client for listing checks
            http_timeout: Timeout for direct HTTP requests
        """
        self.session = session
        self.dataplane = dataplane
        self.http_timeout = http_timeout

    def file_is_listed(self, handle: AppHandle, name: str) -> None:
        """The admin UI shows an entry named ``name``."""
        self.session.navigate(handle.url(ADMIN_PATH))
        self.session.wait(Locator.by_text(name))

    def file_is_served(self, handle: AppHandle, path: str, expected_text: str) -> None:
        """Fetching ``path`` renders ``expected_text``."""
        self.session.navigate(handle.url(path))
        self.session.wait(Locator.by_text(expected_text))

    def index_is_served(self, handle: AppHandle, expected_text: str) -> None:
        """The app root renders ``expected_text`` (served from index.html)."""
        self.file_is_served(handle, "", expected_text)

    def file_is_gone(self, handle: AppHandle, name: str) -> None:
        """A direct GET of ``name`` returns 404."""
        url = handle.url(name)
        try:
            response = httpx.get(url, timeout=self.http_timeout, follow_redirects=True)
        except httpx.HTTPError as e:
            raise AssertionFailure(
                message=f"GET {url} failed: {e}",
                data={"expected": 404, "actual": None, "url": url},
            )
        logger.debug("gone check", url=url, status=response.status_code)
        if response.status_code != 404:
            raise assertion_failed(f"GET {url} status", 404, response.status_code)

    def file_is_unlisted(self, name: str) -> None:
        """The root listing has no entry named ``name``."""
        root = self.dataplane.listing()
        if name in root:
            raise assertion_failed(f"root listing lacks {name}", False, list(root.entries))

    def folder_exists(self, folder: str, member: str) -> None:
        """The root listing has ``folder/`` and the folder lists ``member``."""
        entry = f"{folder.rstrip('/')}/"
        root = self.dataplane.listing()
        if entry not in root:
            raise assertion_failed(f"root listing contains {entry}", True, list(root.entries))
        inner = self.dataplane.listing(entry)
        if member not in inner:
            raise assertion_failed(f"{entry} listing contains {member}", True, list(inner.entries))

    def folder_is_gone(self, folder: str) -> None:
        """The root listing no longer has ``folder/``."""
        entry = f"{folder.rstrip('/')}/"
        root = self.dataplane.listing()
        if entry in root:
            raise assertion_failed(f"root listing lacks {entry}", False, list(root.entries))
