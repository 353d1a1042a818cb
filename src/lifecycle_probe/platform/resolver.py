"""Resolve the deployment under test.

The platform can host many apps; the one under test is found by its
location label. Matching is a starts-with comparison, so after a move
from ``test`` to ``test2`` the first prefix still finds the app.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..errors import PreconditionError
from ..shared.logging import get_logger
from .commands import PlatformClient

logger = get_logger(__name__)


@dataclass(frozen=True)
class AppHandle:
    """Snapshot of a deployment's identity and address."""

    id: str
    location: str
    fqdn: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppHandle:
        return cls(id=str(data["id"]), location=str(data["location"]), fqdn=str(data["fqdn"]))

    @property
    def base_url(self) -> str:
        return f"https://{self.fqdn}"

    def url(self, path: str = "") -> str:
        """Absolute URL for a path on the app."""
        return f"{self.base_url}/{path.lstrip('/')}" if path else self.base_url


class AppHandleResolver:
    """Find the single deployment whose location starts with a prefix."""

    def __init__(self, platform: PlatformClient):
        self.platform = platform

    def resolve(self, location_prefix: str) -> AppHandle:
        """Resolve the current AppHandle.

        Args:
            location_prefix: Location label prefix.

        Returns:
            AppHandle of the only matching deployment.

        Raises:
            PreconditionError: If zero or several deployments match.
        """
        apps = self.platform.inspect().get("apps") or []
        matches = [
            app for app in apps if str(app.get("location", "")).startswith(location_prefix)
        ]

        logger.debug("resolved apps", prefix=location_prefix, total=len(apps), matches=len(matches))

        if len(matches) != 1:
            raise PreconditionError(
                message=(
                    f"Expected exactly one app with location prefix '{location_prefix}', "
                    f"found {len(matches)}"
                ),
                data={
                    "prefix": location_prefix,
                    "locations": [app.get("location") for app in matches],
                },
            )

        try:
            handle = AppHandle.from_dict(matches[0])
        except KeyError as e:
            raise PreconditionError(
                message=f"App record is missing field {e}",
                data={"record": matches[0]},
            )

        logger.info("app resolved", app_id=handle.id, fqdn=handle.fqdn)
        return handle
