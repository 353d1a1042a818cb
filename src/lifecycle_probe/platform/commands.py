"""Platform management commands.

Thin blocking wrappers around the platform CLI (``cloudron`` by default):
install, uninstall, configure, update, backup and restore. The platform's
own engine does the work; these only shape argv and parse output.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..errors import PreconditionError
from ..shared.logging import get_logger
from ..shared.process import run_command

logger = get_logger(__name__)


@dataclass(frozen=True)
class BackupRecord:
    """One entry of ``backup list --raw``."""

    id: str
    created_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BackupRecord:
        return cls(
            id=str(data["id"]),
            created_at=data.get("creationTime") or data.get("createdAt"),
        )


class PlatformClient:
    """Invoke platform management commands."""

    def __init__(self, executable: str = "cloudron", cwd: Path | None = None):
        """Initialize platform client.

        Args:
            executable: Platform CLI executable name or path.
            cwd: Working directory for commands that act on the app
                 package (install, build). Defaults to the current dir.
        """
        self.executable = executable
        self.cwd = cwd

    def _cmd(self, *args: str) -> list[str]:
        """Build a platform command line."""
        return [self.executable, *args]

    def _run(self, *args: str) -> None:
        """Run a mutating command with output streamed to the terminal."""
        logger.info("platform command", args=list(args))
        run_command(self._cmd(*args), cwd=self.cwd, capture=False)

    def _query(self, *args: str) -> Any:
        """Run a read-only command and parse its JSON output."""
        output = run_command(self._cmd(*args), cwd=self.cwd)
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise PreconditionError(
                message=f"Unparseable output from '{' '.join(self._cmd(*args))}': {e}",
                data={"output": output[:500]},
            )

    def inspect(self) -> dict[str, Any]:
        """Return the platform's inspection record (``{"apps": [...]}``)."""
        data = self._query("inspect")
        if not isinstance(data, dict):
            raise PreconditionError(message="inspect did not return an object")
        return data

    def build(self) -> None:
        """Build the app package in the working directory."""
        self._run("build")

    def install(self, location: str, appstore_id: str | None = None) -> None:
        """Install the app at a location.

        Args:
            location: Subdomain/location label.
            appstore_id: Install the published package instead of the
                         locally built one.
        """
        args = ["install"]
        if appstore_id:
            args.extend(["--appstore-id", appstore_id])
        args.extend(["--location", location])
        self._run(*args)

    def uninstall(self, app_id: str) -> None:
        """Uninstall an app."""
        self._run("uninstall", "--app", app_id)

    def configure(self, app_id: str, location: str) -> None:
        """Move an app to a new location. The app id is kept."""
        self._run("configure", "--location", location, "--app", app_id)

    def update(self, app: str) -> None:
        """Update an app in place (``app`` is an id or a location)."""
        self._run("update", "--app", app)

    def backup_create(self, app_id: str) -> None:
        """Create a backup of an app."""
        self._run("backup", "create", "--app", app_id)

    def backup_list(self, app_id: str) -> list[BackupRecord]:
        """List backups of an app, most recent first (platform order)."""
        data = self._query("backup", "list", "--raw", "--app", app_id)
        if not isinstance(data, list):
            raise PreconditionError(message="backup list did not return an array")
        return [BackupRecord.from_dict(entry) for entry in data]

    def restore(self, app_id: str, backup_id: str) -> None:
        """Restore an app from a backup."""
        self._run("restore", "--backup", backup_id, "--app", app_id)
