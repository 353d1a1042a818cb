"""Data-plane CLI client.

Wraps the command-line client that manipulates files inside the running
app (``surfer`` by default). Listings are parsed into exact entry names
instead of being searched as raw text.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .shared.logging import get_logger
from .shared.process import run_command

logger = get_logger(__name__)


@dataclass(frozen=True)
class Listing:
    """Entries of one remote directory, in CLI output order.

    Directory entries keep their trailing ``/``.
    """

    entries: tuple[str, ...] = ()

    @classmethod
    def parse(cls, output: str) -> Listing:
        """Parse ``get`` output: one entry per non-empty line."""
        return cls(tuple(line.strip() for line in output.splitlines() if line.strip()))

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def directories(self) -> tuple[str, ...]:
        return tuple(e for e in self.entries if e.endswith("/"))

    @property
    def files(self) -> tuple[str, ...]:
        return tuple(e for e in self.entries if not e.endswith("/"))


class DataPlaneClient:
    """Upload, list and delete files through the data-plane CLI."""

    def __init__(self, executable: str = "surfer", cwd: Path | None = None):
        """Initialize data-plane client.

        Args:
            executable: Data-plane CLI executable name or path.
            cwd: Working directory for the CLI.
        """
        self.executable = executable
        self.cwd = cwd

    def _cmd(self, *args: str) -> list[str]:
        return [self.executable, *args]

    def login(self, fqdn: str, username: str, password: str) -> None:
        """Store a data-plane session for an app."""
        logger.info("dataplane login", fqdn=fqdn, username=username)
        run_command(
            self._cmd("login", fqdn, "--username", username, "--password", password),
            cwd=self.cwd,
            capture=False,
            secrets=(password,),
        )

    def upload(self, local_path: Path | str, remote_dir: str = "/") -> None:
        """Upload a file or folder into a remote directory."""
        logger.info("dataplane upload", path=str(local_path), remote_dir=remote_dir)
        run_command(self._cmd("put", str(local_path), remote_dir), cwd=self.cwd, capture=False)

    def listing(self, remote_dir: str | None = None) -> Listing:
        """List a remote directory (the root when ``remote_dir`` is None)."""
        args = ["get"]
        if remote_dir:
            args.append(remote_dir)
        output = run_command(self._cmd(*args), cwd=self.cwd)
        listing = Listing.parse(output)
        logger.debug("dataplane listing", remote_dir=remote_dir or "/", entries=list(listing.entries))
        return listing

    def delete(self, name: str, recursive: bool = False) -> None:
        """Delete a remote file, or a folder with ``recursive``."""
        args = ["del"]
        if recursive:
            args.append("--recursive")
        args.append(name)
        logger.info("dataplane delete", name=name, recursive=recursive)
        run_command(self._cmd(*args), cwd=self.cwd, capture=False)
