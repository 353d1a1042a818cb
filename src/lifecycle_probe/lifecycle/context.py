"""Run context threaded through every lifecycle step."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..auth import AuthFlow
from ..browser import BrowserSession
from ..checks import Checks
from ..config import Credentials, ProbeConfig
from ..dataplane import DataPlaneClient
from ..errors import PreconditionError
from ..platform import AppHandle, AppHandleResolver, BackupRecord, PlatformClient
from .machine import LifecycleState


@dataclass
class RunContext:
    """Collaborators and mutable state of one lifecycle run."""

    config: ProbeConfig
    credentials: Credentials
    platform: PlatformClient
    resolver: AppHandleResolver
    dataplane: DataPlaneClient
    session: BrowserSession
    auth: AuthFlow
    checks: Checks
    handle: AppHandle | None = None
    backup: BackupRecord | None = None
    state: LifecycleState = LifecycleState.NOT_INSTALLED

    @classmethod
    def build(
        cls,
        config: ProbeConfig,
        credentials: Credentials,
        session: BrowserSession,
    ) -> RunContext:
        """Wire up the default collaborators for a config."""
        platform = PlatformClient(config.platform_cli, cwd=config.workdir)
        dataplane = DataPlaneClient(config.dataplane_cli, cwd=config.workdir)
        return cls(
            config=config,
            credentials=credentials,
            platform=platform,
            resolver=AppHandleResolver(platform),
            dataplane=dataplane,
            session=session,
            auth=AuthFlow(session, credentials),
            checks=Checks(session, dataplane, http_timeout=config.http_timeout),
        )

    @property
    def app(self) -> AppHandle:
        """Current handle; steps declaring ``needs=("handle",)`` can rely on it."""
        if self.handle is None:
            raise PreconditionError(message="No app handle resolved")
        return self.handle

    def resolve(self) -> AppHandle:
        """Re-resolve the handle after a mutation that may change it."""
        self.handle = self.resolver.resolve(self.config.location)
        return self.handle

    def fixture(self, name: str) -> Path:
        """Path of a fixture file or folder."""
        path = self.config.fixtures_dir / name
        if not path.exists():
            raise PreconditionError(
                message=f"Fixture not found: {path}",
                data={"path": str(path)},
            )
        return path
