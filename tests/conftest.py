"""Shared test fixtures for lifecycle-probe tests.

This module provides fixtures for exercising lifecycle steps:
- fake_platform / fake_dataplane: in-memory remote side (tests/mocks)
- fake_ctx: RunContext wired to the fakes, for whole-run tests
- mock_ctx: RunContext of MagicMocks, for checking exact interactions
"""

from unittest.mock import MagicMock

import pytest

from lifecycle_probe.auth import AuthFlow
from lifecycle_probe.browser import BrowserSession
from lifecycle_probe.checks import Checks
from lifecycle_probe.config import Credentials, ProbeConfig
from lifecycle_probe.dataplane import DataPlaneClient
from lifecycle_probe.lifecycle import RunContext
from lifecycle_probe.platform import AppHandle, AppHandleResolver, PlatformClient
from tests.mocks import FakeAuth, FakeChecks, FakeDataPlane, FakePlatform

# =============================================================================
# Plain values
# =============================================================================


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(username="admin", password="s3cret")


@pytest.fixture
def probe_config() -> ProbeConfig:
    """Default config; fixtures_dir points at the packaged fixture files."""
    return ProbeConfig()


@pytest.fixture
def handle() -> AppHandle:
    return AppHandle(id="app-1", location="test", fqdn="test.example.com")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's PROBE_* settings and credentials out of tests."""
    for var in (
        "PROBE_LOCATION",
        "PROBE_TIMEOUT",
        "PROBE_HTTP_TIMEOUT",
        "PROBE_PLATFORM_CLI",
        "PROBE_DATAPLANE_CLI",
        "PROBE_APPSTORE_ID",
        "PROBE_HEADLESS",
        "PROBE_WORKDIR",
        "PROBE_FIXTURES_DIR",
        "PROBE_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


# =============================================================================
# Fake remote side
# =============================================================================


@pytest.fixture
def fake_platform() -> FakePlatform:
    return FakePlatform()


@pytest.fixture
def fake_dataplane(fake_platform) -> FakeDataPlane:
    return FakeDataPlane(fake_platform)


@pytest.fixture
def fake_ctx(probe_config, credentials, fake_platform, fake_dataplane) -> RunContext:
    """RunContext whose collaborators share one in-memory platform."""
    return RunContext(
        config=probe_config,
        credentials=credentials,
        platform=fake_platform,
        resolver=AppHandleResolver(fake_platform),
        dataplane=fake_dataplane,
        session=MagicMock(spec=BrowserSession),
        auth=FakeAuth(fake_platform, credentials),
        checks=FakeChecks(fake_platform, fake_dataplane),
    )


# =============================================================================
# Mocked collaborators
# =============================================================================


@pytest.fixture
def mock_ctx(probe_config, credentials) -> RunContext:
    """RunContext of spec'd MagicMocks; the resolver returns no handle until set."""
    return RunContext(
        config=probe_config,
        credentials=credentials,
        platform=MagicMock(spec=PlatformClient),
        resolver=MagicMock(spec=AppHandleResolver),
        dataplane=MagicMock(spec=DataPlaneClient),
        session=MagicMock(spec=BrowserSession),
        auth=MagicMock(spec=AuthFlow),
        checks=MagicMock(spec=Checks),
    )
