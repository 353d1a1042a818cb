"""Shared fixtures for live scenario tests.

Every fixture skips the test when the live environment is incomplete:
admin credentials in USERNAME/PASSWORD, and both CLIs on PATH.
"""

from __future__ import annotations

import shutil

import pytest

from lifecycle_probe.config import Credentials, ProbeConfig, load_config, load_credentials
from lifecycle_probe.errors import ProbeError


@pytest.fixture(scope="module")
def live_credentials() -> Credentials:
    """Admin credentials. Skips when USERNAME/PASSWORD are unset."""
    try:
        return load_credentials()
    except ProbeError as e:
        pytest.skip(str(e))


@pytest.fixture(scope="module")
def live_config() -> ProbeConfig:
    """Probe config from the usual file/env sources, always headless.

    Skips when either CLI is missing.
    """
    config = load_config()
    for executable in (config.platform_cli, config.dataplane_cli):
        if shutil.which(executable) is None:
            pytest.skip(f"{executable} not found on PATH")
    config.override("headless", True)
    return config
