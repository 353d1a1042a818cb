"""Test mocks for lifecycle-probe.

Provides in-memory stand-ins for the remote side of a lifecycle run:
- FakePlatform: apps, backups and restores as the platform CLI sees them
- FakeDataPlane: file upload, listing and delete inside an app
- FakeAuth / FakeChecks: UI login and content checks without a browser
"""

from .fake_platform import FakeApp, FakeAuth, FakeChecks, FakeDataPlane, FakePlatform

__all__ = ["FakeApp", "FakeAuth", "FakeChecks", "FakeDataPlane", "FakePlatform"]
