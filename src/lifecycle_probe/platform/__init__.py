"""Platform management package.

This package wraps the platform CLI that installs, backs up, restores,
moves, updates and removes the deployment under test, and resolves the
deployment's current identity and address.
"""

from .commands import BackupRecord, PlatformClient
from .resolver import AppHandle, AppHandleResolver

__all__ = [
    "PlatformClient",
    "BackupRecord",
    "AppHandle",
    "AppHandleResolver",
]
