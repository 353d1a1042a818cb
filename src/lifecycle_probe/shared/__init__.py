"""Shared modules for lifecycle-probe.

This module provides functionality used by every layer of a run:
- Paths (~/.lifecycle-probe, packaged fixtures)
- Logging (structlog)
- External command execution
"""

from .logging import configure_logging, get_logger
from .paths import FIXTURES_DIR, PROBE_DIR, ensure_dirs
from .process import mask_argv, run_command

__all__ = [
    # Paths
    "PROBE_DIR",
    "FIXTURES_DIR",
    "ensure_dirs",
    # Logging
    "configure_logging",
    "get_logger",
    # Processes
    "run_command",
    "mask_argv",
]
