"""Path management for lifecycle-probe.

Manages the ~/.lifecycle-probe/ directory and the packaged fixture files.
"""

from pathlib import Path

# Base directory for all lifecycle-probe data
PROBE_DIR = Path.home() / ".lifecycle-probe"

# Fixture files shipped with the package
FIXTURES_DIR = Path(__file__).resolve().parent.parent / "fixtures"


def ensure_dirs() -> None:
    """Create ~/.lifecycle-probe/ if missing (mode 0o700 - user-only access)."""
    PROBE_DIR.mkdir(mode=0o700, exist_ok=True)
