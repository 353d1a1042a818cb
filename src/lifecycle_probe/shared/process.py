"""Blocking external command execution.

Both the platform CLI and the data-plane CLI go through ``run_command``.
Every invocation owns its own process and runs to completion before the
caller continues.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from ..errors import command_failed
from .logging import get_logger

logger = get_logger(__name__)

MASK = "****"


def mask_argv(argv: list[str], secrets: tuple[str, ...] = ()) -> list[str]:
    """Replace secret arguments with a mask for logs and errors."""
    hidden = {s for s in secrets if s}
    return [MASK if arg in hidden else arg for arg in argv]


def run_command(
    argv: list[str],
    cwd: Path | None = None,
    capture: bool = True,
    secrets: tuple[str, ...] = (),
    timeout: float | None = None,
) -> str:
    """Run an external command and return its stdout.

    Args:
        argv: Command and arguments
        cwd: Working directory
        capture: Capture stdout/stderr. When False, output goes straight
                 to the terminal and the return value is empty.
        secrets: Argument values to mask in logs and errors
        timeout: Optional timeout in seconds

    Returns:
        Captured stdout ("" when capture is False)

    Raises:
        ExternalCommandError: On non-zero exit, missing executable or timeout
    """
    shown = mask_argv(argv, secrets)
    logger.debug("running command", argv=shown, cwd=str(cwd) if cwd else None)

    try:
        result = subprocess.run(
            argv,
            cwd=cwd,
            capture_output=capture,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        raise command_failed(shown, None, "")
    except subprocess.TimeoutExpired:
        raise command_failed(shown, -1, f"Timed out after {timeout}s")

    stdout = result.stdout or ""
    stderr = result.stderr or ""

    if result.returncode != 0:
        logger.error("command failed", argv=shown, returncode=result.returncode)
        raise command_failed(shown, result.returncode, stderr)

    return stdout
