"""Error taxonomy for lifecycle runs.

Every error is fatal to the run it occurs in. The orchestrator records the
failing step and stops; nothing here is retried or compensated.
"""

from dataclasses import dataclass, field
from typing import Any

# Error codes
PRECONDITION_FAILED = "PRECONDITION_FAILED"
WAIT_TIMEOUT = "WAIT_TIMEOUT"
COMMAND_FAILED = "COMMAND_FAILED"
ASSERTION_FAILED = "ASSERTION_FAILED"
STEP_ORDER = "STEP_ORDER"
MISSING_CREDENTIALS = "MISSING_CREDENTIALS"
CONFIG_INVALID = "CONFIG_INVALID"


@dataclass
class ProbeError(Exception):
    """Base error class for lifecycle-probe errors."""

    code: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serialisable dict."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data:
            error["data"] = self.data
        return error


@dataclass
class PreconditionError(ProbeError):
    """Remote state does not satisfy what the next step needs."""

    code: str = PRECONDITION_FAILED
    message: str = "Precondition failed"


@dataclass
class WaitTimeoutError(ProbeError):
    """A UI condition did not hold within its bound."""

    code: str = WAIT_TIMEOUT
    message: str = "Timed out waiting for element"


@dataclass
class ExternalCommandError(ProbeError):
    """An external CLI exited non-zero or could not be started."""

    code: str = COMMAND_FAILED
    message: str = "External command failed"


@dataclass
class AssertionFailure(ProbeError):
    """Observed content or status differs from the expected one."""

    code: str = ASSERTION_FAILED
    message: str = "Assertion failed"


@dataclass
class StepOrderError(ProbeError):
    """A lifecycle step was started from the wrong state."""

    code: str = STEP_ORDER
    message: str = "Step started out of order"


@dataclass
class MissingCredentialsError(ProbeError):
    """USERNAME or PASSWORD is not set."""

    code: str = MISSING_CREDENTIALS
    message: str = "USERNAME and PASSWORD env vars need to be set"


@dataclass
class ConfigError(ProbeError):
    """Config file could not be read."""

    code: str = CONFIG_INVALID
    message: str = "Invalid configuration"


def wait_timeout(locator: str, kind: str, timeout: float) -> WaitTimeoutError:
    """Build the error raised when a wait exceeds its bound.

    Args:
        locator: Human-readable locator (e.g. "id=usernameInput")
        kind: Wait kind value (present, visible, clickable)
        timeout: Bound in seconds

    Returns:
        WaitTimeoutError naming the locator and condition
    """
    return WaitTimeoutError(
        message=f"Element {locator} not {kind} after {timeout:g}s",
        data={"locator": locator, "kind": kind, "timeout": timeout},
    )


def command_failed(argv: list[str], returncode: int | None, stderr: str) -> ExternalCommandError:
    """Build the error raised when an external command fails.

    Args:
        argv: Command line, already masked
        returncode: Exit code, or None if the executable was not found
        stderr: Captured stderr (may be empty when output was inherited)

    Returns:
        ExternalCommandError with the command context
    """
    command = " ".join(argv)
    if returncode is None:
        message = f"Command not found: {argv[0]}"
    else:
        message = f"Command failed with exit code {returncode}: {command}"
        if stderr.strip():
            message = f"{message}\n{stderr.strip()}"
    return ExternalCommandError(
        message=message,
        data={"argv": argv, "returncode": returncode, "stderr": stderr},
    )


def assertion_failed(what: str, expected: Any, actual: Any) -> AssertionFailure:
    """Build the error raised when a check observes the wrong value.

    Args:
        what: Description of the check
        expected: Expected value
        actual: Observed value

    Returns:
        AssertionFailure with expected vs actual
    """
    return AssertionFailure(
        message=f"{what}: expected {expected!r}, got {actual!r}",
        data={"expected": expected, "actual": actual},
    )
