"""Lifecycle orchestration package.

This package provides the ordered lifecycle run which:
1. Installs the app and resolves its handle
2. Uploads, lists, serves and deletes fixture files
3. Backs up, reinstalls and restores
4. Moves the app to a new location
5. Reinstalls the published package and updates it
6. Uninstalls
"""

from .context import RunContext
from .machine import LifecycleState, Step, validate_chain
from .script import LifecycleScript, RunResult, StepResult, run_lifecycle
from .steps import LIFECYCLE_STEPS

__all__ = [
    # State machine
    "LifecycleState",
    "Step",
    "validate_chain",
    # Context
    "RunContext",
    # Script
    "LIFECYCLE_STEPS",
    "LifecycleScript",
    "RunResult",
    "StepResult",
    "run_lifecycle",
]
