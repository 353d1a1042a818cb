"""Lifecycle state machine.

Each step is a transition between named states. A step declares the
state it starts from and the context values it needs; starting it from
anywhere else is an error, so a reordered or partial sequence is caught
instead of running against the wrong deployment.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

from ..errors import PreconditionError, StepOrderError

if TYPE_CHECKING:
    from .context import RunContext


class LifecycleState(Enum):
    """Observable state of the deployment under test."""

    NOT_INSTALLED = "not_installed"  # Nothing deployed at the location
    INSTALLED = "installed"  # Fresh install, handle resolved
    LOGGED_IN = "logged_in"  # UI and data-plane sessions open
    INDEX_UPLOADED = "index_uploaded"  # index.html served at / and /index.html
    FILE_DELETED = "file_deleted"  # test.txt uploaded then deleted, 404s
    FOLDER_UPLOADED = "folder_uploaded"  # test/ with test.txt present
    POPULATED = "populated"  # Content in place, logged out
    BACKED_UP = "backed_up"  # Backup created and selected
    RESTORED = "restored"  # Reinstalled and restored from backup
    RESTORE_VERIFIED = "restore_verified"  # Restored content checked
    RELOCATED = "relocated"  # Moved to a new location, same id
    FOLDER_DELETED = "folder_deleted"  # test/ removed recursively
    REMOVED = "removed"  # Uninstalled
    STORE_INSTALLED = "store_installed"  # Published package installed and populated
    UPDATED = "updated"  # Updated in place, content checked
    FINISHED = "finished"  # Final uninstall done


@dataclass(frozen=True)
class Step:
    """One lifecycle transition plus its verification."""

    name: str
    description: str
    requires: LifecycleState
    produces: LifecycleState
    action: Callable[[RunContext], None]
    needs: tuple[str, ...] = ()

    def check_preconditions(self, ctx: RunContext) -> None:
        """Raise if ``ctx`` is not where this step starts.

        Raises:
            StepOrderError: If ctx.state is not ``requires``
            PreconditionError: If a needed context value is unset
        """
        if ctx.state is not self.requires:
            raise StepOrderError(
                message=(
                    f"Step '{self.name}' requires state '{self.requires.value}', "
                    f"current state is '{ctx.state.value}'"
                ),
                data={
                    "step": self.name,
                    "requires": self.requires.value,
                    "state": ctx.state.value,
                },
            )
        missing = [name for name in self.needs if getattr(ctx, name, None) is None]
        if missing:
            raise PreconditionError(
                message=f"Step '{self.name}' needs {', '.join(missing)} to be set",
                data={"step": self.name, "missing": missing},
            )

    def run(self, ctx: RunContext) -> None:
        """Check preconditions, run the action, advance the state."""
        self.check_preconditions(ctx)
        self.action(ctx)
        ctx.state = self.produces


def validate_chain(steps: list[Step]) -> None:
    """Ensure every step starts where the previous one ended.

    Raises:
        ValueError: On a broken chain or duplicate step names
    """
    names = [step.name for step in steps]
    duplicates = {name for name in names if names.count(name) > 1}
    if duplicates:
        raise ValueError(f"Duplicate step names: {', '.join(sorted(duplicates))}")

    for previous, current in zip(steps, steps[1:]):
        if current.requires is not previous.produces:
            raise ValueError(
                f"Step '{current.name}' requires '{current.requires.value}' but "
                f"'{previous.name}' produces '{previous.produces.value}'"
            )
