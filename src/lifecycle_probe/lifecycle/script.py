"""Lifecycle script runner.

Runs the steps strictly in order, one at a time. The first failure ends
the run: nothing is retried and nothing already done is rolled back.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable

from selenium.webdriver.remote.webdriver import WebDriver

from ..browser import BrowserSession
from ..config import Credentials, ProbeConfig
from ..errors import ProbeError
from ..shared.logging import get_logger
from .context import RunContext
from .machine import LifecycleState, Step, validate_chain
from .steps import LIFECYCLE_STEPS

logger = get_logger(__name__)


@dataclass
class StepResult:
    """Outcome of one step."""

    name: str
    success: bool
    elapsed_seconds: float = 0.0
    error: str | None = None
    error_code: str | None = None


@dataclass
class RunResult:
    """Outcome of a lifecycle run."""

    success: bool
    state: LifecycleState
    steps: list[StepResult] = field(default_factory=list)
    failed_step: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "state": self.state.value,
            "failed_step": self.failed_step,
            "error": self.error,
            "steps": [
                {
                    "name": s.name,
                    "success": s.success,
                    "elapsed_seconds": round(s.elapsed_seconds, 2),
                    "error": s.error,
                    "error_code": s.error_code,
                }
                for s in self.steps
            ],
        }


class LifecycleScript:
    """Ordered, fail-fast sequence of lifecycle steps."""

    def __init__(self, steps: list[Step] | None = None):
        """Initialize script.

        Args:
            steps: Steps to run; defaults to the full lifecycle.

        Raises:
            ValueError: If the steps do not form a chain of states
        """
        self.steps = list(LIFECYCLE_STEPS if steps is None else steps)
        validate_chain(self.steps)

    def step_names(self) -> list[str]:
        return [step.name for step in self.steps]

    def run(
        self,
        ctx: RunContext,
        on_step: Callable[[Step, StepResult], None] | None = None,
        stop_after: str | None = None,
    ) -> RunResult:
        """Run steps until the end, the first failure, or ``stop_after``.

        Args:
            ctx: Run context
            on_step: Optional callback called with (step, result) after
                     each step, for progress reporting.
            stop_after: Name of the last step to run.

        Returns:
            RunResult with per-step outcomes.

        Raises:
            ValueError: If stop_after names no step
        """
        if stop_after is not None and stop_after not in self.step_names():
            raise ValueError(f"Unknown step: {stop_after}")

        results: list[StepResult] = []

        for step in self.steps:
            log = logger.bind(step=step.name)
            log.info("step started", state=ctx.state.value)
            start = time.monotonic()

            try:
                step.run(ctx)
            except Exception as e:
                elapsed = time.monotonic() - start
                code = e.code if isinstance(e, ProbeError) else type(e).__name__
                result = StepResult(step.name, False, elapsed, str(e) or repr(e), code)
                results.append(result)
                log.error("step failed", error=result.error, code=code, elapsed=round(elapsed, 2))
                if on_step:
                    on_step(step, result)
                return RunResult(
                    success=False,
                    state=ctx.state,
                    steps=results,
                    failed_step=step.name,
                    error=result.error,
                )

            elapsed = time.monotonic() - start
            result = StepResult(step.name, True, elapsed)
            results.append(result)
            log.info("step passed", state=ctx.state.value, elapsed=round(elapsed, 2))
            if on_step:
                on_step(step, result)

            if step.name == stop_after:
                break

        return RunResult(success=True, state=ctx.state, steps=results)


def run_lifecycle(
    config: ProbeConfig,
    credentials: Credentials,
    on_step: Callable[[Step, StepResult], None] | None = None,
    stop_after: str | None = None,
    driver_factory: Callable[[], WebDriver] | None = None,
) -> RunResult:
    """Run the full lifecycle with a browser bound to the run.

    The browser is started before the first step and quit after the last
    one, whether the run passes, fails or raises.
    """
    script = LifecycleScript()
    with BrowserSession(
        headless=config.headless,
        timeout=config.timeout,
        driver_factory=driver_factory,
    ) as session:
        ctx = RunContext.build(config, credentials, session)
        return script.run(ctx, on_step=on_step, stop_after=stop_after)
