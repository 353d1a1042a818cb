"""CLI output formatting helpers."""

import click

from .config import ProbeConfig
from .lifecycle import RunResult, Step, StepResult
from .platform import AppHandle


def print_config_sources(config: ProbeConfig) -> None:
    """Print each config value with where it came from."""
    for key, value in config.as_dict().items():
        click.echo(f"  {key}: {value}  ({config.get_source(key)})")


def print_steps(steps: list[Step]) -> None:
    """Print the ordered lifecycle steps with their states.

    Args:
        steps: Lifecycle steps in run order
    """
    width = max(len(step.name) for step in steps)
    for i, step in enumerate(steps, 1):
        click.echo(f"  {i:>2}. {step.name:<{width}}  {step.description}")
        click.echo(f"      {'':<{width}}  {step.requires.value} → {step.produces.value}")


def print_step_result(step: Step, result: StepResult) -> None:
    """Print one progress line for a finished step."""
    mark = "✓" if result.success else "✗"
    click.echo(f"  {mark} {step.name} ({result.elapsed_seconds:.1f}s)")
    if result.error:
        for line in result.error.splitlines():
            click.echo(f"      {line}", err=True)


def print_run_summary(result: RunResult) -> None:
    """Print the end-of-run summary.

    Args:
        result: Outcome of the lifecycle run
    """
    passed = sum(1 for s in result.steps if s.success)
    click.echo("\n" + "=" * 50)
    if result.success:
        click.echo(f"✓ Lifecycle passed ({passed} steps)")
    else:
        click.echo(f"✗ Lifecycle failed at step '{result.failed_step}'")
        click.echo(f"  {passed} step(s) passed before the failure")
    click.echo(f"  Final state: {result.state.value}")
    click.echo("=" * 50)


def print_app_handle(handle: AppHandle) -> None:
    """Print a resolved app handle."""
    click.echo(f"App ID:   {handle.id}")
    click.echo(f"Location: {handle.location}")
    click.echo(f"FQDN:     {handle.fqdn}")
