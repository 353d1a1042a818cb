"""CLI main entry point."""

import json
import sys
from pathlib import Path
from typing import NoReturn

import click
from selenium.common.exceptions import WebDriverException

from . import __version__
from .config import (
    DEFAULT_LOG_LEVEL,
    ProbeConfig,
    config_keys,
    get_config_path,
    load_config,
    load_credentials,
    save_config,
    unset_config,
)
from .errors import ProbeError
from .formatters import (
    print_app_handle,
    print_config_sources,
    print_run_summary,
    print_step_result,
    print_steps,
)
from .lifecycle import LIFECYCLE_STEPS, run_lifecycle
from .platform import AppHandleResolver, PlatformClient
from .shared.logging import configure_logging, resolve_level

STEP_NAMES = [step.name for step in LIFECYCLE_STEPS]


def _fail(ctx: click.Context, error: ProbeError) -> NoReturn:
    """Report a fatal error and exit 1."""
    if ctx.obj.get("json_output"):
        click.echo(json.dumps({"error": error.to_dict()}, indent=2, default=str))
    else:
        click.echo(f"Error: {error.message}", err=True)
    sys.exit(1)


def _load(ctx: click.Context) -> ProbeConfig:
    """Load config for a command, exiting on an unreadable file."""
    config_path = ctx.obj.get("config_path")
    try:
        return load_config(Path(config_path) if config_path else None)
    except ProbeError as e:
        _fail(ctx, e)


@click.group()
@click.option("-c", "--config", type=click.Path(dir_okay=False), help="Config file path")
@click.option("-v", "--verbose", count=True, help="Increase verbosity")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.option("--log-json", is_flag=True, help="Emit logs as JSON")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write logs to a file")
@click.pass_context
def cli(
    ctx: click.Context,
    config: str | None,
    verbose: int,
    json_output: bool,
    log_json: bool,
    log_file: str | None,
) -> None:
    """Application lifecycle probe."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose
    ctx.obj["json_output"] = json_output

    try:
        configured = load_config(Path(config) if config else None).log_level
    except ProbeError:
        configured = DEFAULT_LOG_LEVEL  # Reported by the command that needs the config
    configure_logging(resolve_level(verbose, configured), log_file=log_file, json_output=log_json)


@cli.command()
@click.option("--location", help="Location label (prefix) of the app under test")
@click.option("--timeout", type=float, help="UI wait timeout in seconds")
@click.option("--headless/--no-headless", default=None, help="Run the browser headless")
@click.option("--workdir", type=click.Path(file_okay=False), help="Working dir for platform CLI")
@click.option("--stop-after", type=click.Choice(STEP_NAMES), help="Last step to run")
@click.pass_context
def run(
    ctx: click.Context,
    location: str | None,
    timeout: float | None,
    headless: bool | None,
    workdir: str | None,
    stop_after: str | None,
) -> None:
    """Run the full application lifecycle.

    Requires USERNAME and PASSWORD in the environment. Every step must
    pass for the next one to run; the first failure ends the run.

    Examples:

        # Full run against the locally built package
        lifecycle-probe run --location test

        # Headless, stop once the backup is taken
        lifecycle-probe run --headless --stop-after backup
    """
    try:
        credentials = load_credentials()
    except ProbeError as e:
        _fail(ctx, e)

    config = _load(ctx)
    config.override("location", location)
    config.override("timeout", timeout)
    config.override("headless", headless)
    config.override("workdir", workdir)

    json_output = ctx.obj["json_output"]
    if not json_output:
        click.echo(f"\nLifecycle run at location '{config.location}'\n")

    try:
        result = run_lifecycle(
            config,
            credentials,
            on_step=None if json_output else print_step_result,
            stop_after=stop_after,
        )
    except WebDriverException as e:
        _fail(ctx, ProbeError(code="BROWSER_UNAVAILABLE", message=f"Cannot start browser: {e.msg}"))
    except ProbeError as e:
        _fail(ctx, e)

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        print_run_summary(result)

    if not result.success:
        sys.exit(1)


@cli.command()
@click.pass_context
def steps(ctx: click.Context) -> None:
    """List the lifecycle steps in run order."""
    if ctx.obj["json_output"]:
        data = [
            {
                "name": step.name,
                "description": step.description,
                "requires": step.requires.value,
                "produces": step.produces.value,
            }
            for step in LIFECYCLE_STEPS
        ]
        click.echo(json.dumps(data, indent=2))
    else:
        click.echo(f"Lifecycle steps ({len(LIFECYCLE_STEPS)}):\n")
        print_steps(LIFECYCLE_STEPS)


@cli.command()
@click.option("--location", help="Location label (prefix) to resolve")
@click.pass_context
def resolve(ctx: click.Context, location: str | None) -> None:
    """Show the deployment matching the location prefix."""
    config = _load(ctx)
    config.override("location", location)

    platform = PlatformClient(config.platform_cli, cwd=config.workdir)
    try:
        handle = AppHandleResolver(platform).resolve(config.location)
    except ProbeError as e:
        _fail(ctx, e)

    if ctx.obj["json_output"]:
        click.echo(json.dumps({"id": handle.id, "location": handle.location, "fqdn": handle.fqdn}))
    else:
        print_app_handle(handle)


@cli.command()
@click.option("--workdir", type=click.Path(file_okay=False), help="App package directory")
@click.pass_context
def build(ctx: click.Context, workdir: str | None) -> None:
    """Build the app package with the platform CLI."""
    config = _load(ctx)
    config.override("workdir", workdir)

    try:
        PlatformClient(config.platform_cli, cwd=config.workdir).build()
    except ProbeError as e:
        _fail(ctx, e)
    click.echo("✓ Build complete")


@cli.command()
def version() -> None:
    """Show version information."""
    click.echo(f"lifecycle-probe version {__version__}")


@cli.group()
def config() -> None:
    """Manage configuration."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show configuration values and their sources."""
    loaded = _load(ctx)

    if ctx.obj["json_output"]:
        data = {
            "values": loaded.as_dict(),
            "sources": {key: loaded.get_source(key) for key in config_keys()},
        }
        click.echo(json.dumps(data, indent=2))
    else:
        click.echo("Lifecycle Probe Configuration")
        click.echo(f"File: {ctx.obj.get('config_path') or get_config_path()}\n")
        print_config_sources(loaded)


@config.command("set")
@click.argument("key", type=click.Choice(config_keys()))
@click.argument("value")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Save a configuration value."""
    config_path = ctx.obj.get("config_path")
    try:
        save_config(key, value, Path(config_path) if config_path else None)
    except ValueError:
        click.echo(f"Error: Invalid value for {key}: {value}", err=True)
        sys.exit(1)
    except ProbeError as e:
        _fail(ctx, e)
    click.echo(f"✓ {key} = {value}")


@config.command("unset")
@click.argument("key", type=click.Choice(config_keys()))
@click.pass_context
def config_unset(ctx: click.Context, key: str) -> None:
    """Remove a configuration value."""
    config_path = ctx.obj.get("config_path")
    try:
        removed = unset_config(key, Path(config_path) if config_path else None)
    except ProbeError as e:
        _fail(ctx, e)
    if removed:
        click.echo(f"✓ {key} removed")
    else:
        click.echo(f"{key} was not set")


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
