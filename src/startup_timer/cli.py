"""Command-line interface for the startup timer."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import typer

from .config import TimerSettings
from .lifecycle import StartupLifecycle
from .normalization import normalize_activity_id
from .process_observer import PROCESS_ADAPTERS, ProcessTreeRegistry
from .timer import StartupIntervalTimer

app = typer.Typer(help="Measure how long a program takes to finish its first scripted activity.")


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def run(
    command: List[str] = typer.Argument(..., help="Command to launch and time."),
    target: Optional[str] = typer.Option(
        None,
        "--target",
        "-t",
        help="Only time this activity (e.g. 'initialize'). Defaults to the first one seen.",
    ),
    tick_seconds: float = typer.Option(
        0.05, "--interval", min=0.001, help="Polling interval in seconds."
    ),
    grace_seconds: float = typer.Option(
        2.0, "--grace", min=0.0, help="Seconds without any activity before reporting fastpath."
    ),
    timeout_seconds: float = typer.Option(
        180.0, "--timeout", min=0.1, help="Seconds of observation before reporting timeout."
    ),
    trace: bool = typer.Option(False, "--trace", help="Log every activity state change."),
) -> None:
    """Launch COMMAND and report the time until its first activity ends."""
    settings = TimerSettings.from_intervals(
        tick_seconds=tick_seconds,
        grace_seconds=grace_seconds,
        timeout_seconds=timeout_seconds,
        verbose=trace,
        target_activity=target,
    )
    lifecycle = StartupLifecycle(StartupIntervalTimer(settings), enabled=True)
    try:
        exit_code = asyncio.run(_run_and_time(lifecycle, command))
    except OSError as exc:
        typer.echo(f"Failed to launch {command[0]}: {exc}", err=True)
        raise typer.Exit(code=127)
    raise typer.Exit(code=exit_code)


async def _run_and_time(lifecycle: StartupLifecycle, command: List[str]) -> int:
    """Spawn ``command`` and time it; a command that cannot start is not reported."""
    lifecycle.before_splash()
    registry = ProcessTreeRegistry()
    watcher = lifecycle.after_scene_load(registry, PROCESS_ADAPTERS)
    try:
        process = await asyncio.create_subprocess_exec(*command)
    except OSError:
        watcher.cancel()
        raise
    registry.attach(process.pid)
    lifecycle.register_exit_hook()
    try:
        return_code = await process.wait()
        await watcher
    finally:
        if not watcher.done():
            watcher.cancel()
        lifecycle.on_quit()
    return return_code


@app.command()
def normalize(raw: List[str] = typer.Argument(..., help="Identifiers to normalize.")) -> None:
    """Print the normalized form of each activity identifier."""
    for value in raw:
        typer.echo(f"{value}\t{normalize_activity_id(value) or ''}")
