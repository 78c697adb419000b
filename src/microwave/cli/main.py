"""CLI entry point for microwave.

Uses Click to expose the ``microwave`` command group.  One-shot commands act
on the oven persisted under ``--state-dir``; ``watch`` hosts its countdown and
``shell`` drives an in-memory oven interactively.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import Callable, TypeVar

import click

import microwave
from microwave.config.logging import configure_logging
from microwave.config.settings import MicrowaveSettings
from microwave.core.domain import ApiResult, RunningState
from microwave.core.formatting import error_to_string, state_to_string
from microwave.core.oven import Microwave
from microwave.core.store import InMemoryStore, JsonFileStore, StoreError

T = TypeVar("T")

_SHELL_HELP = "Commands: open, close, start SECONDS, stop, status, help, quit"


def _run(action: Callable[[], T]) -> T:
    """Execute *action*, converting ``StoreError`` to a CLI error.

    On ``StoreError`` the message is printed to stderr and the process exits
    with code 1.
    """
    try:
        return action()
    except StoreError as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)


def _persisted_oven(settings: MicrowaveSettings) -> Microwave:
    return Microwave(
        JsonFileStore(settings.state_dir),
        user=settings.user,
        tick_interval=settings.tick_interval,
    )


def _report(result: ApiResult, locale: str) -> None:
    """Echo the outcome of a command; exit 1 on rejection."""
    if result.ok:
        click.echo(state_to_string(result.state))
        return
    click.echo(error_to_string(locale, result.error), err=True)
    sys.exit(1)


def _dispatch(ctx: click.Context, command: Callable[[Microwave], ApiResult]) -> None:
    settings: MicrowaveSettings = ctx.obj
    oven = _persisted_oven(settings)
    try:
        result = _run(lambda: command(oven))
    finally:
        oven.shutdown()
    _report(result, settings.locale)


@click.group()
@click.version_option(version=microwave.__version__, prog_name="microwave")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--locale", default=None, help="Language tag for error messages, e.g. fr-FR.")
@click.option(
    "--state-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the persisted oven state.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    log_json: bool,
    locale: str | None,
    state_dir: Path | None,
) -> None:
    """microwave: drive a microwave oven from the terminal."""
    settings = MicrowaveSettings.from_cli(
        verbose=verbose or None,
        log_json=log_json or None,
        locale=locale,
        state_dir=state_dir,
    )
    configure_logging(verbose=settings.verbose, log_json=settings.log_json)
    ctx.obj = settings


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the current oven state."""
    oven = _persisted_oven(ctx.obj)
    click.echo(state_to_string(_run(oven.get_state)))


@cli.command(name="open")
@click.pass_context
def open_door(ctx: click.Context) -> None:
    """Open the door, pausing any running countdown."""
    _dispatch(ctx, lambda oven: oven.open())


@cli.command(name="close")
@click.pass_context
def close_door(ctx: click.Context) -> None:
    """Close the door, resuming a paused countdown."""
    _dispatch(ctx, lambda oven: oven.close())


@cli.command()
@click.argument("seconds", type=int)
@click.pass_context
def start(ctx: click.Context, seconds: int) -> None:
    """Start cooking for SECONDS seconds."""
    _dispatch(ctx, lambda oven: oven.start(seconds))


@cli.command()
@click.pass_context
def stop(ctx: click.Context) -> None:
    """Stop cooking and discard the remaining time."""
    _dispatch(ctx, lambda oven: oven.stop())


@cli.command()
@click.pass_context
def watch(ctx: click.Context) -> None:
    """Count down a running oven, printing each second until it stops."""
    settings: MicrowaveSettings = ctx.obj
    oven = _persisted_oven(settings)
    try:
        state = _run(oven.resume_countdown)
        click.echo(state_to_string(state))
        while isinstance(state, RunningState):
            time.sleep(settings.tick_interval)
            current = _run(oven.get_state)
            if current != state:
                click.echo(state_to_string(current))
            state = current
    finally:
        oven.shutdown()


@cli.command()
@click.pass_context
def shell(ctx: click.Context) -> None:
    """Drive an in-memory oven interactively, with a live countdown."""
    settings: MicrowaveSettings = ctx.obj
    oven = Microwave(InMemoryStore(), user=settings.user, tick_interval=settings.tick_interval)
    click.echo(_SHELL_HELP)
    try:
        while True:
            try:
                line = click.prompt("microwave", prompt_suffix="> ", default="", show_default=False)
            except click.Abort:
                break
            words = line.split()
            if not words:
                continue
            if words[0] in ("quit", "exit"):
                break
            _shell_command(oven, words, settings.locale)
    finally:
        oven.shutdown()


def _shell_command(oven: Microwave, words: list[str], locale: str) -> None:
    """Run one shell line; errors are echoed, never raised."""
    name, args = words[0], words[1:]
    if name == "status":
        click.echo(state_to_string(oven.get_state()))
        return
    if name == "help":
        click.echo(_SHELL_HELP)
        return
    if name == "start":
        try:
            if len(args) != 1:
                raise ValueError(args)
            seconds = int(args[0])
        except ValueError:
            click.echo("usage: start SECONDS", err=True)
            return
        result = oven.start(seconds)
    elif name == "open" and not args:
        result = oven.open()
    elif name == "close" and not args:
        result = oven.close()
    elif name == "stop" and not args:
        result = oven.stop()
    else:
        click.echo(f"unknown command: {' '.join(words)}", err=True)
        return
    if result.ok:
        click.echo(state_to_string(result.state))
    else:
        click.echo(error_to_string(locale, result.error), err=True)
