"""exflock CLI: detached advisory file locks for shell pipelines."""

import contextlib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import click
import typer
from typer.core import TyperGroup

from exflock import __version__

from .commands import acquire, hold, init, release, status
from .constants import EXIT_USAGE
from .logging import configure_logging
from .output import OutputContext, set_output_context

# Collect stray arguments so commands can report them with their own exit codes
PASSTHROUGH_SETTINGS = {"allow_extra_args": True, "ignore_unknown_options": True}


@contextlib.contextmanager
def _usage_exit_code() -> Iterator[None]:
    try:
        yield
    except click.UsageError as e:
        # click reports its own usage errors with 2, which exflock reserves for mailbox failures
        e.exit_code = EXIT_USAGE
        raise


class ExflockGroup(TyperGroup):
    """Command group whose command-line usage errors exit 1."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if not args:
            # Bare `exflock` prints help the usual way
            return super().parse_args(ctx, args)
        with _usage_exit_code():
            return super().parse_args(ctx, args)

    def invoke(self, ctx: click.Context) -> Any:
        with _usage_exit_code():
            return super().invoke(ctx)


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"exflock {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="exflock",
    help="Advisory file locks that outlive the command that requested them",
    no_args_is_help=True,
    cls=ExflockGroup,
)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v, -vv)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-error output",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format for automation",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: $EXFLOCK_CONFIG or ~/.config/exflock/config.toml)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging (same as -vv, also forwarded to the holder)",
    ),
) -> None:
    """exflock - detached advisory file locks."""
    console = configure_logging(
        verbosity=verbose,
        quiet=quiet,
        no_color=no_color,
        debug=debug,
        holder=ctx.invoked_subcommand == "hold",
    )
    set_output_context(OutputContext(console=console, json_mode=json_output))
    ctx.obj = {"config_path": config, "verbosity": max(verbose, 2) if debug else verbose}


app.command("acquire", context_settings=PASSTHROUGH_SETTINGS)(acquire)
app.command("hold", hidden=True, context_settings=PASSTHROUGH_SETTINGS)(hold)
app.command("release")(release)
app.command("status")(status)
app.command("init")(init)


def run() -> None:
    """Console script entry point."""
    app()
