"""Acquire command implementation (the Launcher)."""

import os
from typing import Annotated

import typer

from ..core import launch
from ..errors import ExflockError, UsageError
from ..models import LockRequest
from ..output import get_output_context
from ..services import is_pid_running
from ._common import (
    config_path_option,
    fail,
    load_cli_config,
    parse_interval,
    parse_pid,
    verbosity_option,
)

ACQUIRE_USAGE = "exflock acquire <wait-seconds> <file> [max-lifetime-seconds]"


def acquire(
    ctx: typer.Context,
    wait: Annotated[
        str | None,
        typer.Argument(
            metavar="WAIT_SECONDS", help="Seconds to wait for the lock", show_default=False
        ),
    ] = None,
    file: Annotated[
        str | None,
        typer.Argument(metavar="FILE", help="Existing file to lock", show_default=False),
    ] = None,
    lifetime: Annotated[
        str | None,
        typer.Argument(
            metavar="[MAX_LIFETIME_SECONDS]",
            help="Release after this many seconds (0 = never; default from config)",
            show_default=False,
        ),
    ] = None,
    watch: Annotated[
        str | None,
        typer.Option("--watch", help="Release when this PID exits (default: calling shell)"),
    ] = None,
    poll_interval: Annotated[
        str | None,
        typer.Option("--poll-interval", help="Seconds between checks of the watched process"),
    ] = None,
) -> None:
    """Acquire a detached lock and print the holder PID.

    The lock is released when the holder is killed, when the watched
    process exits, or when the maximum lifetime elapses.
    """
    out = get_output_context()
    try:
        if ctx.args:
            raise UsageError(f"Unexpected arguments: {' '.join(ctx.args)}")
        if wait is None or file is None:
            raise UsageError(f"Usage: {ACQUIRE_USAGE}")

        config = load_cli_config(ctx)
        request = LockRequest.from_args(
            wait,
            file,
            lifetime if lifetime is not None else str(config.lock.default_lifetime),
        )

        watch_pid = parse_pid(watch, "--watch") if watch is not None else os.getppid()
        if not is_pid_running(watch_pid):
            raise UsageError(f"Watched process {watch_pid} is not running")
        interval = (
            parse_interval(poll_interval, "--poll-interval")
            if poll_interval is not None
            else None
        )

        holder_pid = launch(
            request,
            config,
            watch_pid=watch_pid,
            poll_interval=interval,
            config_path=config_path_option(ctx),
            verbosity=verbosity_option(ctx),
        )
    except ExflockError as e:
        raise fail(e) from None

    out.result(
        {
            "pid": holder_pid,
            "file": str(request.target),
            "lifetime": request.lifetime_seconds,
            "watch": watch_pid,
        },
        str(holder_pid),
    )
