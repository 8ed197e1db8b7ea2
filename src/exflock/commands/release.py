"""Release and status command implementations."""

from typing import Annotated

import typer

from ..constants import RELEASE_WAIT_TIMEOUT
from ..core import is_held
from ..core import release as release_holder
from ..errors import ExflockError
from ..output import get_output_context
from ._common import fail, parse_interval, parse_pid


def release(
    pid: Annotated[str, typer.Argument(metavar="PID", help="Holder PID printed by acquire")],
    wait: Annotated[
        str,
        typer.Option("--wait", help="Seconds to wait for the holder to exit"),
    ] = str(RELEASE_WAIT_TIMEOUT),
) -> None:
    """Release a detached lock by stopping its holder."""
    out = get_output_context()
    try:
        holder_pid = parse_pid(pid, "PID")
        released = release_holder(holder_pid, parse_interval(wait, "--wait"))
    except ExflockError as e:
        raise fail(e) from None

    if not released:
        out.error(f"Holder {holder_pid} did not exit", {"pid": holder_pid})
        raise typer.Exit(1)
    out.success(f"Released lock held by {holder_pid}", {"pid": holder_pid})


def status(
    pid: Annotated[str, typer.Argument(metavar="PID", help="Holder PID printed by acquire")],
) -> None:
    """Report whether a detached lock is still held (exit 0) or released (exit 1)."""
    out = get_output_context()
    try:
        holder_pid = parse_pid(pid, "PID")
    except ExflockError as e:
        raise fail(e) from None

    held = is_held(holder_pid)
    out.result({"pid": holder_pid, "held": held}, "held" if held else "released")
    if not held:
        raise typer.Exit(1)
