"""Hold command implementation (the Holder, run by the lock primitive)."""

import logging
import os
from typing import Annotated

import typer

from ..constants import EXIT_HOLDER_MAILBOX
from ..core import HolderExit, Role, detect_role, parse_holder_args, run_holder
from ..errors import ExflockError, HolderArgumentError, MailboxError, RoleError
from ..services import parent_chain
from ._common import fail, load_cli_config, parse_interval, parse_pid

logger = logging.getLogger(__name__)


def _requester_parent(requester_pid: int) -> int:
    chain = parent_chain(requester_pid, depth=1)
    return chain[0].pid if chain else requester_pid


def hold(
    ctx: typer.Context,
    args: Annotated[
        list[str] | None,
        typer.Argument(metavar="REQUESTER MAX_LIFETIME MAILBOX", show_default=False),
    ] = None,
    watch: Annotated[
        str | None,
        typer.Option("--watch", help="Release when this PID exits (default: requester's parent)"),
    ] = None,
    poll_interval: Annotated[
        str | None,
        typer.Option("--poll-interval", help="Seconds between checks of the watched process"),
    ] = None,
) -> None:
    """Hold a lock on behalf of a launcher. Internal; run by the lock primitive."""
    try:
        config = load_cli_config(ctx)
        holder_args = parse_holder_args([*(args or []), *ctx.args])

        lock_name = os.path.basename(config.lock.exec)
        if detect_role(holder_args.requester_pid, lock_name) is not Role.HOLDER:
            raise RoleError(f"Not running under {lock_name} started by {holder_args.requester_pid}")

        watch_pid = (
            parse_pid(watch, "--watch")
            if watch is not None
            else _requester_parent(holder_args.requester_pid)
        )
        interval = (
            parse_interval(poll_interval, "--poll-interval")
            if poll_interval is not None
            else config.holder.poll_interval
        )
        session = run_holder(holder_args, watch_pid=watch_pid, poll_interval=interval)
    except HolderExit as e:
        # Signal landed while handlers were being installed or torn down
        logger.warning("Holder stopped outside the hold loop: %s", e.reason.value)
        raise typer.Exit(1) from None
    except MailboxError as e:
        # Mailbox vanished or changed between validation and publishing
        raise fail(HolderArgumentError(str(e), EXIT_HOLDER_MAILBOX)) from None
    except ExflockError as e:
        raise fail(e) from None

    # A non-zero status lets the launcher's reaper wake it when we never published
    raise typer.Exit(0 if session.published else 1)
