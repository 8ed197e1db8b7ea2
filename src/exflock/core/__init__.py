"""Core detached-lock logic for exflock.

This package contains the coordination protocol:
- role: ancestry check guarding the Holder entry point
- handshake: mailbox ownership and the write-then-signal hand-off
- launcher: watchdog wait and result reporting
- holder: lifecycle of the process that keeps the lock
- release: explicit release and status queries
"""

from .handshake import Mailbox, hand_off
from .holder import HolderArgs, HolderExit, parse_holder_args, run_holder
from .launcher import LauncherInterrupted, holder_argv, interrupt_guard, launch
from .release import is_held, is_holder, release
from .role import Role, detect_role

__all__ = [
    "HolderArgs",
    "HolderExit",
    "LauncherInterrupted",
    "Mailbox",
    "Role",
    "detect_role",
    "hand_off",
    "holder_argv",
    "interrupt_guard",
    "is_held",
    "is_holder",
    "launch",
    "parse_holder_args",
    "release",
    "run_holder",
]
