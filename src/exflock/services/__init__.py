"""External process integrations for exflock.

This package wraps everything outside the Python process:
- process: process-table introspection and signalling (psutil)
- lock_primitive: the flock(1) "lock, then run" primitive
- watchdog: the provisional placeholder process
"""

from .lock_primitive import LockPrimitive
from .process import (
    ProcessRef,
    is_pid_running,
    parent_chain,
    process_cmdline,
    process_name,
    terminate,
    terminate_group,
    wait_for_exit,
)
from .watchdog import start_watchdog

__all__ = [
    "LockPrimitive",
    "ProcessRef",
    "is_pid_running",
    "parent_chain",
    "process_cmdline",
    "process_name",
    "start_watchdog",
    "terminate",
    "terminate_group",
    "wait_for_exit",
]
