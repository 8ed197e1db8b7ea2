"""Role detection for the shared exflock entry point.

The Holder is selected explicitly with the ``hold`` command, but it only
makes sense as the direct child of the lock primitive, which is itself a
child of the Launcher that named it. Walking two levels up the process
table confirms that shape before the Holder publishes anything.

This is a heuristic, not a guarantee: an unrelated process tree with the
same names and PIDs would pass.
"""

import logging
from enum import Enum

from ..services import parent_chain, process_name

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """Which side of the handshake this invocation plays."""

    LAUNCHER = "launcher"
    HOLDER = "holder"


def detect_role(requester_pid: int | None, lock_name: str) -> Role:
    """Decide whether the current process is a Holder.

    Args:
        requester_pid: Launcher identity passed to the Holder (None if absent)
        lock_name: Executable name of the lock primitive

    Returns:
        Role.HOLDER if parent is lock_name and grandparent is requester_pid,
        Role.LAUNCHER on any break in that chain
    """
    if requester_pid is None:
        return Role.LAUNCHER

    chain = parent_chain(depth=2)
    if len(chain) < 2:
        logger.debug("Ancestry too short for holder role: %d level(s)", len(chain))
        return Role.LAUNCHER

    parent, grandparent = chain
    name = process_name(parent)
    if name != lock_name:
        logger.debug("Parent %d is %r, expected %r", parent.pid, name, lock_name)
        return Role.LAUNCHER
    if grandparent.pid != requester_pid:
        logger.debug("Grandparent %d is not requester %d", grandparent.pid, requester_pid)
        return Role.LAUNCHER
    return Role.HOLDER
