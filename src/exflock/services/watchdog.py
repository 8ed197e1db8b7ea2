"""Provisional watchdog process for the launcher/holder handshake.

The watchdog is a long, interruptible no-op. Its only job is to exit:
either the Holder terminates it after publishing its identity, or the
Launcher's reaper terminates it when acquisition fails. Its sleep is
bounded so the Launcher can never hang forever.
"""

import shutil
import subprocess

from ..errors import PlatformError


def start_watchdog(exec_name: str, seconds: int) -> subprocess.Popen[bytes]:
    """Start the watchdog sleeping for at most seconds.

    Raises:
        PlatformError: If the sleep executable is missing
    """
    path = shutil.which(exec_name)
    if path is None:
        raise PlatformError(f"Watchdog executable not found in PATH: {exec_name}")
    return subprocess.Popen(
        [path, str(seconds)],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
