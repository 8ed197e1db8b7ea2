"""Platform lock primitive integration for exflock.

The primitive is flock(1) from util-linux: it acquires an exclusive
advisory lock on a file, bounded by a timeout, and then runs a command
that inherits the locked descriptor. It exits 1 when the lock cannot be
acquired in time, otherwise with the command's own exit status.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from ..errors import PlatformError


@dataclass(frozen=True)
class LockPrimitive:
    """A located lock primitive executable."""

    path: str

    @property
    def name(self) -> str:
        """Executable basename, as it appears in the process table."""
        return os.path.basename(self.path)

    @classmethod
    def locate(cls, exec_name: str) -> "LockPrimitive":
        """Find the lock primitive on this platform.

        Args:
            exec_name: Executable name or path (config lock.exec)

        Raises:
            PlatformError: On non-POSIX platforms or if the executable is missing
        """
        if os.name != "posix":
            raise PlatformError(f"Unsupported platform: {os.name}")
        path = shutil.which(exec_name)
        if path is None:
            raise PlatformError(f"Lock primitive not found in PATH: {exec_name}")
        return cls(path=path)

    def command(self, target: Path, wait_seconds: int, argv: list[str]) -> list[str]:
        """Build the "acquire exclusively within wait_seconds, then run argv" command.

        A wait of 0 makes the primitive fail immediately if the lock is taken.
        """
        return [
            self.path,
            "--exclusive",
            "--wait",
            str(wait_seconds),
            str(target),
            *argv,
        ]

    def spawn(
        self,
        target: Path,
        wait_seconds: int,
        argv: list[str],
        log_path: Path | None = None,
    ) -> subprocess.Popen[bytes]:
        """Start the primitive in the background in its own session.

        The child's stdio is detached from the caller so that command
        substitution in the calling shell does not wait for the Holder.

        Args:
            target: File to lock
            wait_seconds: Acquisition bound
            argv: Command to run while holding the lock
            log_path: File to append the child's output to (default: discard)
        """
        cmd = self.command(target, wait_seconds, argv)
        if log_path is None:
            return subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(log_path, "ab") as log:
            return subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=log,
                stderr=log,
                start_new_session=True,
            )
