"""Handshake protocol between Launcher and Holder.

The mailbox is a single-use file that carries exactly one tagged identity
at a time. Each party writes and then notifies, never the reverse:

1. Launcher creates the mailbox exclusively and writes the watchdog's
   identity tagged provisional, then starts the lock primitive.
2. Holder (once the lock is held) overwrites it with its own identity
   tagged final, then terminates the watchdog.
3. Launcher wakes only when the watchdog exits and reads the mailbox once.

The Launcher owns the file: only it creates and removes it. The Holder
overwrites the existing file in place and never creates or deletes it.
"""

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from types import TracebackType

from ..errors import MailboxError
from ..models import MailboxEntry
from ..services import terminate

logger = logging.getLogger(__name__)

MAILBOX_SUFFIX = ".mbox"


class Mailbox:
    """Rendezvous file for one Launcher/Holder pair."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._removed = False

    @classmethod
    def create(cls, directory: Path | None = None, prefix: str = "exflock.") -> "Mailbox":
        """Create a new, exclusively-owned, randomly-named mailbox.

        Raises:
            MailboxError: If the file cannot be created
        """
        try:
            fd, name = tempfile.mkstemp(
                prefix=prefix,
                suffix=MAILBOX_SUFFIX,
                dir=str(directory) if directory else None,
            )
        except OSError as e:
            raise MailboxError(f"Cannot create mailbox: {e}") from e
        os.close(fd)
        logger.debug("Created mailbox %s", name)
        return cls(Path(name))

    def _write(self, entry: MailboxEntry) -> None:
        # No O_CREAT: a vanished mailbox means its Launcher is gone
        try:
            fd = os.open(str(self.path), os.O_WRONLY | os.O_TRUNC)
        except OSError as e:
            raise MailboxError(f"Cannot open mailbox {self.path}: {e}") from e
        try:
            os.write(fd, entry.to_line().encode())
            os.fsync(fd)
        finally:
            os.close(fd)

    def read(self) -> MailboxEntry:
        """Read the current occupant.

        Raises:
            MailboxError: If the mailbox is missing or malformed
        """
        try:
            text = self.path.read_text()
        except OSError as e:
            raise MailboxError(f"Cannot read mailbox {self.path}: {e}") from e
        try:
            return MailboxEntry.parse(text)
        except ValueError as e:
            raise MailboxError(str(e)) from e

    def write_provisional(self, watchdog_pid: int) -> None:
        """Record the watchdog as the provisional occupant (Launcher side)."""
        self._write(MailboxEntry.provisional(watchdog_pid))

    def publish(self, holder_pid: int) -> int:
        """Replace the provisional occupant with the Holder's identity.

        Returns:
            PID of the watchdog that was displaced

        Raises:
            MailboxError: If the mailbox does not hold a provisional entry
        """
        current = self.read()
        if current.is_final:
            raise MailboxError(f"Mailbox {self.path} already published by {current.pid}")
        self._write(MailboxEntry.final(holder_pid))
        return current.pid

    def remove(self) -> None:
        """Delete the mailbox. Safe to call any number of times."""
        if self._removed:
            return
        self._removed = True
        with contextlib.suppress(FileNotFoundError):
            self.path.unlink()
        logger.debug("Removed mailbox %s", self.path)

    @property
    def removed(self) -> bool:
        return self._removed

    def __enter__(self) -> "Mailbox":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.remove()


def hand_off(mailbox: Mailbox, holder_pid: int) -> int:
    """Publish the Holder identity, then wake the Launcher.

    The final entry is flushed to disk before the watchdog is signalled,
    so the Launcher always observes it when it wakes.

    Returns:
        PID of the terminated watchdog
    """
    watchdog_pid = mailbox.publish(holder_pid)
    terminate(watchdog_pid)
    logger.debug("Published holder %d, signalled watchdog %d", holder_pid, watchdog_pid)
    return watchdog_pid
