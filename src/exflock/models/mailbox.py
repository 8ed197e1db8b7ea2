"""Mailbox entry model for the launcher/holder handshake.

The mailbox holds exactly one tagged identity at a time, serialised as a
single ``<tag>:<pid>`` line.
"""

from enum import Enum

from pydantic import BaseModel, Field


class EntryTag(str, Enum):
    """Distinguishes the watchdog placeholder from the Holder identity."""

    PROVISIONAL = "provisional"
    FINAL = "final"


class MailboxEntry(BaseModel):
    """A single tagged process identity stored in the mailbox.

    Attributes:
        tag: PROVISIONAL for the watchdog, FINAL for the Holder.
        pid: Process identity of the occupant.
    """

    tag: EntryTag
    pid: int = Field(gt=0)

    @classmethod
    def provisional(cls, pid: int) -> "MailboxEntry":
        return cls(tag=EntryTag.PROVISIONAL, pid=pid)

    @classmethod
    def final(cls, pid: int) -> "MailboxEntry":
        return cls(tag=EntryTag.FINAL, pid=pid)

    @property
    def is_final(self) -> bool:
        return self.tag is EntryTag.FINAL

    def to_line(self) -> str:
        return f"{self.tag.value}:{self.pid}\n"

    @classmethod
    def parse(cls, text: str) -> "MailboxEntry":
        """Parse a mailbox line.

        Raises:
            ValueError: If the text is not a ``<tag>:<pid>`` line
        """
        tag, sep, pid = text.strip().partition(":")
        if not sep or not (pid.isascii() and pid.isdigit()):
            raise ValueError(f"Malformed mailbox entry: {text!r}")
        return cls(tag=EntryTag(tag), pid=int(pid))
