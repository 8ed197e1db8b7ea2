"""Pydantic data models for exflock.

This package defines the data structures shared by the Launcher and Holder:
- Lock requests built from caller input (LockRequest)
- Tagged mailbox entries for the handshake (MailboxEntry, EntryTag)
- Holder lifecycle tracking (LockSession, HolderState, ReleaseReason)

Example:
    >>> from exflock.models import MailboxEntry
    >>> MailboxEntry.provisional(4242).to_line()
    'provisional:4242\\n'
"""

from .mailbox import EntryTag, MailboxEntry
from .request import LockRequest, is_lockable, parse_seconds
from .session import HolderState, LockSession, ReleaseReason

__all__ = [
    "EntryTag",
    "HolderState",
    "LockRequest",
    "LockSession",
    "MailboxEntry",
    "ReleaseReason",
    "is_lockable",
    "parse_seconds",
]
