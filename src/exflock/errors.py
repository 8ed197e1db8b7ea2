"""Exception hierarchy for exflock.

Each error carries the process exit code the CLI reports for it.
"""

from .constants import (
    EXIT_HOLDER_ROLE,
    EXIT_MAILBOX,
    EXIT_PLATFORM,
    EXIT_USAGE,
)


class ExflockError(Exception):
    """Base exception for exflock errors."""

    exit_code: int = EXIT_USAGE


class UsageError(ExflockError):
    """Raised when arguments are missing or malformed."""

    exit_code = EXIT_USAGE


class AcquisitionTimeout(ExflockError):
    """Raised when the lock could not be acquired within the wait bound."""

    exit_code = EXIT_USAGE


class MailboxError(ExflockError):
    """Raised when the rendezvous mailbox cannot be created or used."""

    exit_code = EXIT_MAILBOX


class PlatformError(ExflockError):
    """Raised when the platform lacks the lock primitive."""

    exit_code = EXIT_PLATFORM


class HolderArgumentError(ExflockError):
    """Raised when the Holder is invoked with a malformed argument."""

    def __init__(self, message: str, exit_code: int) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class RoleError(ExflockError):
    """Raised when ``hold`` runs outside the lock primitive's process chain."""

    exit_code = EXIT_HOLDER_ROLE
