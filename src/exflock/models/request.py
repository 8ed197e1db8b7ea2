"""Lock request model.

A LockRequest is built from caller input and validated before any
process is spawned.
"""

import re
import stat
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import MAX_LIFETIME
from ..errors import UsageError

_UNSIGNED_INT = re.compile(r"^[0-9]+$")


def parse_seconds(value: str, name: str) -> int:
    """Parse a non-negative integer duration given on the command line.

    Args:
        value: Raw argument text
        name: Argument name used in the error message

    Returns:
        Parsed number of seconds

    Raises:
        UsageError: If value is not a plain non-negative integer
    """
    if not _UNSIGNED_INT.match(value.strip()):
        raise UsageError(f"{name} must be a non-negative integer, got {value!r}")
    return int(value)


def is_lockable(path: Path) -> bool:
    """Check that path is an existing regular file, character device or FIFO."""
    try:
        mode = path.stat().st_mode
    except OSError:
        return False
    return stat.S_ISREG(mode) or stat.S_ISCHR(mode) or stat.S_ISFIFO(mode)


class LockRequest(BaseModel):
    """A request for a detached exclusive lock.

    Attributes:
        target: File to lock.
        wait_seconds: Maximum time to wait for the lock.
        lifetime_seconds: Maximum lifetime once held (0 = unbounded).
    """

    model_config = ConfigDict(frozen=True)

    target: Path = Field(description="File to lock")
    wait_seconds: int = Field(ge=0, description="Max wait for acquisition")
    lifetime_seconds: int = Field(
        ge=0, le=MAX_LIFETIME, description="Max lifetime once held, 0 = unbounded"
    )

    @field_validator("target")
    @classmethod
    def _target_must_be_lockable(cls, value: Path) -> Path:
        if not is_lockable(value):
            raise ValueError(f"not an existing regular file, device or fifo: {value}")
        return value

    @classmethod
    def from_args(cls, wait: str, target: str, lifetime: str) -> "LockRequest":
        """Build a request from raw CLI text.

        Raises:
            UsageError: If any argument is malformed or the target is missing
        """
        wait_seconds = parse_seconds(wait, "wait-seconds")
        lifetime_seconds = parse_seconds(lifetime, "max-lifetime-seconds")
        if lifetime_seconds > MAX_LIFETIME:
            raise UsageError(
                f"max-lifetime-seconds must be at most {MAX_LIFETIME}, got {lifetime!r}"
            )
        path = Path(target)
        if not is_lockable(path):
            raise UsageError(f"Not an existing regular file, device or fifo: {target}")
        return cls(target=path, wait_seconds=wait_seconds, lifetime_seconds=lifetime_seconds)

    @property
    def unbounded(self) -> bool:
        """True when the lock has no maximum lifetime."""
        return self.lifetime_seconds == 0
