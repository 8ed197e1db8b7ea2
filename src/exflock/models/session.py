"""Lock session model tracking a Holder's lifecycle."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class HolderState(str, Enum):
    """Holder lifecycle states, in order. There is no transition back."""

    STARTING = "starting"
    PUBLISHING = "publishing"
    HOLDING = "holding"
    RELEASING = "releasing"
    TERMINATED = "terminated"


_ORDER = list(HolderState)


class ReleaseReason(str, Enum):
    """Why a Holder left the HOLDING state."""

    REQUESTER_EXITED = "requester_exited"
    LIFETIME_EXPIRED = "lifetime_expired"
    SIGNALLED = "signalled"


class LockSession(BaseModel):
    """The logical detached lock owned by one Holder process.

    Attributes:
        holder_pid: Process ID of the Holder.
        requester_pid: Launcher identity the Holder was started for.
        watched_pid: Process whose death releases the lock.
        lifetime_seconds: Maximum lifetime (0 = unbounded).
        acquired_at: When the Holder started under the lock.
        state: Current lifecycle state.
        published: Whether the final identity reached the mailbox.
        release_reason: Set once the session leaves HOLDING.
    """

    holder_pid: int = Field(description="Process ID of the Holder")
    requester_pid: int = Field(description="Launcher process ID")
    watched_pid: int = Field(description="Process whose exit releases the lock")
    lifetime_seconds: int = Field(ge=0)
    acquired_at: datetime = Field(default_factory=datetime.now)
    state: HolderState = HolderState.STARTING
    published: bool = False
    release_reason: ReleaseReason | None = None

    def advance(self, state: HolderState) -> None:
        """Move forward to state.

        Raises:
            ValueError: If state would move the session backwards
        """
        if _ORDER.index(state) < _ORDER.index(self.state):
            raise ValueError(f"Cannot move from {self.state.value} to {state.value}")
        self.state = state

    @property
    def holds_lock(self) -> bool:
        return self.state is HolderState.HOLDING
