"""Tests for exflock data models."""

import os
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from exflock.errors import UsageError
from exflock.models import (
    EntryTag,
    HolderState,
    LockRequest,
    LockSession,
    MailboxEntry,
    ReleaseReason,
    is_lockable,
    parse_seconds,
)


class TestParseSeconds:
    """Tests for parse_seconds."""

    @given(st.integers(min_value=0, max_value=10**9))
    @settings(max_examples=100)
    def test_accepts_non_negative_integers(self, n: int) -> None:
        assert parse_seconds(str(n), "wait") == n

    @given(st.integers(max_value=-1))
    @settings(max_examples=50)
    def test_rejects_negative_integers(self, n: int) -> None:
        with pytest.raises(UsageError, match="non-negative integer"):
            parse_seconds(str(n), "wait")

    @pytest.mark.parametrize("value", ["", "abc", "1.5", "+3", "1e3", "0x10", " "])
    def test_rejects_malformed(self, value: str) -> None:
        with pytest.raises(UsageError):
            parse_seconds(value, "wait")

    def test_error_names_argument(self) -> None:
        with pytest.raises(UsageError, match="max-lifetime-seconds"):
            parse_seconds("x", "max-lifetime-seconds")


class TestLockRequest:
    """Tests for LockRequest."""

    def test_from_args(self, lock_target: Path) -> None:
        request = LockRequest.from_args("5", str(lock_target), "0")
        assert request.target == lock_target
        assert request.wait_seconds == 5
        assert request.lifetime_seconds == 0
        assert request.unbounded is True

    def test_bounded_lifetime(self, lock_target: Path) -> None:
        request = LockRequest.from_args("0", str(lock_target), "45")
        assert request.unbounded is False

    def test_missing_target_is_usage_error(self, tmp_path: Path) -> None:
        with pytest.raises(UsageError, match="Not an existing"):
            LockRequest.from_args("5", str(tmp_path / "missing"), "0")

    def test_directory_is_usage_error(self, tmp_path: Path) -> None:
        with pytest.raises(UsageError):
            LockRequest.from_args("5", str(tmp_path), "0")

    def test_bad_wait_checked_before_target(self, tmp_path: Path) -> None:
        with pytest.raises(UsageError, match="wait-seconds"):
            LockRequest.from_args("-1", str(tmp_path / "missing"), "0")

    def test_is_frozen(self, lock_target: Path) -> None:
        request = LockRequest.from_args("5", str(lock_target), "0")
        with pytest.raises(ValidationError):
            request.wait_seconds = 10  # type: ignore[misc]

    def test_direct_construction_validates_target(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError):
            LockRequest(target=tmp_path / "missing", wait_seconds=1, lifetime_seconds=0)

    def test_direct_construction_rejects_negative(self, lock_target: Path) -> None:
        with pytest.raises(ValidationError):
            LockRequest(target=lock_target, wait_seconds=-1, lifetime_seconds=0)

    def test_largest_alarm_lifetime_accepted(self, lock_target: Path) -> None:
        request = LockRequest.from_args("0", str(lock_target), str(2**31 - 1))
        assert request.lifetime_seconds == 2**31 - 1

    def test_lifetime_beyond_alarm_range_is_usage_error(self, lock_target: Path) -> None:
        with pytest.raises(UsageError, match="at most 2147483647"):
            LockRequest.from_args("0", str(lock_target), str(2**31))

    def test_direct_construction_rejects_huge_lifetime(self, lock_target: Path) -> None:
        with pytest.raises(ValidationError):
            LockRequest(target=lock_target, wait_seconds=0, lifetime_seconds=2**31)


def test_is_lockable_accepts_fifo(tmp_path: Path) -> None:
    fifo = tmp_path / "fifo"
    os.mkfifo(fifo)
    assert is_lockable(fifo) is True


def test_is_lockable_accepts_char_device() -> None:
    assert is_lockable(Path("/dev/null")) is True


class TestMailboxEntry:
    """Tests for MailboxEntry."""

    def test_provisional_line(self) -> None:
        assert MailboxEntry.provisional(42).to_line() == "provisional:42\n"

    def test_final_line(self) -> None:
        entry = MailboxEntry.final(7)
        assert entry.to_line() == "final:7\n"
        assert entry.is_final is True

    def test_parse(self) -> None:
        entry = MailboxEntry.parse("final:123\n")
        assert entry.tag is EntryTag.FINAL
        assert entry.pid == 123

    @pytest.mark.parametrize(
        "text",
        ["", "123", "final:", "final:abc", "other:12", "provisional:0", "provisional:-3"],
    )
    def test_parse_rejects_malformed(self, text: str) -> None:
        with pytest.raises(ValueError):
            MailboxEntry.parse(text)


class TestLockSession:
    """Tests for LockSession lifecycle."""

    def make_session(self) -> LockSession:
        return LockSession(holder_pid=3, requester_pid=2, watched_pid=1, lifetime_seconds=0)

    def test_starts_in_starting(self) -> None:
        session = self.make_session()
        assert session.state is HolderState.STARTING
        assert session.holds_lock is False
        assert session.published is False

    def test_advances_forward(self) -> None:
        session = self.make_session()
        for state in list(HolderState)[1:]:
            session.advance(state)
            assert session.state is state

    def test_only_holding_holds_lock(self) -> None:
        session = self.make_session()
        session.advance(HolderState.HOLDING)
        assert session.holds_lock is True
        session.advance(HolderState.RELEASING)
        assert session.holds_lock is False

    def test_cannot_move_backwards(self) -> None:
        session = self.make_session()
        session.advance(HolderState.RELEASING)
        with pytest.raises(ValueError, match="Cannot move"):
            session.advance(HolderState.HOLDING)

    def test_release_reason_values(self) -> None:
        assert ReleaseReason.LIFETIME_EXPIRED.value == "lifetime_expired"
