"""Tests for role detection."""

from unittest import mock

from exflock.core.role import Role, detect_role


def fake_proc(pid: int, name: str) -> mock.Mock:
    proc = mock.Mock(pid=pid)
    proc.name.return_value = name
    return proc


def patch_chain(*procs: mock.Mock):
    return mock.patch("exflock.core.role.parent_chain", return_value=list(procs))


class TestDetectRole:
    """Tests for detect_role."""

    def test_holder_when_chain_matches(self) -> None:
        with patch_chain(fake_proc(200, "flock"), fake_proc(100, "python3")):
            assert detect_role(100, "flock") is Role.HOLDER

    def test_launcher_without_requester(self) -> None:
        with patch_chain(fake_proc(200, "flock"), fake_proc(100, "python3")):
            assert detect_role(None, "flock") is Role.LAUNCHER

    def test_launcher_when_parent_is_not_primitive(self) -> None:
        with patch_chain(fake_proc(200, "bash"), fake_proc(100, "python3")):
            assert detect_role(100, "flock") is Role.LAUNCHER

    def test_launcher_when_grandparent_differs(self) -> None:
        with patch_chain(fake_proc(200, "flock"), fake_proc(101, "python3")):
            assert detect_role(100, "flock") is Role.LAUNCHER

    def test_launcher_when_chain_is_short(self) -> None:
        with patch_chain(fake_proc(1, "init")):
            assert detect_role(100, "flock") is Role.LAUNCHER

    def test_launcher_when_parent_name_unreadable(self) -> None:
        with (
            patch_chain(fake_proc(200, "flock"), fake_proc(100, "python3")),
            mock.patch("exflock.core.role.process_name", return_value=None),
        ):
            assert detect_role(100, "flock") is Role.LAUNCHER

    def test_custom_primitive_name(self) -> None:
        with patch_chain(fake_proc(200, "myflock"), fake_proc(100, "python3")):
            assert detect_role(100, "myflock") is Role.HOLDER


def test_real_process_is_launcher() -> None:
    """The test runner itself is never mistaken for a Holder."""
    import os

    assert detect_role(os.getpid(), "flock") is Role.LAUNCHER
