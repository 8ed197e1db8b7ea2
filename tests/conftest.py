"""Shared test fixtures for exflock tests."""

import signal
import subprocess
from collections.abc import Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point EXFLOCK_CONFIG at a per-test path so user config never leaks in.

    The file is not created; tests that need one write it themselves.
    """
    config_path = tmp_path / "config" / "config.toml"
    monkeypatch.setenv("EXFLOCK_CONFIG", str(config_path))
    return config_path


@pytest.fixture
def lock_target(tmp_path: Path) -> Path:
    """Create an existing regular file to lock."""
    target = tmp_path / "target.lock"
    target.write_text("")
    return target


@pytest.fixture
def sleeper() -> Generator[subprocess.Popen[bytes], None, None]:
    """Start a throwaway child process that sleeps until killed."""
    proc = subprocess.Popen(["sleep", "60"])
    try:
        yield proc
    finally:
        if proc.poll() is None:
            proc.send_signal(signal.SIGKILL)
        proc.wait()
