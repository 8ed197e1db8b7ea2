"""Tests for output formatting and logging setup."""

import io
import json
import logging
import os

from rich.console import Console

from exflock.logging import configure_logging
from exflock.output import OutputContext, get_output_context, set_output_context


def _ctx(json_mode: bool = False) -> tuple[OutputContext, io.StringIO]:
    stream = io.StringIO()
    return OutputContext(Console(file=stream, force_terminal=False), json_mode=json_mode), stream


class TestResult:
    """Results belong on stdout, diagnostics on the console."""

    def test_plain_result_goes_to_stdout_only(self, capsys) -> None:
        ctx, console_out = _ctx()
        ctx.result({"pid": 42}, "42")
        assert capsys.readouterr().out == "42\n"
        assert console_out.getvalue() == ""

    def test_json_result(self, capsys) -> None:
        ctx, _ = _ctx(json_mode=True)
        ctx.result({"pid": 42, "file": "/tmp/x"}, "42")
        data = json.loads(capsys.readouterr().out)
        assert data == {"pid": 42, "file": "/tmp/x"}


class TestMessages:
    def test_print_suppressed_in_json_mode(self) -> None:
        ctx, stream = _ctx(json_mode=True)
        ctx.print("hello")
        assert stream.getvalue() == ""

    def test_error_in_normal_mode_uses_console(self, capsys) -> None:
        ctx, stream = _ctx()
        ctx.error("Could not acquire lock")
        assert "Error: Could not acquire lock" in stream.getvalue()
        assert capsys.readouterr().out == ""

    def test_error_in_json_mode_goes_to_stderr(self, capsys) -> None:
        ctx, _ = _ctx(json_mode=True)
        ctx.error("Timed out", {"exit_code": 1})
        captured = capsys.readouterr()
        assert captured.out == ""
        assert json.loads(captured.err) == {"error": "Timed out", "exit_code": 1}

    def test_success_hides_data_in_normal_mode(self) -> None:
        ctx, stream = _ctx()
        ctx.success("Released", {"pid": 7})
        assert "Released" in stream.getvalue()
        assert "pid" not in stream.getvalue()


def test_default_output_context_when_unset() -> None:
    set_output_context(None)  # type: ignore[arg-type]
    ctx = get_output_context()
    assert ctx.json_mode is False


class TestConfigureLogging:
    def test_default_level_is_info(self) -> None:
        configure_logging(stream=io.StringIO())
        assert logging.getLogger().level == logging.INFO

    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbosity=1, stream=io.StringIO())
        assert logging.getLogger().level == logging.DEBUG

    def test_quiet_wins_over_verbose(self) -> None:
        configure_logging(verbosity=2, quiet=True, stream=io.StringIO())
        assert logging.getLogger().level == logging.WARNING

    def test_logs_reach_given_stream(self) -> None:
        stream = io.StringIO()
        configure_logging(no_color=True, stream=stream)
        logging.getLogger("exflock.test").warning("Timed out waiting for lock")
        assert "Timed out waiting for lock" in stream.getvalue()

    def test_debug_flag_enables_debug(self) -> None:
        configure_logging(debug=True, stream=io.StringIO())
        assert logging.getLogger().level == logging.DEBUG

    def test_quiet_wins_over_debug(self) -> None:
        configure_logging(debug=True, quiet=True, stream=io.StringIO())
        assert logging.getLogger().level == logging.WARNING

    def test_holder_records_tagged_with_pid(self) -> None:
        stream = io.StringIO()
        configure_logging(no_color=True, stream=stream, holder=True)
        logging.getLogger("exflock.test").info("Holding lock as %d", os.getpid())
        line = stream.getvalue().strip()
        assert f"[holder {os.getpid()}] Holding lock" in line
        assert "\n" not in line
