"""Output formatting for exflock CLI.

Diagnostics go to the stderr console; results go to stdout so that
``pid=$(exflock acquire ...)`` captures nothing but the Holder identity.
"""

import json
import sys
from dataclasses import dataclass
from typing import Any

from rich.console import Console


@dataclass
class OutputContext:
    """Context for output formatting."""

    console: Console
    json_mode: bool = False

    def print(self, message: str, style: str | None = None) -> None:
        """Print message respecting output mode."""
        if not self.json_mode:
            self.console.print(message, style=style)

    def print_json(self, data: dict[str, Any], err: bool = False) -> None:
        """Print JSON data to stdout (or stderr when err is set)."""
        if self.json_mode:
            print(
                json.dumps(data, indent=2, default=str),
                file=sys.stderr if err else sys.stdout,
                flush=True,
            )

    def result(self, data: dict[str, Any], message: str) -> None:
        """Print result to stdout in appropriate format."""
        if self.json_mode:
            self.print_json(data)
        else:
            print(message, flush=True)

    def error(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Print error in appropriate format."""
        if self.json_mode and data:
            self.print_json({"error": message, **data}, err=True)
        elif self.json_mode:
            self.print_json({"error": message}, err=True)
        else:
            self.console.print(f"[red]Error: {message}[/red]")

    def success(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Print success message in appropriate format."""
        if self.json_mode and data:
            self.print_json({"success": message, **data})
        elif self.json_mode:
            self.print_json({"success": message})
        else:
            self.console.print(f"[green]{message}[/green]")


# Global output context (set by cli.py main callback)
_ctx: OutputContext | None = None


def get_output_context() -> OutputContext:
    """Get the current output context.

    Returns a default stderr OutputContext if not yet initialized by CLI.
    """
    if _ctx is None:
        return OutputContext(Console(stderr=True))
    return _ctx


def set_output_context(ctx: OutputContext) -> None:
    """Set the global output context. Called by CLI main callback."""
    global _ctx
    _ctx = ctx
