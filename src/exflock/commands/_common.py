"""Helpers shared by command implementations."""

import logging
import math
import tomllib
from pathlib import Path

import typer
from pydantic import ValidationError

from ..config import ExflockConfig, load_config
from ..errors import ExflockError, UsageError
from ..output import get_output_context

logger = logging.getLogger(__name__)


def config_path_option(ctx: typer.Context) -> Path | None:
    """Get the --config path given to the main callback, if any."""
    return (ctx.obj or {}).get("config_path")


def verbosity_option(ctx: typer.Context) -> int:
    """Get the -v count given to the main callback."""
    return (ctx.obj or {}).get("verbosity", 0)


def load_cli_config(ctx: typer.Context) -> ExflockConfig:
    """Load configuration for a command.

    Raises:
        UsageError: If the config file is not valid TOML or fails validation
    """
    path = config_path_option(ctx)
    try:
        return load_config(path)
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        raise UsageError(f"Invalid config: {e}") from e


def parse_pid(value: str, name: str) -> int:
    """Parse a positive process ID given on the command line."""
    text = value.strip()
    if not (text.isascii() and text.isdigit()) or int(text) <= 0:
        raise UsageError(f"{name} must be a positive process ID, got {value!r}")
    return int(text)


def parse_interval(value: str, name: str) -> float:
    """Parse a positive number of seconds given on the command line."""
    try:
        seconds = float(value)
    except ValueError:
        raise UsageError(f"{name} must be a number of seconds, got {value!r}") from None
    if not (0 < seconds < math.inf):
        raise UsageError(f"{name} must be a finite number above zero, got {value!r}")
    return seconds


def fail(error: ExflockError) -> typer.Exit:
    """Report error and build the matching typer.Exit."""
    get_output_context().error(str(error))
    logger.debug("Exiting with %d: %s", error.exit_code, type(error).__name__)
    return typer.Exit(error.exit_code)
