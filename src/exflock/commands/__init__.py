"""CLI command implementations for exflock.

This package contains the implementation of each CLI command,
separated from the CLI framework setup in cli.py.
"""

from .acquire import acquire
from .hold import hold
from .init import init
from .release import release, status

__all__ = [
    "acquire",
    "hold",
    "init",
    "release",
    "status",
]
