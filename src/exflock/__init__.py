"""exflock: detached advisory file locks that outlive the requesting command."""

__version__ = "0.1.0"
