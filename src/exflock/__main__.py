"""Allow ``python -m exflock``; the Launcher re-invokes the Holder this way."""

from .cli import run

if __name__ == "__main__":
    run()
