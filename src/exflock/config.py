"""Configuration management for exflock."""

import os
import tomllib
from pathlib import Path
from typing import Annotated

import tomli_w
from pydantic import BaseModel, BeforeValidator, Field

from .constants import DEFAULT_LIFETIME, DEFAULT_POLL_INTERVAL, MAX_LIFETIME, WATCHDOG_GRACE

CONFIG_ENV_VAR = "EXFLOCK_CONFIG"
CONFIG_FILENAME = "config.toml"


def _empty_to_none(value: object) -> object:
    # TOML has no null, so templates use "" for "unset"
    if value == "":
        return None
    return value


OptionalPath = Annotated[Path | None, BeforeValidator(_empty_to_none)]


class LockConfig(BaseModel):
    """Configuration for the platform lock primitive."""

    exec: str = "flock"  # Lock primitive executable
    default_lifetime: int = Field(default=DEFAULT_LIFETIME, ge=0, le=MAX_LIFETIME)  # 0 = unbounded


class HolderConfig(BaseModel):
    """Configuration for the background Holder process."""

    poll_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL,
        gt=0,
        description="Seconds between requester liveness checks",
    )
    log_file: OptionalPath = Field(default=None, description="Holder stderr destination")


class MailboxConfig(BaseModel):
    """Configuration for the rendezvous mailbox."""

    dir: OptionalPath = None  # None = system temp dir
    prefix: str = "exflock."


class WatchdogConfig(BaseModel):
    """Configuration for the provisional watchdog process."""

    exec: str = "sleep"
    grace: int = Field(default=WATCHDOG_GRACE, ge=1)


class ExflockConfig(BaseModel):
    """Root configuration for exflock."""

    lock: LockConfig = Field(default_factory=LockConfig)
    holder: HolderConfig = Field(default_factory=HolderConfig)
    mailbox: MailboxConfig = Field(default_factory=MailboxConfig)
    watchdog: WatchdogConfig = Field(default_factory=WatchdogConfig)


def default_config_path() -> Path:
    """Get the config path used when none is given explicitly.

    Honors $EXFLOCK_CONFIG, then $XDG_CONFIG_HOME, then ~/.config.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".config"
    return base / "exflock" / CONFIG_FILENAME


def load_config(config_path: Path | None = None) -> ExflockConfig:
    """Load config from a TOML file.

    Args:
        config_path: Explicit config file, or None to use the default location

    Returns:
        Loaded configuration, or defaults if the file doesn't exist
    """
    path = config_path or default_config_path()
    if not path.exists():
        return ExflockConfig()
    with open(path, "rb") as f:
        data = tomllib.load(f)
    return ExflockConfig.model_validate(data)


def write_config_template(config_path: Path) -> Path:
    """Write default config.toml template.

    Args:
        config_path: Destination file; parent directories are created

    Returns:
        Path to the written config file
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)
    template = {
        "lock": {"exec": "flock", "default_lifetime": DEFAULT_LIFETIME},
        "holder": {"poll_interval": DEFAULT_POLL_INTERVAL, "log_file": ""},
        # Empty dir means the system temp directory
        "mailbox": {"dir": "", "prefix": "exflock."},
        "watchdog": {"exec": "sleep", "grace": WATCHDOG_GRACE},
    }
    with open(config_path, "wb") as f:
        tomli_w.dump(template, f)
    return config_path
