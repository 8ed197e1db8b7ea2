"""Init command implementation."""

from typing import Annotated

import typer

from ..config import default_config_path, write_config_template
from ..output import get_output_context
from ._common import config_path_option


def init(
    ctx: typer.Context,
    force: Annotated[
        bool, typer.Option("--force", help="Overwrite an existing config file")
    ] = False,
) -> None:
    """Write a config template (to --config, $EXFLOCK_CONFIG or ~/.config/exflock)."""
    out = get_output_context()
    config_path = config_path_option(ctx) or default_config_path()

    if config_path.exists() and not force:
        out.print(f"[yellow]Config already exists:[/yellow] {config_path}")
        return

    try:
        write_config_template(config_path)
    except OSError as e:
        out.error(f"Cannot write config: {e}")
        raise typer.Exit(1) from None
    out.success(f"Created config template: {config_path}", {"path": str(config_path)})
