"""Typer CLI root application."""

import typer

from attachment_kit.core.config import get_settings
from attachment_kit.core.logging import setup_logging

app = typer.Typer(name="attachment-kit", help="Attachment storage maintenance CLI")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir, json_logs=settings.log_json)


def _register_subcommands() -> None:
    """Register all CLI commands."""
    from attachment_kit.cli.files_cmd import copy_command, promote_command

    app.command("copy")(copy_command)
    app.command("promote")(promote_command)


_register_subcommands()
