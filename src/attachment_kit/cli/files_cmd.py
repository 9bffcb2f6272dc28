"""File CLI commands operating on serialized attachment data.

``DATA`` is the JSON written to a record column, e.g.
``{"id": "ab12.pdf", "storage": "store", "metadata": {...}}``; pass ``-``
to read it from stdin.
"""

import json
import sys

import typer
from loguru import logger

from attachment_kit.lib.attachments import Attacher, AttachmentError
from attachment_kit.lib.storage import get_storages


def _read_data(data: str) -> str:
    if data == "-":
        return sys.stdin.read()
    return data


def _load_attacher(data: str) -> Attacher:
    """Build an attacher holding the file described by ``data``.

    Raises:
        typer.Exit: If the data is malformed or names an unknown storage.
    """
    attacher = Attacher(get_storages())
    try:
        attacher.load_data(_read_data(data).strip())
    except (ValueError, KeyError) as exc:
        typer.echo(f"Error: invalid file data: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    return attacher


def copy_command(
    data: str = typer.Argument(..., help="Serialized file data JSON, or '-' for stdin"),
    pretty: bool = typer.Option(False, "--pretty", help="Indent the JSON output"),
) -> None:
    """Copy a file into a new location on the same tier and print its data."""
    source = _load_attacher(data)
    if source.current is None:
        typer.echo("Error: no file to copy", err=True)
        raise typer.Exit(code=1)

    destination = Attacher(source.storages)
    try:
        result = destination.copy(source)
    except AttachmentError as exc:
        logger.error("Copy failed: {}", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(json.dumps(result.current.to_dict(), indent=2 if pretty else None))


def promote_command(
    data: str = typer.Argument(..., help="Serialized cached file data JSON, or '-' for stdin"),
    pretty: bool = typer.Option(False, "--pretty", help="Indent the JSON output"),
) -> None:
    """Upload a cached file into permanent storage and print its data."""
    attacher = _load_attacher(data)
    if not attacher.cached:
        typer.echo("Error: file is not in the cache storage", err=True)
        raise typer.Exit(code=1)

    try:
        stored = attacher.promote()
    except AttachmentError as exc:
        logger.error("Promote failed: {}", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(json.dumps(stored.to_dict(), indent=2 if pretty else None))
