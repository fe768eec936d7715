"""``vlmrun-actions`` command line interface."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import click

from .actions import check_credentials, run_operation
from .client import VLMRunClient
from .exceptions import VLMRunError
from .infra.logging import configure_logging
from .infra.settings import AuthData, settings
from .models import ActionInputs
from .operations import Operation


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def _run(coro: Any) -> Any:
    try:
        return asyncio.run(coro)
    except VLMRunError as exc:
        raise click.ClickException(str(exc)) from exc


def _credentials() -> AuthData:
    try:
        return AuthData.from_settings(settings)
    except VLMRunError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
def cli(verbose: bool) -> None:
    """Run VLM Run document, image, audio and agent operations."""
    if verbose:
        configure_logging("DEBUG", json_format=settings.log_json)
    else:
        configure_logging(settings.log_level, json_format=settings.log_json)


@cli.command()
@click.argument("operation", type=click.Choice([op.value for op in Operation]))
@click.option("--file", "file_url", help="URL of the file to process.")
@click.option("--url", help="Page URL for agent operations.")
@click.option("--model", default=settings.default_model, show_default=True)
@click.option("--mode", default=settings.default_mode, show_default=True, type=click.Choice(["fast", "accurate"]))
def run(operation: str, file_url: str | None, url: str | None, model: str, mode: str) -> None:
    """Run OPERATION and print its JSON result."""
    inputs = ActionInputs(operation=operation, model=model, mode=mode, file=file_url, url=url)
    _echo_json(_run(run_operation(operation, inputs, auth=_credentials())))


@cli.group()
def files() -> None:
    """Inspect and populate the remote file registry."""


@files.command("list")
@click.option("--skip", default=0, show_default=True)
@click.option("--limit", default=10, show_default=True)
def list_files(skip: int, limit: int) -> None:
    """List registered files."""

    async def _list() -> Any:
        async with VLMRunClient(_credentials()) as client:
            return await client.list_files(skip=skip, limit=limit)

    _echo_json(_run(_list()))


@files.command("upload")
@click.argument("source_url")
def upload(source_url: str) -> None:
    """Stream SOURCE_URL into the file registry."""
    inputs = ActionInputs(operation=Operation.FILE_UPLOAD.value, file=source_url)
    _echo_json(_run(run_operation(Operation.FILE_UPLOAD, inputs, auth=_credentials())))


@cli.command()
def verify() -> None:
    """Check the configured API key."""
    _run(check_credentials(_credentials()))
    click.echo("Credentials OK")


def main() -> None:
    cli()
