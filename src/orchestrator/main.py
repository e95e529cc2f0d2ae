"""Command-line entry point - lock files on the remote lock service."""

import asyncio
import sys
from typing import List, NoReturn, Optional

import click
import structlog
import typer
from pydantic import ValidationError

from src.coordination.paths import PathResolver, ResolutionError
from src.lock_api.endpoint import EndpointError
from src.repository.context import RepositoryContext, RepositoryError

from .config import Settings, configure_logging
from .lock_orchestrator import EXIT_LOCAL_ERROR, EXIT_OK, LockOrchestrator
from .output import renderer_for

logger = structlog.get_logger()

USAGE = "Usage: git lfs lock <path>..."

app = typer.Typer(
    help="Lock files so collaborators cannot edit them concurrently.",
    add_completion=False,
)


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=EXIT_LOCAL_ERROR)


@app.command()
def lock(
    paths: Optional[List[str]] = typer.Argument(
        None,
        help="Files to lock, relative to the current directory.",
        show_default=False,
    ),
    remote: Optional[str] = typer.Option(
        None,
        "--remote",
        "-r",
        help="specify which remote to use when interacting with locks",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="print output in json",
    ),
):
    """Lock one or more files on the remote lock service."""
    if not paths:
        typer.echo(USAGE)
        raise typer.Exit(code=EXIT_OK)

    try:
        settings = Settings().with_remote(remote)
    except ValidationError as e:
        _fail(f"Invalid configuration: {e}")

    configure_logging(settings.log_level)

    repository = RepositoryContext()
    resolver = PathResolver(repository)

    # All paths must resolve before anything is sent to the lock service
    try:
        canonical = resolver.resolve_all(paths)
    except ResolutionError as e:
        logger.debug("Path rejected", path=e.path, error=str(e))
        _fail(str(e))

    orchestrator = LockOrchestrator(settings, repository, renderer_for(json_output))

    try:
        exit_code = asyncio.run(orchestrator.run(canonical))
    except (RepositoryError, EndpointError) as e:
        _fail(f"Lock failed: {e}")

    raise typer.Exit(code=exit_code)


def cli():
    """CLI entry point.

    Usage errors exit with EXIT_LOCAL_ERROR so that exit 2 only ever means a
    lock batch failed.
    """
    try:
        exit_code = app(standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(EXIT_LOCAL_ERROR)
    except click.Abort:
        typer.echo("Aborted!", err=True)
        sys.exit(EXIT_LOCAL_ERROR)
    sys.exit(exit_code or EXIT_OK)


if __name__ == "__main__":
    cli()
