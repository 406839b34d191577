"""Main CLI application for project branch sync."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from project_branch_sync import __version__
from project_branch_sync.cli import sync as sync_cmd
from project_branch_sync.config import get_settings
from project_branch_sync.logging import setup_logging

app = typer.Typer(
    name="branchsync",
    help="Keep platform projects tracking their repository's default branch.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"branchsync version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (WARNING level).",
        ),
    ] = False,
) -> None:
    """Project branch sync - align tracked projects with default branches."""
    settings = get_settings()
    log_config = settings.logging

    # Setup logging with CLI overrides
    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=Path(log_config.log_file) if log_config.log_file else None,
        rotation=log_config.rotation,
        retention=log_config.retention,
        serialize=log_config.serialize,
    )


# Register subcommands
app.add_typer(sync_cmd.app, name="sync")


if __name__ == "__main__":
    app()
