"""Common CLI option factories and helpers.

This module centralizes reusable CLI options to reduce duplication
and consolidate noqa comments for Typer's required function call pattern.

It also provides:
- `run_async_command`: Unified async execution with error handling for CLI commands
- `parse_sources`: Comma-separated source list handling
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from enum import Enum
from typing import Annotated, TypeVar

import typer
from rich.console import Console

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")


class OutputFormat(str, Enum):
    """How a command reports its result."""

    TEXT = "text"
    JSON = "json"


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from synchronous CLI command with unified error handling.

    Uses asyncio.run() for clean event loop management. Catches exceptions,
    prints user-friendly error messages, and exits with code 1.

    Args:
        coro: Async coroutine to execute
        error_prefix: Prefix for error messages (default: "Error")

    Returns:
        Result from the coroutine

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1 on error

    Example:
        async def _sync() -> dict[str, Any]:
            async with PlatformClient() as client:
                ...

        result = run_async_command(_sync(), error_prefix="Sync failed")
    """
    try:
        return asyncio.run(coro)
    except typer.Exit:
        # Re-raise deliberate exits (e.g., from validation helpers)
        raise
    except Exception as e:
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None


def parse_sources(sources: list[str]) -> list[str]:
    """Flatten repeated and comma-separated --source values.

    Example:
        ["github", "gitlab,bitbucket"] -> ["github", "gitlab", "bitbucket"]
    """
    return [s.strip().lower() for value in sources for s in value.split(",") if s.strip()]


# Typer requires function calls as default arguments, which triggers B008.
# Using Annotated with a centralized type alias keeps the noqa in one place.

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
    ),
]
"""Output format option type for CLI commands.

Usage:
    def command(output_format: OutputFormatOption = OutputFormat.TEXT):
"""

DryRunOption = Annotated[
    bool,
    typer.Option(
        "--dry-run",
        help="Don't update any project, just show what would change",
    ),
]
"""Dry-run option type for CLI commands.

Usage:
    def command(dry_run: DryRunOption = False):
"""

SourcesOption = Annotated[
    list[str] | None,
    typer.Option(
        "--source",
        "-s",
        help="Source to sync (repeatable or comma-separated).",
    ),
]
"""Requested sources option.

Usage:
    def sync_org(sources: SourcesOption = None) -> None:
"""

HostOption = Annotated[
    str | None,
    typer.Option(
        "--host",
        help="Alternate source-control host (e.g. a GitHub Enterprise hostname).",
    ),
]
"""Source-control host override option.

Usage:
    def sync_org(host: HostOption = None) -> None:
"""
