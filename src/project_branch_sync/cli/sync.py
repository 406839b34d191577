"""Sync commands for project branch sync."""

import json
from typing import Any

import typer
from rich.console import Console

from project_branch_sync.cli.common import (
    DryRunOption,
    HostOption,
    OutputFormat,
    OutputFormatOption,
    SourcesOption,
    parse_sources,
    run_async_command,
)
from project_branch_sync.config import get_settings
from project_branch_sync.platform_api import PlatformClient
from project_branch_sync.sources import SupportedSource
from project_branch_sync.sync import OrgSyncOrchestrator
from project_branch_sync.sync_logs import SyncLogWriter, resolve_logging_path

app = typer.Typer(help="Sync project branches with the provider's default branch")
console = Console()


@app.command("org")
def sync_org(
    org_id: str = typer.Argument(
        ...,
        help="Public id of the organization to sync",
    ),
    sources: SourcesOption = None,
    dry_run: DryRunOption = False,
    host: HostOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Sync every project of an organization to its default branch.

    Lists every target of each requested source, compares each project's
    branch with the repository's default branch and updates the ones that
    drifted. Updated and failed projects are appended to the log files
    under SNYK_LOG_PATH.

    Examples:
        branchsync sync org 0d5e5a9c-... --source github
        branchsync sync org 0d5e5a9c-... --dry-run
        branchsync sync org 0d5e5a9c-... --host github.example.com
        branchsync -v sync org 0d5e5a9c-... --format json  # Debug logging
    """
    source_list = parse_sources(sources) if sources else [SupportedSource.GITHUB.value]

    async def _sync() -> dict[str, Any]:
        settings = get_settings()
        log_dir = resolve_logging_path(settings)

        async with PlatformClient(settings=settings) as client:
            with SyncLogWriter(log_dir) as sync_logs:
                orchestrator = OrgSyncOrchestrator(client, sync_logs, settings=settings)
                try:
                    result = await orchestrator.update_org_targets(
                        org_id, source_list, dry_run=dry_run, host=host
                    )
                finally:
                    await orchestrator.close()
                return result.to_dict()

    # Show progress info
    if output_format == OutputFormat.TEXT:
        console.print(f"[dim]Syncing projects of org {org_id}...[/dim]")
        console.print(f"[dim]  Sources: {', '.join(source_list)}[/dim]")
        if host:
            console.print(f"[dim]  Host: {host}[/dim]")
        if dry_run:
            console.print("[dim]  Mode: dry-run (no project updates)[/dim]")
        console.print()

    result = run_async_command(_sync())

    # JSON output
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result))
        return

    _print_summary(result, dry_run=dry_run)


def _print_summary(result: dict[str, Any], *, dry_run: bool) -> None:
    """Print a human-readable summary of an org sync result."""
    prefix = "[dim](dry-run)[/dim] " if dry_run else ""
    projects = result.get("meta", {}).get("projects", {})
    updated = projects.get("updated", [])
    failed = projects.get("failed", [])

    console.print(f"{prefix}[bold]Sync Complete[/bold]")
    console.print()

    # Summary table
    console.print(f"  Processed targets: {result.get('processedTargets', 0)}")
    label = "Would update" if dry_run else "Updated"
    console.print(f"  [blue]{label}:[/blue]      {len(updated)}")
    if failed:
        console.print(f"  [red]Failed:[/red]            {len(failed)}")

    console.print()
    console.print(f"  Updated projects log: {result.get('fileName', '')}")
    console.print(f"  Failed projects log:  {result.get('failedFileName', '')}")

    # Show updated projects
    if updated:
        console.print()
        console.print("[bold]Updated projects:[/bold]")
        for update in updated:
            target = update.get("target", {}).get("attributes", {}).get("displayName", "?")
            console.print(
                f"  {target} {update.get('projectPublicId')}: "
                f"{update.get('from')} -> {update.get('to')}"
            )

    # Show failed projects if any
    if failed:
        console.print()
        console.print("[bold]Failed projects:[/bold]")
        for failure in failed:
            console.print(f"  {failure.get('errorMessage', 'Unknown error')}")
