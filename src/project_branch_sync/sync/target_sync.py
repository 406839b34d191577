"""Per-target project sync.

Lists a target's projects, fetches the provider's default branch once, and
runs the branch decision over every project. Listing and default branch
failures propagate to the caller: a target that cannot be read cannot be
synced at all.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from project_branch_sync.exceptions import UnsupportedSourceError
from project_branch_sync.logging import bind_target
from project_branch_sync.pacing import map_bounded

from .decision import BranchDecisionMaker
from .results import ProjectUpdate, ProjectUpdateFailure, TargetSyncResult

if TYPE_CHECKING:
    from project_branch_sync.platform_api import PlatformClient
    from project_branch_sync.schemas import Project, Target
    from project_branch_sync.sources import SourceHandler


class TargetProjectSynchronizer:
    """Syncs every project of one target to the target's default branch.

    Usage:
        synchronizer = TargetProjectSynchronizer(client, default_source_handlers())
        result = await synchronizer.sync_target(org_id, target, dry_run=True)
        print(len(result.updated), len(result.failed))
    """

    def __init__(
        self,
        client: PlatformClient,
        sources: Mapping[str, SourceHandler],
        *,
        project_concurrency: int = 1,
        decision_maker: BranchDecisionMaker | None = None,
    ) -> None:
        """Initialize the per-target synchronizer.

        Args:
            client: Platform API client (shared session)
            sources: Source handlers keyed by origin
            project_concurrency: Projects updated in parallel. 1 keeps the
                                 records in project listing order.
            decision_maker: Optional decision maker (defaults to one on client)
        """
        self._client = client
        self._sources = sources
        self._project_concurrency = project_concurrency
        self._decision_maker = decision_maker or BranchDecisionMaker(client)

    def source_for(self, target: Target) -> SourceHandler:
        """Get the handler for a target's origin.

        Raises:
            UnsupportedSourceError: If the origin has no handler
        """
        handler = self._sources.get(target.origin)
        if handler is None:
            raise UnsupportedSourceError(target.origin)
        return handler

    async def sync_target(
        self,
        org_id: str,
        target: Target,
        *,
        dry_run: bool = False,
        host: str | None = None,
    ) -> TargetSyncResult:
        """Sync the branch of every project under a target.

        Flow:
            1. List the target's projects
            2. Fetch the provider's default branch (once per target)
            3. Decide/update each project, failures becoming records

        Args:
            org_id: Public organization id
            target: Target to sync
            dry_run: If True, report changes without applying them
            host: Alternate source-control host (e.g. GitHub Enterprise)

        Returns:
            TargetSyncResult with the target attached to every record

        Raises:
            Exception: Anything raised while listing projects or fetching the
                       default branch.
        """
        log = bind_target(org_id, target.display_name)

        page = await self._client.list_projects(org_id, target_id=target.id)
        default_branch = await self.source_for(target).get_default_branch(target, host=host)

        log.debug(
            "Target has {} projects, default branch is {}",
            len(page.projects),
            default_branch,
        )

        async def decide(project: Project) -> ProjectUpdate | ProjectUpdateFailure | None:
            return await self._decision_maker.decide(
                org_id, project, default_branch, dry_run=dry_run, target=target
            )

        batch = await map_bounded(
            page.projects,
            decide,
            concurrency=self._project_concurrency,
            item_name=lambda p: p.id,
        )
        # decide() converts update failures to records; anything else is a bug
        batch.raise_first_failure()

        result = TargetSyncResult()
        for outcome in batch.succeeded:
            if isinstance(outcome, ProjectUpdateFailure):
                result.failed.append(outcome)
            elif isinstance(outcome, ProjectUpdate):
                result.updated.append(outcome)

        log.info(
            "Synced target: {} updated, {} failed, {} unchanged",
            len(result.updated),
            len(result.failed),
            len(page.projects) - len(result.updated) - len(result.failed),
        )
        return result
