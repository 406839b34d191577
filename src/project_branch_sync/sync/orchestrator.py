"""Organization sync orchestrator - sync every supported source of an org.

Validates the requested sources, gates the organization on the custom
branch feature, lists targets per source and delegates each source's
targets to the TargetBatchSynchronizer.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from project_branch_sync.config import Settings, get_settings
from project_branch_sync.exceptions import (
    CustomBranchEnabledError,
    OrgNotFoundError,
    UnsupportedSourceError,
    UnsupportedSourcesError,
)
from project_branch_sync.logging import LogContext, bind_org, get_logger
from project_branch_sync.pacing import map_bounded
from project_branch_sync.schemas import TargetFilters
from project_branch_sync.sources import default_source_handlers, supported_sources
from project_branch_sync.sync_logs import (
    FAILED_UPDATE_PROJECTS_LOG_NAME,
    UPDATED_PROJECTS_LOG_NAME,
    resolve_logging_path,
)

from .batch_sync import TargetBatchSynchronizer
from .results import OrgSyncResult, SyncResult
from .target_sync import TargetProjectSynchronizer

if TYPE_CHECKING:
    from project_branch_sync.platform_api import PlatformClient
    from project_branch_sync.sources import SourceHandler
    from project_branch_sync.sync_logs import SyncLogWriter

logger = get_logger(__name__)

CUSTOM_BRANCH_FLAG = "customBranch"


class OrgSyncOrchestrator:
    """Orchestrates branch sync across every supported source of an org.

    Usage:
        async with PlatformClient() as client:
            with SyncLogWriter(resolve_logging_path()) as sync_logs:
                orchestrator = OrgSyncOrchestrator(client, sync_logs)
                result = await orchestrator.update_org_targets(
                    org_id, ["github"], dry_run=True
                )
                await orchestrator.close()

    The client is the shared session for every request of the run; the
    orchestrator never constructs one itself.
    """

    def __init__(
        self,
        client: PlatformClient,
        sync_logs: SyncLogWriter,
        sources: Mapping[str, SourceHandler] | None = None,
        *,
        settings: Settings | None = None,
        logging_path_resolver: Callable[[], Path] | None = None,
    ) -> None:
        """Initialize the org orchestrator.

        Args:
            client: Platform API client (shared session)
            sync_logs: Writer for the sync log files
            sources: Source handlers keyed by source id (defaults to all supported)
            settings: Settings instance (defaults to get_settings())
            logging_path_resolver: Resolves the log directory reported in the
                                   result (defaults to resolve_logging_path)
        """
        self._client = client
        self._sync_logs = sync_logs
        self._settings = settings or get_settings()
        self._sources = sources if sources is not None else default_source_handlers(self._settings)
        self._resolve_logging_path = logging_path_resolver or (
            lambda: resolve_logging_path(self._settings)
        )

        sync_config = self._settings.sync
        self._batch_sync = TargetBatchSynchronizer(
            TargetProjectSynchronizer(
                client,
                self._sources,
                project_concurrency=sync_config.project_concurrency,
            ),
            sync_logs,
            target_concurrency=sync_config.target_concurrency,
        )

    async def update_org_targets(
        self,
        org_id: str,
        sources: Iterable[str],
        *,
        dry_run: bool = False,
        host: str | None = None,
    ) -> OrgSyncResult:
        """Sync the projects of every target of an organization.

        Flow:
            1. Keep only supported sources (fail if none remain)
            2. Refuse orgs using the custom branch feature
            3. Per source (bounded): check configuration, list targets, sync them
            4. Merge per-source results
            5. Resolve the reported log file paths

        Args:
            org_id: Public organization id
            sources: Requested source identifiers (e.g. ["github"])
            dry_run: If True, report changes without applying them
            host: Alternate source-control host (e.g. GitHub Enterprise)

        Returns:
            OrgSyncResult with counts, project outcomes and log file paths

        Raises:
            UnsupportedSourcesError: If no requested source is supported
            OrgNotFoundError: If the org's feature flags cannot be read
            CustomBranchEnabledError: If the org uses custom branches
            Exception: The first per-source failure (e.g. missing credentials),
                       raised after every source has settled
        """
        start_time = time.monotonic()
        log = bind_org(org_id)

        supported = supported_sources()
        allowed_sources = [s for s in dict.fromkeys(sources) if s in supported]
        if not allowed_sources:
            raise UnsupportedSourcesError(supported)

        await self._check_eligibility(org_id)

        async def sync_source(source: str) -> SyncResult:
            handler = self._sources.get(source)
            if handler is None:
                raise UnsupportedSourceError(source)
            handler.ensure_configured()
            filters = TargetFilters(
                limit=self._settings.sync.targets_page_size,
                origin=source,
                exclude_empty=True,
            )
            # Every record of this source, its target tasks included, carries the source
            with LogContext(source=source):
                log.info("Listing all targets")
                page = await self._client.list_targets(org_id, filters)
                log.info("Syncing {} targets", len(page.targets))
                return await self._batch_sync.update_targets(
                    org_id, page.targets, dry_run=dry_run, host=host
                )

        batch = await map_bounded(
            allowed_sources,
            sync_source,
            concurrency=self._settings.sync.source_concurrency,
            item_name=str,
        )
        batch.raise_first_failure()

        result = OrgSyncResult()
        for source_result in batch.succeeded:
            result.extend(source_result)

        result.file_name = self._log_file_path(UPDATED_PROJECTS_LOG_NAME)
        result.failed_file_name = self._log_file_path(FAILED_UPDATE_PROJECTS_LOG_NAME)

        log.info(
            "Org sync complete: targets={}, updated={}, failed={}, dry_run={} ({:.1f}s)",
            result.processed_targets,
            len(result.updated),
            len(result.failed),
            dry_run,
            time.monotonic() - start_time,
        )
        return result

    async def _check_eligibility(self, org_id: str) -> None:
        """Refuse orgs whose flags can't be read or that use custom branches."""
        try:
            has_custom_branch = await self._client.get_feature_flag(CUSTOM_BRANCH_FLAG, org_id)
        except Exception as e:
            raise OrgNotFoundError(org_id) from e

        if has_custom_branch:
            raise CustomBranchEnabledError(org_id)

    def _log_file_path(self, file_name: str) -> str:
        """Absolute path of a sync log file, or the bare name if unresolvable.

        Runs after every update has been applied, so no resolution error may
        escape and discard the result.
        """
        try:
            return str(self._resolve_logging_path() / file_name)
        except Exception as e:
            logger.warning("Could not resolve sync log path: {}", e)
            return file_name

    async def close(self) -> None:
        """Release the source handlers' clients."""
        for handler in self._sources.values():
            await handler.close()
