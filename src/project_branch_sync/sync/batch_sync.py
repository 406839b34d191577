"""Target batch sync - fan out per-target sync over many targets.

Each target runs inside its own failure boundary: a target whose projects
or default branch cannot be read is logged to the failed-sync log and
skipped, without affecting the other targets of the batch.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from project_branch_sync.logging import bind_org, get_logger
from project_branch_sync.pacing import map_bounded

from .results import SyncResult

if TYPE_CHECKING:
    from project_branch_sync.schemas import Target
    from project_branch_sync.sync_logs import SyncLogWriter

    from .target_sync import TargetProjectSynchronizer

logger = get_logger(__name__)


class TargetBatchSynchronizer:
    """Syncs a batch of targets with bounded concurrency.

    Usage:
        batch_sync = TargetBatchSynchronizer(
            target_synchronizer=TargetProjectSynchronizer(client, sources),
            sync_logs=SyncLogWriter(resolve_logging_path()),
        )
        result = await batch_sync.update_targets(org_id, targets, dry_run=True)
    """

    def __init__(
        self,
        target_synchronizer: TargetProjectSynchronizer,
        sync_logs: SyncLogWriter,
        *,
        target_concurrency: int = 20,
    ) -> None:
        """Initialize the batch synchronizer.

        Args:
            target_synchronizer: Per-target project synchronizer
            sync_logs: Writer for the updated/failed/failed-sync log files
            target_concurrency: Targets synced in parallel
        """
        self._target_synchronizer = target_synchronizer
        self._sync_logs = sync_logs
        self._target_concurrency = target_concurrency

    async def update_targets(
        self,
        org_id: str,
        targets: Sequence[Target],
        *,
        dry_run: bool = False,
        host: str | None = None,
    ) -> SyncResult:
        """Sync every target of the batch.

        Successful targets are counted, merged into the result and their
        outcomes logged as soon as they complete. Failed targets are logged
        to the failed-sync log and contribute nothing to the result.

        Args:
            org_id: Public organization id
            targets: Targets to sync
            dry_run: If True, report changes without applying them
            host: Alternate source-control host (e.g. GitHub Enterprise)

        Returns:
            SyncResult with processed target count and project outcomes
        """
        start_time = time.monotonic()
        log = bind_org(org_id)
        result = SyncResult()

        async def sync_one(target: Target) -> None:
            try:
                target_result = await self._target_synchronizer.sync_target(
                    org_id, target, dry_run=dry_run, host=host
                )
            except Exception as e:
                error_message = str(getattr(e, "message", None) or e)
                log.warning(
                    "Failed to sync target {}. ERROR: {}",
                    target.display_name,
                    error_message,
                )
                self._write_logs(
                    target, self._sync_logs.log_failed_sync, org_id, target, error_message
                )
                return

            # No await between sync and merge: the merge is atomic on the event loop
            result.add_target(target_result)

            if target_result.updated:
                self._write_logs(
                    target, self._sync_logs.log_updated_projects, org_id, target_result.updated
                )
            if target_result.failed:
                self._write_logs(
                    target,
                    self._sync_logs.log_failed_to_update_projects,
                    org_id,
                    target_result.failed,
                )

        await map_bounded(
            targets,
            sync_one,
            concurrency=self._target_concurrency,
            item_name=lambda t: t.display_name,
        )

        log.info(
            "Target batch complete: processed={}/{}, updated={}, failed={} ({:.1f}s)",
            result.processed_targets,
            len(targets),
            len(result.updated),
            len(result.failed),
            time.monotonic() - start_time,
        )
        return result

    @staticmethod
    def _write_logs(target: Target, writer: Callable[..., None], *args: Any) -> None:
        """Call a sync log writer; a write failure never changes the outcome."""
        try:
            writer(*args)
        except Exception as e:
            logger.warning(
                "Could not write sync log for target {}: {}", target.display_name, e
            )
