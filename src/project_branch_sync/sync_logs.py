"""Append-only sync log files.

Every updated project, failed project update and skipped target is written
as one JSON line to a file under the configured logging directory
(SNYK_LOG_PATH). The files are dedicated loguru sinks; records meant for
them never reach the console handlers configured in
project_branch_sync.logging.

Files:
- updated-projects.log: one line per ProjectUpdate
- failed-to-update-projects.log: one line per ProjectUpdateFailure
- failed-to-sync-targets.log: one line per target that could not be synced
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

from project_branch_sync.config import Settings, get_settings
from project_branch_sync.exceptions import LoggingPathError
from project_branch_sync.logging import SYNC_LOG_KEY

if TYPE_CHECKING:
    from loguru import Logger

    from project_branch_sync.schemas import Target
    from project_branch_sync.sync.results import ProjectUpdate, ProjectUpdateFailure

UPDATED_PROJECTS_LOG_NAME = "updated-projects.log"
FAILED_UPDATE_PROJECTS_LOG_NAME = "failed-to-update-projects.log"
FAILED_SYNC_LOG_NAME = "failed-to-sync-targets.log"

LOGGER_NAME = "project-branch-sync"


def resolve_logging_path(settings: Settings | None = None) -> Path:
    """Get the directory receiving the sync log files.

    Raises:
        LoggingPathError: If SNYK_LOG_PATH is unset or not an existing directory
    """
    settings = settings or get_settings()
    if not settings.snyk_log_path:
        raise LoggingPathError(
            "Please set the SNYK_LOG_PATH e.g. export SNYK_LOG_PATH='~/my/path'"
        )
    try:
        path = Path(settings.snyk_log_path).expanduser().resolve()
    except (OSError, RuntimeError) as e:
        raise LoggingPathError(f"Logging path {settings.snyk_log_path} is invalid: {e}") from e
    if not path.is_dir():
        raise LoggingPathError(
            f"Logging path {path} does not exist or is not a directory. "
            "Please set SNYK_LOG_PATH to an existing directory."
        )
    return path


class SyncLogWriter:
    """Writes sync outcomes as JSON lines to the sync log files.

    Usage:
        with SyncLogWriter(resolve_logging_path()) as sync_logs:
            sync_logs.log_updated_projects(org_id, result.updated)

    Sinks are added lazily on first write and removed by close().
    """

    def __init__(self, log_dir: Path | str) -> None:
        self._log_dir = Path(log_dir)
        self._handler_ids: dict[str, int] = {}

    @property
    def log_dir(self) -> Path:
        """Directory holding the log files."""
        return self._log_dir

    @property
    def updated_log_path(self) -> Path:
        return self._log_dir / UPDATED_PROJECTS_LOG_NAME

    @property
    def failed_log_path(self) -> Path:
        return self._log_dir / FAILED_UPDATE_PROJECTS_LOG_NAME

    @property
    def failed_sync_log_path(self) -> Path:
        return self._log_dir / FAILED_SYNC_LOG_NAME

    # -------------------------------------------------------------------------
    # Writers
    # -------------------------------------------------------------------------
    def log_updated_projects(self, org_id: str, updates: Sequence[ProjectUpdate]) -> None:
        """Append one line per updated (or dry-run) project."""
        sink = self._sink(self.updated_log_path)
        for update in updates:
            msg = (
                'Project "branch" update simulated (dry run)'
                if update.dry_run
                else 'Project "branch" update completed'
            )
            self._write(sink, {"orgId": org_id, **update.to_dict()}, msg)

    def log_failed_to_update_projects(
        self, org_id: str, failures: Sequence[ProjectUpdateFailure]
    ) -> None:
        """Append one line per project whose update failed."""
        sink = self._sink(self.failed_log_path)
        for failure in failures:
            self._write(
                sink,
                {"orgId": org_id, **failure.to_dict()},
                'Project "branch" update failed',
                level="error",
            )

    def log_failed_sync(self, org_id: str, target: Target, error_message: str) -> None:
        """Append a line for a target that could not be synced at all."""
        sink = self._sink(self.failed_sync_log_path)
        self._write(
            sink,
            {
                "orgId": org_id,
                "target": target.to_api_dict(),
                "errorMessage": error_message,
            },
            "Failed to sync target",
            level="error",
        )

    # -------------------------------------------------------------------------
    # Sinks
    # -------------------------------------------------------------------------
    def _sink(self, path: Path) -> Logger:
        key = str(path)
        if key not in self._handler_ids:
            self._handler_ids[key] = logger.add(
                path,
                level="INFO",
                format="{message}",
                filter=lambda record, key=key: record["extra"].get(SYNC_LOG_KEY) == key,
            )
        return logger.bind(**{SYNC_LOG_KEY: key})

    @staticmethod
    def _write(sink: Logger, fields: dict[str, Any], msg: str, level: str = "info") -> None:
        line = {
            "name": LOGGER_NAME,
            "level": level,
            "time": datetime.now(UTC).isoformat(),
            **fields,
            "msg": msg,
        }
        sink.log(level.upper(), json.dumps(line, default=str))

    def close(self) -> None:
        """Remove the file sinks (flushes and closes the files)."""
        for handler_id in self._handler_ids.values():
            try:
                logger.remove(handler_id)
            except ValueError:
                # Already removed by reset_logging()
                continue
        self._handler_ids.clear()

    def __enter__(self) -> SyncLogWriter:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
