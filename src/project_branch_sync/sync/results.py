"""Result objects for branch sync operations.

Structured results provide consistent interfaces for the sync log files,
CLI output and programmatic callers. Records are immutable once created;
aggregates only ever grow by concatenation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from project_branch_sync.schemas import Target

UpdateType = Literal["branch"]


@dataclass(frozen=True)
class ProjectUpdate:
    """A project whose branch was changed (or would be, in a dry run)."""

    project_public_id: str
    """Project public id."""

    from_branch: str | None
    """Branch recorded on the project before the sync."""

    to_branch: str
    """Provider's current default branch."""

    dry_run: bool
    """True if the update was only simulated."""

    target: Target | None = None
    """Owning target, for attribution without a second lookup."""

    type: UpdateType = "branch"
    """Attribute that was updated."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "projectPublicId": self.project_public_id,
            "from": self.from_branch,
            "to": self.to_branch,
            "type": self.type,
            "dryRun": self.dry_run,
        }
        if self.target is not None:
            result["target"] = self.target.to_api_dict()
        return result


@dataclass(frozen=True)
class ProjectUpdateFailure:
    """A project whose branch update call was rejected."""

    project_public_id: str
    from_branch: str | None
    to_branch: str
    dry_run: bool
    error_message: str
    """Human-readable error naming the project and the upstream failure."""

    target: Target | None = None
    type: UpdateType = "branch"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "projectPublicId": self.project_public_id,
            "from": self.from_branch,
            "to": self.to_branch,
            "type": self.type,
            "dryRun": self.dry_run,
            "errorMessage": self.error_message,
        }
        if self.target is not None:
            result["target"] = self.target.to_api_dict()
        return result


@dataclass
class TargetSyncResult:
    """Outcome of syncing the projects of a single target."""

    updated: list[ProjectUpdate] = field(default_factory=list)
    failed: list[ProjectUpdateFailure] = field(default_factory=list)


@dataclass
class SyncResult:
    """Aggregated outcome of syncing a batch of targets.

    Lists are in completion order. Merging never de-duplicates: the same
    project id may appear in several merged results.
    """

    processed_targets: int = 0
    """Targets that completed without raising."""

    updated: list[ProjectUpdate] = field(default_factory=list)
    """Projects updated (or simulated in a dry run)."""

    failed: list[ProjectUpdateFailure] = field(default_factory=list)
    """Projects whose update call failed."""

    def add_target(self, target_result: TargetSyncResult) -> None:
        """Account for one successfully processed target."""
        self.processed_targets += 1
        self.updated.extend(target_result.updated)
        self.failed.extend(target_result.failed)

    def extend(self, other: SyncResult) -> None:
        """Merge another result into this one by summation and concatenation."""
        self.processed_targets += other.processed_targets
        self.updated.extend(other.updated)
        self.failed.extend(other.failed)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "processedTargets": self.processed_targets,
            "meta": {
                "projects": {
                    "updated": [u.to_dict() for u in self.updated],
                    "failed": [f.to_dict() for f in self.failed],
                },
            },
        }


@dataclass
class OrgSyncResult(SyncResult):
    """Outcome of syncing every supported source of an organization."""

    file_name: str = ""
    """Path of the updated-projects log."""

    failed_file_name: str = ""
    """Path of the failed-to-update-projects log."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            **super().to_dict(),
            "fileName": self.file_name,
            "failedFileName": self.failed_file_name,
        }
