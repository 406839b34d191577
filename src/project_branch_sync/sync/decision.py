"""Per-project branch decision.

Compares a project's recorded branch with the provider's default branch and,
when they differ, applies (or simulates) the update. Failures of the update
call are returned as ProjectUpdateFailure records, never raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from project_branch_sync.logging import get_logger

from .results import ProjectUpdate, ProjectUpdateFailure

if TYPE_CHECKING:
    from project_branch_sync.platform_api import PlatformClient
    from project_branch_sync.schemas import Project, Target

logger = get_logger(__name__)


def _error_message(error: Exception) -> str:
    """Upstream message of an update failure (platform errors carry one)."""
    return str(getattr(error, "message", None) or error)


class BranchDecisionMaker:
    """Decides whether a project needs its branch updated, and does so."""

    def __init__(self, client: PlatformClient) -> None:
        """Initialize the decision maker.

        Args:
            client: Platform API client used for the update call
        """
        self._client = client

    async def decide(
        self,
        org_id: str,
        project: Project,
        default_branch: str,
        *,
        dry_run: bool = False,
        target: Target | None = None,
    ) -> ProjectUpdate | ProjectUpdateFailure | None:
        """Bring one project's branch in line with the default branch.

        Args:
            org_id: Public organization id
            project: Project as listed at the start of the target's sync
            default_branch: Provider's current default branch
            dry_run: If True, report the change without calling the API
            target: Owning target, attached to the produced record

        Returns:
            None if the branch already matches, a ProjectUpdate if the change
            was applied or simulated, a ProjectUpdateFailure if the API
            rejected it.
        """
        if project.branch == default_branch:
            return None

        if dry_run:
            logger.debug(
                "Dry run: project {} would move from {} to {}",
                project.id,
                project.branch,
                default_branch,
            )
            return ProjectUpdate(
                project_public_id=project.id,
                from_branch=project.branch,
                to_branch=default_branch,
                dry_run=True,
                target=target,
            )

        try:
            await self._client.update_project(org_id, project.id, branch=default_branch)
        except Exception as e:
            message = (
                f"Failed to update project {project.id} via API. ERROR: {_error_message(e)}"
            )
            logger.warning(message)
            return ProjectUpdateFailure(
                project_public_id=project.id,
                from_branch=project.branch,
                to_branch=default_branch,
                dry_run=False,
                error_message=message,
                target=target,
            )

        logger.info(
            "Updated project {} branch from {} to {}",
            project.id,
            project.branch,
            default_branch,
        )
        return ProjectUpdate(
            project_public_id=project.id,
            from_branch=project.branch,
            to_branch=default_branch,
            dry_run=False,
            target=target,
        )
