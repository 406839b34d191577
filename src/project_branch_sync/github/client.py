"""Async GitHub API client wrapper using githubkit.

This module provides a typed async interface to the GitHub REST API for
the one lookup branch sync needs from GitHub: a repository's default branch.
GitHub Enterprise hosts are supported through an alternate base URL.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from githubkit import GitHub
from githubkit.exception import RequestFailed

from project_branch_sync.config import get_settings
from project_branch_sync.logging import get_logger

from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)

logger = get_logger(__name__)

GITHUB_API_URL = "https://api.github.com"


def github_base_url(host: str | None = None) -> str:
    """Get the REST API base URL for github.com or a GitHub Enterprise host.

    Args:
        host: Enterprise hostname or URL (e.g. "github.example.com"). None for github.com.

    Returns:
        API base URL
    """
    if not host:
        return GITHUB_API_URL
    host = host.rstrip("/")
    if not host.startswith(("http://", "https://")):
        host = f"https://{host}"
    return f"{host}/api/v3"


def parse_repo_name(full_name: str) -> tuple[str, str]:
    """Split an "owner/repo" name.

    Raises:
        ValueError: If the name is not in owner/repo format
    """
    owner, _, repo = full_name.strip().partition("/")
    if not owner or not repo:
        raise ValueError(f"Repository name '{full_name}' must be in owner/name format")
    return owner, repo


class GitHubClient:
    """Async GitHub API client.

    Usage:
        async with GitHubClient() as client:
            branch = await client.get_default_branch("snyk", "goof")

    Or for GitHub Enterprise:
        client = GitHubClient(base_url=github_base_url("github.example.com"))
        branch = await client.get_default_branch("team", "service")
        await client.close()
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str | None = None,
    ) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub PAT. If not provided, uses GITHUB_TOKEN from settings.
            base_url: API base URL (defaults to https://api.github.com)

        Raises:
            GitHubAuthenticationError: If no token is available.
        """
        self._token = token or get_settings().github_token
        if not self._token:
            raise GitHubAuthenticationError(
                "GitHub token required. Set GITHUB_TOKEN environment variable."
            )
        self._base_url = base_url or GITHUB_API_URL
        self._client: GitHub[Any] | None = None

    @property
    def base_url(self) -> str:
        """API base URL this client talks to."""
        return self._base_url

    @property
    def _github(self) -> GitHub[Any]:
        """Get or create the githubkit client instance."""
        if self._client is None:
            self._client = GitHub(self._token, base_url=self._base_url)
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client = None

    async def __aenter__(self) -> GitHubClient:
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    # -------------------------------------------------------------------------
    # Repository Methods
    # -------------------------------------------------------------------------
    async def get_default_branch(self, owner: str, repo: str) -> str:
        """Get the branch GitHub currently designates as a repository's default.

        Args:
            owner: Repository owner (org or user)
            repo: Repository name

        Returns:
            Default branch name

        Raises:
            GitHubNotFoundError: If the repository doesn't exist or is not visible
        """
        try:
            resp = await self._github.rest.repos.async_get(owner=owner, repo=repo)
        except RequestFailed as e:
            if e.response.status_code == 404:
                raise GitHubNotFoundError(
                    f"Repository {owner}/{repo} not found or not accessible"
                ) from e
            raise self._handle_error(e) from e

        branch = resp.parsed_data.default_branch
        logger.debug("Default branch for {}/{} is {}", owner, repo, branch)
        return branch

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------
    def _handle_error(self, error: RequestFailed) -> GitHubClientError:
        """Convert githubkit exceptions to our custom exceptions."""
        status = error.response.status_code

        if status == 401:
            return GitHubAuthenticationError("Invalid GitHub token")
        elif status == 403:
            # Check for rate limit
            headers = error.response.headers
            if "x-ratelimit-remaining" in headers:
                remaining = int(headers.get("x-ratelimit-remaining", "0"))
                if remaining == 0:
                    reset_ts = int(headers.get("x-ratelimit-reset", "0"))
                    reset_at = datetime.fromtimestamp(reset_ts, tz=UTC) if reset_ts else None
                    return GitHubRateLimitError(
                        "GitHub rate limit exceeded",
                        reset_at=reset_at,
                    )
            return GitHubClientError(f"Access forbidden: {error}")
        elif status == 404:
            return GitHubNotFoundError(str(error))
        else:
            return GitHubClientError(f"GitHub API error ({status}): {error}")
