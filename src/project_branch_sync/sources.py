"""Source-control providers supported by branch sync.

Each supported source carries its own configuration check and default
branch lookup. Adding a provider means adding a SupportedSource member and
a SourceHandler subclass; the sync pipeline looks handlers up by a target's
origin and never branches on the provider itself.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum

from project_branch_sync.config import Settings, get_settings
from project_branch_sync.exceptions import SourceNotConfiguredError
from project_branch_sync.github import GitHubClient, github_base_url, parse_repo_name
from project_branch_sync.schemas import Target


class SupportedSource(StrEnum):
    """Sources whose projects can be synced to the default branch."""

    GITHUB = "github"


def supported_sources() -> list[str]:
    """Identifiers of every supported source, in declaration order."""
    return [source.value for source in SupportedSource]


class SourceHandler(ABC):
    """Provider-specific capabilities needed by branch sync."""

    source: SupportedSource

    @abstractmethod
    def ensure_configured(self) -> None:
        """Raise SourceNotConfiguredError if credentials are missing."""

    @abstractmethod
    async def get_default_branch(self, target: Target, host: str | None = None) -> str:
        """Get the provider's current default branch for a target."""

    async def close(self) -> None:
        """Release any clients held by the handler."""


class GitHubSource(SourceHandler):
    """GitHub and GitHub Enterprise repositories.

    One GitHubClient is kept per API host and shared by every target.
    """

    source = SupportedSource.GITHUB

    def __init__(self, settings: Settings | None = None, token: str | None = None) -> None:
        """Initialize the GitHub source.

        Args:
            settings: Settings instance (defaults to get_settings())
            token: GitHub token (defaults to settings.github_token)
        """
        self._settings = settings or get_settings()
        self._token = token
        self._clients: dict[str, GitHubClient] = {}

    @property
    def token(self) -> str:
        """Token used for every GitHub host (explicit token wins over settings)."""
        return self._token or self._settings.github_token

    def ensure_configured(self) -> None:
        """Check that a GitHub token is available.

        Raises:
            SourceNotConfiguredError: If neither a token nor GITHUB_TOKEN is set
        """
        if not self.token:
            raise SourceNotConfiguredError(
                "Please set the GITHUB_TOKEN e.g. export GITHUB_TOKEN='mypersonalaccesstoken123'"
            )

    def client_for(self, host: str | None = None) -> GitHubClient:
        """Get the shared client for a GitHub host, creating it on first use.

        Args:
            host: GitHub Enterprise hostname (None for github.com)

        Returns:
            GitHubClient bound to the host's API base URL
        """
        base_url = github_base_url(host)
        client = self._clients.get(base_url)
        if client is None:
            client = GitHubClient(token=self.token, base_url=base_url)
            self._clients[base_url] = client
        return client

    async def get_default_branch(self, target: Target, host: str | None = None) -> str:
        """Get the default branch of a target's repository.

        Args:
            target: Target whose display name is "owner/repo"
            host: GitHub Enterprise hostname (None for github.com)

        Returns:
            Name of the repository's default branch

        Raises:
            ValueError: If the display name is not in owner/repo format
            GitHubNotFoundError: If the repository doesn't exist or is not visible
        """
        owner, repo = parse_repo_name(target.display_name)
        return await self.client_for(host).get_default_branch(owner, repo)

    async def close(self) -> None:
        """Close every per-host client."""
        for client in self._clients.values():
            await client.close()
        self._clients.clear()


def default_source_handlers(
    settings: Settings | None = None,
) -> dict[str, SourceHandler]:
    """Build the handler registry keyed by source identifier."""
    handlers: list[SourceHandler] = [GitHubSource(settings)]
    return {handler.source.value: handler for handler in handlers}
