"""GitHub API client module.

This module provides:
- GitHubClient: Async GitHub API client (default branch lookup)
- github_base_url / parse_repo_name: host and repository name helpers
- Exceptions: GitHubClientError and its status-specific subclasses
"""

from .client import GITHUB_API_URL, GitHubClient, github_base_url, parse_repo_name
from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)

__all__ = [
    # Client
    "GITHUB_API_URL",
    "GitHubClient",
    "github_base_url",
    "parse_repo_name",
    # Exceptions
    "GitHubAuthenticationError",
    "GitHubClientError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
]
