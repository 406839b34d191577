"""Pytest configuration and shared fixtures.

Usage Guide:
- For schema and result tests: import factories from tests.factories
- For synchronizer tests: use mock_client and fake_sources
- For anything reading settings: use the settings fixture (no .env, no real tokens)
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock

import pytest

from project_branch_sync.config import Settings
from project_branch_sync.logging import reset_logging
from project_branch_sync.platform_api import PlatformClient
from project_branch_sync.schemas import ProjectsPage, TargetsPage
from project_branch_sync.sync_logs import SyncLogWriter
from tests.factories import FakeSource

if TYPE_CHECKING:
    from collections.abc import Generator

# -----------------------------------------------------------------------------
# Test Constants
# -----------------------------------------------------------------------------
ORG_ID = "0d5e5a9c-5b8d-4a55-9f62-2a1b3c4d5e6f"
PLATFORM_TOKEN = "platform-test-token"
GITHUB_TOKEN = "ghp_test_token"


# -----------------------------------------------------------------------------
# Settings Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """Existing directory receiving the sync log files."""
    path = tmp_path / "sync-logs"
    path.mkdir()
    return path


@pytest.fixture
def settings(log_dir: Path) -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        snyk_token=PLATFORM_TOKEN,
        github_token=GITHUB_TOKEN,
        snyk_log_path=str(log_dir),
    )


@pytest.fixture(autouse=True)
def _reset_logging_state() -> Generator[None, None, None]:
    """Remove loguru sinks added by a test (sync log files included)."""
    yield
    reset_logging()


# -----------------------------------------------------------------------------
# Collaborator Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def mock_client() -> MagicMock:
    """PlatformClient double with every call stubbed to an empty success."""
    client = MagicMock(spec=PlatformClient)
    client.list_targets = AsyncMock(return_value=TargetsPage(targets=[]))
    client.list_projects = AsyncMock(return_value=ProjectsPage(projects=[]))
    client.update_project = AsyncMock()
    client.get_feature_flag = AsyncMock(return_value=False)
    return client


@pytest.fixture
def fake_github() -> FakeSource:
    """GitHub source whose default branch is always 'develop'."""
    return FakeSource(default_branch="develop")


@pytest.fixture
def fake_sources(fake_github: FakeSource) -> dict[str, FakeSource]:
    """Source handler registry holding only the fake GitHub source."""
    return {"github": fake_github}


@pytest.fixture
def mock_sync_logs() -> MagicMock:
    """SyncLogWriter double recording every write."""
    return MagicMock(spec=SyncLogWriter)
