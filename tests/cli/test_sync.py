"""Tests for sync CLI commands."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from project_branch_sync.cli.app import app
from project_branch_sync.exceptions import CustomBranchEnabledError
from project_branch_sync.sync import OrgSyncResult, ProjectUpdate, ProjectUpdateFailure
from tests.conftest import ORG_ID
from tests.factories import make_target

runner = CliRunner()


@pytest.fixture(autouse=True)
def mock_settings(settings):
    """Serve the isolated test settings to the sync command."""
    with patch("project_branch_sync.cli.sync.get_settings", return_value=settings):
        yield settings


@pytest.fixture
def org_result(log_dir):
    target = make_target("snyk/goof")
    return OrgSyncResult(
        processed_targets=1,
        updated=[ProjectUpdate("p1", "master", "develop", dry_run=False, target=target)],
        failed=[
            ProjectUpdateFailure(
                "p2",
                "master",
                "develop",
                dry_run=False,
                error_message="Failed to update project p2 via API. ERROR: Error",
                target=target,
            )
        ],
        file_name=str(log_dir / "updated-projects.log"),
        failed_file_name=str(log_dir / "failed-to-update-projects.log"),
    )


@pytest.fixture
def mock_orchestrator(org_result):
    """Patch OrgSyncOrchestrator with a mock returning org_result."""
    with patch("project_branch_sync.cli.sync.OrgSyncOrchestrator") as mock_class:
        orchestrator = MagicMock()
        orchestrator.update_org_targets = AsyncMock(return_value=org_result)
        orchestrator.close = AsyncMock()
        mock_class.return_value = orchestrator
        yield orchestrator


class TestGlobalFlags:
    """Tests for global CLI flags (--verbose, --quiet, --version)."""

    def test_global_help_shows_verbose_flag(self):
        """Main help text shows --verbose and -v flags."""
        result = runner.invoke(app, ["--help"])
        assert "-v" in result.stdout
        assert "--verbose" in result.stdout

    def test_global_help_shows_quiet_flag(self):
        """Main help text shows --quiet and -q flags."""
        result = runner.invoke(app, ["--help"])
        assert "-q" in result.stdout
        assert "--quiet" in result.stdout

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "branchsync version" in result.stdout


class TestSyncOrgCommand:
    """Tests for the 'sync org' command."""

    def test_command_exists(self):
        """Verify sync org command is registered."""
        result = runner.invoke(app, ["sync", "org", "--help"])
        assert result.exit_code == 0
        assert "--dry-run" in result.stdout
        assert "--source" in result.stdout

    def test_requires_org_id(self):
        result = runner.invoke(app, ["sync", "org"])
        assert result.exit_code != 0

    def test_defaults_to_github(self, mock_orchestrator):
        result = runner.invoke(app, ["sync", "org", ORG_ID])

        assert result.exit_code == 0
        mock_orchestrator.update_org_targets.assert_awaited_once_with(
            ORG_ID, ["github"], dry_run=False, host=None
        )
        mock_orchestrator.close.assert_awaited_once()

    def test_passes_options(self, mock_orchestrator):
        result = runner.invoke(
            app,
            [
                "sync",
                "org",
                ORG_ID,
                "--source",
                "GitHub,gitlab",
                "--dry-run",
                "--host",
                "ghe.example.com",
            ],
        )

        assert result.exit_code == 0
        mock_orchestrator.update_org_targets.assert_awaited_once_with(
            ORG_ID, ["github", "gitlab"], dry_run=True, host="ghe.example.com"
        )
        assert "dry-run" in result.stdout

    def test_text_summary(self, mock_orchestrator, log_dir):
        result = runner.invoke(app, ["sync", "org", ORG_ID])

        assert result.exit_code == 0
        assert "Sync Complete" in result.stdout
        assert "Processed targets: 1" in result.stdout
        assert "snyk/goof p1: master -> develop" in result.stdout
        assert "Failed to update project p2 via API. ERROR: Error" in result.stdout

    def test_json_output(self, mock_orchestrator, log_dir):
        result = runner.invoke(app, ["sync", "org", ORG_ID, "--format", "json"])

        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert output["processedTargets"] == 1
        assert output["meta"]["projects"]["updated"][0]["projectPublicId"] == "p1"
        assert output["meta"]["projects"]["failed"][0]["projectPublicId"] == "p2"
        assert output["fileName"] == str(log_dir / "updated-projects.log")
        assert output["failedFileName"] == str(log_dir / "failed-to-update-projects.log")

    def test_fatal_error_exits_1(self, mock_orchestrator):
        mock_orchestrator.update_org_targets = AsyncMock(
            side_effect=CustomBranchEnabledError(ORG_ID)
        )

        result = runner.invoke(app, ["sync", "org", ORG_ID])

        assert result.exit_code == 1
        assert "Detected custom branches feature" in result.stdout
        mock_orchestrator.close.assert_awaited_once()

    def test_missing_log_path_exits_1(self, mock_settings, mock_orchestrator):
        mock_settings.snyk_log_path = None

        result = runner.invoke(app, ["sync", "org", ORG_ID])

        assert result.exit_code == 1
        assert "SNYK_LOG_PATH" in result.stdout
        mock_orchestrator.update_org_targets.assert_not_called()
