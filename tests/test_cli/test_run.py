"""Tests for the run CLI command."""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock, patch

from typer.testing import CliRunner

from gh_stale.cli.main import app
from gh_stale.github_client.models import GitHubIssue, GitHubUser, IssueUpdate


def _issue(number: int, labels: list[str] | None = None) -> GitHubIssue:
    return GitHubIssue(
        number=number,
        title=f"Issue {number}",
        labels=[{"name": label} for label in labels or []],
        updated_at="2020-01-01T17:00:00Z",
    )


class TestRunCommand:
    """Test the run CLI command."""

    def setup_method(self) -> None:
        """Set up test fixtures."""
        self.runner = CliRunner()

    @patch.dict(os.environ, {"GITHUB_TOKEN": "test_token"}, clear=True)
    @patch("gh_stale.cli.run.GitHubClient")
    def test_run_dry_run(self, mock_client_class: Mock) -> None:
        """Dry run marks and closes nothing remotely but reports decisions."""
        mock_client = Mock()
        mock_client_class.return_value = mock_client
        mock_client.list_open_issues.side_effect = [
            [_issue(1), _issue(2, ["Stale"])],
            [],
        ]

        result = self.runner.invoke(
            app,
            [
                "run",
                "--repo",
                "myorg/myrepo",
                "--days-before-stale",
                "1",
                "--days-before-close",
                "1",
                "--keep-stale-when-updated",
                "--dry-run",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Marked stale: 1, closed: 1, un-staled: 0" in result.output
        assert "Operations left: 26" in result.output
        mock_client.add_label.assert_not_called()
        mock_client.create_comment.assert_not_called()
        mock_client.close_issue.assert_not_called()

    @patch.dict(os.environ, {"GITHUB_TOKEN": "test_token"}, clear=True)
    @patch("gh_stale.cli.run.GitHubClient")
    def test_run_applies_changes(self, mock_client_class: Mock) -> None:
        mock_client = Mock()
        mock_client_class.return_value = mock_client
        mock_client.list_open_issues.side_effect = [[_issue(1)], []]

        result = self.runner.invoke(
            app,
            [
                "run",
                "--repo",
                "myorg/myrepo",
                "--stale-issue-message",
                "Going stale",
                "--days-before-stale",
                "1",
            ],
        )

        assert result.exit_code == 0, result.output
        mock_client.create_comment.assert_called_once_with(
            "myorg/myrepo", 1, "Going stale"
        )
        mock_client.add_label.assert_called_once_with("myorg/myrepo", 1, "Stale")

    @patch.dict(os.environ, {"GITHUB_TOKEN": "test_token"}, clear=True)
    @patch("gh_stale.cli.run.GitHubClient")
    def test_run_unstales_from_stale_label_time(self, mock_client_class: Mock) -> None:
        """Comments are looked up from when the stale label was applied."""
        labeled_at = datetime(2019, 12, 20, tzinfo=timezone.utc)
        mock_client = Mock()
        mock_client_class.return_value = mock_client
        mock_client.list_open_issues.side_effect = [[_issue(1, ["Stale"])], []]
        mock_client.get_label_applied_at.return_value = labeled_at
        mock_client.list_comments_since.return_value = [
            IssueUpdate(id=5, user=GitHubUser(login="dev", type="User"))
        ]

        result = self.runner.invoke(
            app,
            ["run", "--repo", "myorg/myrepo", "--stale-pr-label", "idle"],
        )

        assert result.exit_code == 0, result.output
        assert "un-staled: 1" in result.output
        mock_client.get_label_applied_at.assert_called_once_with(
            "myorg/myrepo", 1, {"Stale", "idle"}
        )
        mock_client.list_comments_since.assert_called_once_with(
            "myorg/myrepo", 1, labeled_at
        )
        mock_client.remove_label.assert_called_once_with("myorg/myrepo", 1, "Stale")
        mock_client.close_issue.assert_not_called()

    @patch.dict(
        os.environ,
        {
            "GITHUB_REPOSITORY": "envorg/envrepo",
            "INPUT_REPO-TOKEN": "action_token",
            "INPUT_DAYS-BEFORE-STALE": "-1",
            "INPUT_DAYS-BEFORE-CLOSE": "-1",
            "INPUT_OPERATIONS-PER-RUN": "5",
            "INPUT_DEBUG-ONLY": "true",
        },
        clear=True,
    )
    @patch("gh_stale.cli.run.build_processor")
    def test_run_reads_action_inputs(self, mock_build: Mock) -> None:
        """GitHub Actions INPUT_* variables configure the run."""
        processor = Mock()
        processor.process_issues = AsyncMock(return_value=4)
        processor.stale_issues = []
        processor.closed_issues = []
        processor.removed_label_issues = []
        mock_build.return_value = processor

        result = self.runner.invoke(app, ["run"])

        assert result.exit_code == 0, result.output
        options, repo, token = mock_build.call_args.args
        assert repo == "envorg/envrepo"
        assert token == "action_token"
        assert options.days_before_stale is None
        assert options.days_before_close is None
        assert options.operations_per_run == 5
        assert options.dry_run is True
        assert "Operations left: 4" in result.output

    @patch.dict(os.environ, {"GITHUB_TOKEN": "test_token"}, clear=True)
    def test_run_rejects_bad_repo(self) -> None:
        result = self.runner.invoke(app, ["run", "--repo", "not-a-repo"])

        assert result.exit_code == 1
        assert "OWNER/NAME" in result.output

    @patch.dict(os.environ, {"GITHUB_TOKEN": "test_token"}, clear=True)
    def test_run_rejects_negative_operations(self) -> None:
        result = self.runner.invoke(
            app, ["run", "--repo", "o/r", "--operations-per-run", "-3"]
        )

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    @patch.dict(os.environ, {}, clear=True)
    def test_run_without_token_fails(self) -> None:
        result = self.runner.invoke(app, ["run", "--repo", "o/r"])

        assert result.exit_code == 1
        assert "GitHub token is required" in result.output

    @patch.dict(os.environ, {"GITHUB_TOKEN": "test_token"}, clear=True)
    @patch("gh_stale.cli.run.GitHubClient")
    def test_run_fails_when_github_errors(self, mock_client_class: Mock) -> None:
        mock_client = Mock()
        mock_client_class.return_value = mock_client
        mock_client.list_open_issues.side_effect = RuntimeError("502 Bad Gateway")

        result = self.runner.invoke(app, ["run", "--repo", "o/r"])

        assert result.exit_code == 1
        assert "502 Bad Gateway" in result.output


def test_version() -> None:
    result = CliRunner().invoke(app, ["version"])

    assert result.exit_code == 0
    assert "gh-stale v" in result.output
