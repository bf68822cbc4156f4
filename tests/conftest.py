"""Test configuration and fixtures."""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock

import pytest

from gh_stale.github_client.models import GitHubIssue
from gh_stale.triage.options import ProcessorOptions


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2020, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_issue() -> Callable[..., GitHubIssue]:
    """Factory building issues the way the issues endpoint reports them."""

    def _make(
        number: int,
        title: str,
        updated_at: str,
        is_pull_request: bool = False,
        labels: list[str] | None = None,
        is_closed: bool = False,
        is_locked: bool = False,
    ) -> GitHubIssue:
        return GitHubIssue(
            number=number,
            title=title,
            labels=[{"name": label} for label in labels or []],
            updated_at=updated_at,
            pull_request={} if is_pull_request else None,
            state="closed" if is_closed else "open",
            locked=is_locked,
        )

    return _make


@pytest.fixture
def make_options() -> Callable[..., ProcessorOptions]:
    """Factory for processor options with overridable defaults."""

    def _make(**overrides: Any) -> ProcessorOptions:
        values: dict[str, Any] = {
            "repo_token": "none",
            "stale_issue_message": "This issue is stale",
            "stale_pr_message": "This PR is stale",
            "days_before_stale": 1,
            "days_before_close": 1,
            "stale_issue_label": "Stale",
            "exempt_issue_labels": "",
            "stale_pr_label": "Stale",
            "exempt_pr_labels": "",
            "only_labels": "",
            "operations_per_run": 100,
            "dry_run": True,
            "remove_stale_when_updated": False,
        }
        values.update(overrides)
        return ProcessorOptions(**values)

    return _make


@pytest.fixture
def pages_of() -> Callable[..., Callable]:
    """Factory for page fetchers serving the given pages, then empty pages."""

    def _make(*pages: list[GitHubIssue]) -> AsyncMock:
        def get_issues(page: int) -> list[GitHubIssue]:
            return pages[page] if page < len(pages) else []

        return AsyncMock(side_effect=get_issues)

    return _make


@pytest.fixture
def mutator(fixed_now: datetime) -> AsyncMock:
    """Mutation capability recording every call."""
    mock = AsyncMock()
    mock.add_label.return_value = fixed_now
    mock.remove_label.return_value = fixed_now
    mock.create_comment.return_value = fixed_now
    mock.close.return_value = fixed_now
    return mock


@pytest.fixture
def no_updates() -> AsyncMock:
    return AsyncMock(return_value=[])
