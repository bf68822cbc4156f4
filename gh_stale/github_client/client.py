"""GitHub API client using PyGitHub."""

import os
import time
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import TypeVar

from github import Github
from github.GithubException import RateLimitExceededException, UnknownObjectException
from github.Issue import Issue
from github.IssueComment import IssueComment
from github.Label import Label
from github.NamedUser import NamedUser
from github.Repository import Repository
from rich.console import Console

from ..utils.dates import ensure_utc
from .models import GitHubIssue, GitHubLabel, GitHubUser, IssueUpdate

console = Console()

RATE_LIMIT_WAIT_SECONDS = 60
MAX_RATE_LIMIT_RETRIES = 3

T = TypeVar("T")


class GitHubClient:
    """GitHub API client with rate limit handling and authentication."""

    def __init__(self, token: str | None = None, per_page: int = 100):
        """Initialize GitHub client with authentication.

        Args:
            token: GitHub personal access token. If None, reads from
                GITHUB_TOKEN env var.
            per_page: Page size used when listing issues (max 100)
        """
        self.token = token or os.getenv("GITHUB_TOKEN")
        if not self.token:
            raise ValueError(
                "GitHub token is required. Set GITHUB_TOKEN environment variable."
            )

        self.per_page = per_page
        self.github = Github(self.token, per_page=per_page)
        self._repositories: dict[str, Repository] = {}

    def _convert_user(self, github_user: NamedUser | None) -> GitHubUser:
        """Convert PyGitHub user to our model."""
        if github_user is None:
            return GitHubUser()
        return GitHubUser(
            login=github_user.login,
            id=github_user.id,
            type=github_user.type or "User",
        )

    def _convert_label(self, github_label: Label) -> GitHubLabel:
        """Convert PyGitHub label to our model."""
        return GitHubLabel(
            name=github_label.name,
            color=github_label.color,
            description=github_label.description,
        )

    def _convert_comment(self, github_comment: IssueComment) -> IssueUpdate:
        """Convert PyGitHub comment to an update event."""
        return IssueUpdate(
            id=github_comment.id,
            user=self._convert_user(github_comment.user),
            created_at=github_comment.created_at,
        )

    def _convert_issue(self, github_issue: Issue) -> GitHubIssue:
        """Convert PyGitHub issue to our model."""
        # The issues endpoint marks pull requests with a pull_request object
        pull_request = None
        if github_issue.pull_request is not None:
            pull_request = {"url": github_issue.pull_request.html_url}

        return GitHubIssue(
            number=github_issue.number,
            title=github_issue.title,
            labels=[self._convert_label(label) for label in github_issue.labels],
            updated_at=github_issue.updated_at,
            pull_request=pull_request,
            state=github_issue.state,
            locked=bool(github_issue.locked),
        )

    def get_repository(self, repo_full_name: str) -> Repository:
        """Get repository object for an ``owner/name`` string."""
        if repo_full_name not in self._repositories:
            try:
                self._repositories[repo_full_name] = self.github.get_repo(
                    repo_full_name
                )
            except UnknownObjectException:
                raise ValueError(f"Repository {repo_full_name} not found")
        return self._repositories[repo_full_name]

    def _get_issue(self, repo_full_name: str, issue_number: int) -> Issue:
        repository = self.get_repository(repo_full_name)
        try:
            return repository.get_issue(issue_number)
        except UnknownObjectException:
            raise ValueError(f"Issue #{issue_number} not found in {repo_full_name}")

    def _with_rate_limit_retry(self, action: str, call: Callable[[], T]) -> T:
        """Run an API call, waiting out rate limits a bounded number of times.

        Args:
            action: Description used in console messages
            call: Zero-argument callable performing the request

        Raises:
            RateLimitExceededException: If the limit persists after
                MAX_RATE_LIMIT_RETRIES waits
            ValueError: If repository or issue not found
            Exception: For other API errors
        """
        retries = 0
        while True:
            try:
                return call()
            except RateLimitExceededException:
                retries += 1
                if retries > MAX_RATE_LIMIT_RETRIES:
                    console.print(f"Rate limit still exceeded {action}, giving up")
                    raise
                console.print(f"Rate limit exceeded {action}, waiting...")
                time.sleep(RATE_LIMIT_WAIT_SECONDS)
            except ValueError:
                raise
            except Exception as e:
                console.print(f"Error {action}: {e}")
                raise

    def list_open_issues(self, repo_full_name: str, page: int) -> list[GitHubIssue]:
        """Get one page of open issues and pull requests.

        Items are ordered by creation time, which labelling or commenting
        during the run cannot change, so pages stay stable while the run
        mutates earlier items.

        Args:
            repo_full_name: Repository as ``owner/name``
            page: Zero-based page index

        Returns:
            Items on that page, oldest first. An empty list means there are
            no more pages.
        """

        def fetch() -> list[GitHubIssue]:
            repository = self.get_repository(repo_full_name)
            issues = repository.get_issues(
                state="open", sort="created", direction="asc"
            )
            return [self._convert_issue(issue) for issue in issues.get_page(page)]

        return self._with_rate_limit_retry(
            f"listing issues for {repo_full_name}", fetch
        )

    def get_label_applied_at(
        self, repo_full_name: str, issue_number: int, labels: Iterable[str]
    ) -> datetime | None:
        """Get when any of ``labels`` was most recently added to an issue.

        Args:
            repo_full_name: Repository as ``owner/name``
            issue_number: Issue number
            labels: Label names to look for

        Returns:
            Time of the latest matching ``labeled`` event, or None if the
            issue history has none
        """
        names = set(labels)

        def fetch() -> datetime | None:
            github_issue = self._get_issue(repo_full_name, issue_number)
            applied = [
                ensure_utc(event.created_at)
                for event in github_issue.get_events()
                if event.event == "labeled"
                and event.label is not None
                and event.label.name in names
            ]
            return max(applied) if applied else None

        return self._with_rate_limit_retry(
            f"fetching events for issue #{issue_number}", fetch
        )

    def list_comments_since(
        self, repo_full_name: str, issue_number: int, since: datetime
    ) -> list[IssueUpdate]:
        """Get comments on an issue created strictly after ``since``.

        Args:
            repo_full_name: Repository as ``owner/name``
            issue_number: Issue number
            since: Reference timestamp

        Returns:
            Comments in creation order, including bot comments

        Raises:
            ValueError: If repository or issue not found
            Exception: For other API errors
        """
        since = ensure_utc(since)

        def fetch() -> list[IssueUpdate]:
            github_issue = self._get_issue(repo_full_name, issue_number)
            updates = [
                self._convert_comment(comment)
                for comment in github_issue.get_comments(since=since)
            ]
            return [
                update
                for update in updates
                if update.created_at is None or update.created_at > since
            ]

        return self._with_rate_limit_retry(
            f"fetching comments for issue #{issue_number}", fetch
        )

    def add_label(self, repo_full_name: str, issue_number: int, label: str) -> bool:
        """Add a label to an issue, keeping its other labels.

        Raises:
            ValueError: If repository or issue not found
            Exception: For other API errors
        """

        def apply() -> bool:
            self._get_issue(repo_full_name, issue_number).add_to_labels(label)
            console.print(f"Added label '{label}' to issue #{issue_number}")
            return True

        return self._with_rate_limit_retry(
            f"adding label to issue #{issue_number}", apply
        )

    def remove_label(self, repo_full_name: str, issue_number: int, label: str) -> bool:
        """Remove a label from an issue.

        Raises:
            ValueError: If repository or issue not found
            Exception: For other API errors
        """

        def apply() -> bool:
            self._get_issue(repo_full_name, issue_number).remove_from_labels(label)
            console.print(f"Removed label '{label}' from issue #{issue_number}")
            return True

        return self._with_rate_limit_retry(
            f"removing label from issue #{issue_number}", apply
        )

    def create_comment(self, repo_full_name: str, issue_number: int, body: str) -> bool:
        """Add a comment to an issue.

        Raises:
            ValueError: If repository or issue not found
            Exception: For other API errors
        """

        def apply() -> bool:
            self._get_issue(repo_full_name, issue_number).create_comment(body)
            console.print(f"Added comment to issue #{issue_number}")
            return True

        return self._with_rate_limit_retry(
            f"adding comment to issue #{issue_number}", apply
        )

    def close_issue(self, repo_full_name: str, issue_number: int) -> bool:
        """Close an issue or pull request.

        Raises:
            ValueError: If repository or issue not found
            Exception: For other API errors
        """

        def apply() -> bool:
            self._get_issue(repo_full_name, issue_number).edit(state="closed")
            console.print(f"Closed issue #{issue_number}")
            return True

        return self._with_rate_limit_retry(f"closing issue #{issue_number}", apply)
