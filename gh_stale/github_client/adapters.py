"""Async capabilities backed by the GitHub client.

The processor expects awaitable capabilities; PyGitHub is blocking, so each
call is pushed onto a worker thread with ``asyncio.to_thread``. The processor
awaits them one at a time, so only one request is ever in flight.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from ..utils.dates import format_timestamp, utc_now
from .client import GitHubClient
from .models import GitHubIssue, IssueUpdate

logger = logging.getLogger(__name__)


class GitHubIssueSource:
    """Page fetch capability: zero-based page index to open items."""

    def __init__(self, client: GitHubClient, repo: str):
        self.client = client
        self.repo = repo

    async def __call__(self, page: int) -> list[GitHubIssue]:
        logger.debug(f"Fetching page {page} of open issues for {self.repo}")
        return await asyncio.to_thread(self.client.list_open_issues, self.repo, page)


class GitHubUpdateSource:
    """Update check capability: human comments newer than a timestamp.

    Commenting on an item moves its ``updated_at`` forward, so when the item
    carries one of ``stale_labels`` the reference time is taken from when that
    label was applied instead. ``since`` is only the fallback for items whose
    history has no such event. Comments by bot accounts are dropped so the
    stale bot's own comment never counts as activity.
    """

    def __init__(
        self, client: GitHubClient, repo: str, stale_labels: Iterable[str] = ()
    ):
        self.client = client
        self.repo = repo
        self.stale_labels = frozenset(stale_labels)

    async def _reference_time(self, issue_number: int, since: datetime) -> datetime:
        if not self.stale_labels:
            return since
        labeled_at = await asyncio.to_thread(
            self.client.get_label_applied_at,
            self.repo,
            issue_number,
            self.stale_labels,
        )
        return labeled_at if labeled_at is not None else since

    async def __call__(self, issue_number: int, since: datetime) -> list[IssueUpdate]:
        since = await self._reference_time(issue_number, since)
        logger.debug(
            f"Checking #{issue_number} for comments since {format_timestamp(since)}"
        )
        updates = await asyncio.to_thread(
            self.client.list_comments_since, self.repo, issue_number, since
        )
        return [update for update in updates if not update.user.is_bot]


class GitHubIssueMutator:
    """Mutation capability applying labels, comments and closes on GitHub.

    In dry-run mode nothing is sent; the suppressed call is logged and the
    current time is returned as the effective time.
    """

    def __init__(
        self,
        client: GitHubClient,
        repo: str,
        dry_run: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.client = client
        self.repo = repo
        self.dry_run = dry_run
        self._clock = clock

    async def _apply(self, description: str, func: Callable[..., bool], *args) -> datetime:
        if self.dry_run:
            logger.info(f"[dry-run] Skipping {description}")
            return self._clock()
        await asyncio.to_thread(func, self.repo, *args)
        return self._clock()

    async def add_label(self, issue: GitHubIssue, label: str) -> datetime:
        return await self._apply(
            f"add label '{label}' to #{issue.number}",
            self.client.add_label,
            issue.number,
            label,
        )

    async def remove_label(self, issue: GitHubIssue, label: str) -> datetime:
        return await self._apply(
            f"remove label '{label}' from #{issue.number}",
            self.client.remove_label,
            issue.number,
            label,
        )

    async def create_comment(self, issue: GitHubIssue, body: str) -> datetime:
        return await self._apply(
            f"comment on #{issue.number}",
            self.client.create_comment,
            issue.number,
            body,
        )

    async def close(self, issue: GitHubIssue) -> datetime:
        return await self._apply(
            f"close #{issue.number}", self.client.close_issue, issue.number
        )
