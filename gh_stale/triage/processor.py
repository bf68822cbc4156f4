"""Stale issue and pull request processor.

Walks a repository's open items page by page and decides, per item, whether
to mark it stale, remove its stale label, or close it. All remote access goes
through injected async capabilities so the decision logic can be exercised
without a GitHub connection.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol

from ..github_client.models import GitHubIssue, IssueUpdate
from ..utils.dates import days_since, format_timestamp, utc_now
from .options import ProcessorOptions

logger = logging.getLogger(__name__)

PageFetcher = Callable[[int], Awaitable[Sequence[GitHubIssue]]]
UpdateFetcher = Callable[[int, datetime], Awaitable[Sequence[IssueUpdate]]]


class IssueMutator(Protocol):
    """Side effects the processor requests on an item.

    Each call returns the time the mutation took effect. Implementations
    running in dry-run mode skip the remote call but still return a time.
    """

    async def add_label(self, issue: GitHubIssue, label: str) -> datetime: ...

    async def remove_label(self, issue: GitHubIssue, label: str) -> datetime: ...

    async def create_comment(self, issue: GitHubIssue, body: str) -> datetime: ...

    async def close(self, issue: GitHubIssue) -> datetime: ...


class NullMutator:
    """Mutator with no remote effect, used when none is supplied."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock

    async def add_label(self, issue: GitHubIssue, label: str) -> datetime:
        return self._clock()

    async def remove_label(self, issue: GitHubIssue, label: str) -> datetime:
        return self._clock()

    async def create_comment(self, issue: GitHubIssue, body: str) -> datetime:
        return self._clock()

    async def close(self, issue: GitHubIssue) -> datetime:
        return self._clock()


async def _no_updates(issue_number: int, since: datetime) -> list[IssueUpdate]:
    return []


class IssueRole(str, Enum):
    """Whether an item is triaged as an issue or as a pull request."""

    ISSUE = "issue"
    PULL_REQUEST = "pr"

    @classmethod
    def of(cls, issue: GitHubIssue) -> "IssueRole":
        return cls.PULL_REQUEST if issue.is_pull_request else cls.ISSUE


@dataclass(frozen=True)
class RoleSettings:
    """Role-specific slice of the processor options."""

    stale_label: str
    stale_message: str
    exempt_labels: list[str]


def role_settings(options: ProcessorOptions, role: IssueRole) -> RoleSettings:
    """Select the stale label, message and exempt list for a role.

    Issue exempt labels never apply to pull requests and vice versa.
    """
    if role is IssueRole.PULL_REQUEST:
        return RoleSettings(
            stale_label=options.stale_pr_label,
            stale_message=options.stale_pr_message,
            exempt_labels=options.exempt_pr_labels,
        )
    return RoleSettings(
        stale_label=options.stale_issue_label,
        stale_message=options.stale_issue_message,
        exempt_labels=options.exempt_issue_labels,
    )


class IssueProcessor:
    """Applies the stale policy to every open item within an operations budget.

    Every page fetch and every remote action (label add, label removal,
    close, update check) costs one operation. Results of the run are
    collected in ``stale_issues``, ``closed_issues`` and
    ``removed_label_issues``; an item lands in at most one of them.
    """

    def __init__(
        self,
        options: ProcessorOptions,
        get_issues: PageFetcher,
        get_updates_since: UpdateFetcher | None = None,
        mutator: IssueMutator | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.options = options
        self.operations_left = options.operations_per_run
        self._get_issues = get_issues
        self._get_updates_since = (
            get_updates_since if get_updates_since is not None else _no_updates
        )
        self._mutator = mutator if mutator is not None else NullMutator(clock)
        self._clock = clock

        self.stale_issues: list[GitHubIssue] = []
        self.closed_issues: list[GitHubIssue] = []
        self.removed_label_issues: list[GitHubIssue] = []
        self.marked_stale_on: dict[int, datetime] = {}

    async def process_issues(self, operations: int | None = None) -> int:
        """Triage all pages until the data or the budget runs out.

        Args:
            operations: Budget for this run, defaults to
                ``options.operations_per_run``

        Returns:
            Operations left when the run stopped
        """
        if operations is not None:
            self.operations_left = operations

        page = 0
        while True:
            if self.operations_left <= 0:
                logger.warning("Reached max number of operations to process. Exiting.")
                return self.operations_left

            issues = await self._get_issues(page)
            self.operations_left -= 1

            if not issues:
                logger.debug("No more issues found to process. Exiting.")
                return self.operations_left

            logger.debug(f"Processing page {page} with {len(issues)} item(s)")
            for issue in issues:
                if self.operations_left <= 0:
                    break
                await self.process_issue(issue)

            page += 1

    async def process_issue(self, issue: GitHubIssue) -> None:
        """Evaluate a single item against the stale policy."""
        role = IssueRole.of(issue)
        logger.debug(
            f"Found {role.value} #{issue.number} - {issue.title} "
            f"last updated {format_timestamp(issue.updated_at)}"
        )

        if issue.is_closed:
            logger.debug(f"Skipping #{issue.number}: closed")
            return
        if issue.locked:
            logger.debug(f"Skipping #{issue.number}: locked")
            return
        if self.options.only_labels and not any(
            issue.has_label(label) for label in self.options.only_labels
        ):
            logger.debug(f"Skipping #{issue.number}: not in only-labels filter")
            return

        settings = role_settings(self.options, role)
        if any(issue.has_label(label) for label in settings.exempt_labels):
            logger.debug(f"Skipping #{issue.number}: exempt label")
            return

        if issue.has_label(settings.stale_label):
            await self._process_stale_issue(issue, role, settings)
        else:
            await self._process_active_issue(issue, role, settings)

    async def _process_stale_issue(
        self, issue: GitHubIssue, role: IssueRole, settings: RoleSettings
    ) -> None:
        if self.options.remove_stale_when_updated:
            if not self._consume_operation():
                return
            updates = await self._get_updates_since(issue.number, issue.updated_at)
            if any(not update.user.is_bot for update in updates):
                await self._remove_stale_label(issue, role, settings)
                return

        if self.options.days_before_close is None:
            return

        age = days_since(issue.updated_at, self._clock())
        if age < self.options.days_before_close:
            logger.debug(
                f"Stale {role.value} #{issue.number} is {age} day(s) idle, "
                f"closing after {self.options.days_before_close}"
            )
            return

        if not self._consume_operation():
            return
        logger.info(f"Closing stale {role.value} #{issue.number}: {issue.title}")
        await self._mutator.close(issue)
        self.closed_issues.append(issue)

    async def _process_active_issue(
        self, issue: GitHubIssue, role: IssueRole, settings: RoleSettings
    ) -> None:
        if self.options.days_before_stale is None:
            return

        age = days_since(issue.updated_at, self._clock())
        if age < self.options.days_before_stale:
            return

        if not self._consume_operation():
            return
        logger.info(
            f"Marking {role.value} #{issue.number} stale: "
            f"last updated {format_timestamp(issue.updated_at)} ({age} day(s) ago)"
        )
        if settings.stale_message:
            await self._mutator.create_comment(issue, settings.stale_message)
        marked_on = await self._mutator.add_label(issue, settings.stale_label)
        self.marked_stale_on[issue.number] = marked_on
        self.stale_issues.append(issue)

    async def _remove_stale_label(
        self, issue: GitHubIssue, role: IssueRole, settings: RoleSettings
    ) -> None:
        if not self._consume_operation():
            return
        logger.info(
            f"Removing '{settings.stale_label}' from {role.value} #{issue.number}: "
            f"updated since last triage"
        )
        await self._mutator.remove_label(issue, settings.stale_label)
        self.removed_label_issues.append(issue)

    def _consume_operation(self) -> bool:
        if self.operations_left <= 0:
            logger.warning("Reached max number of operations to process. Exiting.")
            return False
        self.operations_left -= 1
        return True
