"""CLI command running one stale triage pass over a repository."""

import asyncio
import logging

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..github_client.adapters import (
    GitHubIssueMutator,
    GitHubIssueSource,
    GitHubUpdateSource,
)
from ..github_client.client import GitHubClient
from ..github_client.models import GitHubIssue
from ..triage.options import ProcessorOptions
from ..triage.processor import IssueProcessor
from .options import (
    DAYS_BEFORE_CLOSE_OPTION,
    DAYS_BEFORE_STALE_OPTION,
    DRY_RUN_OPTION,
    EXEMPT_ISSUE_LABELS_OPTION,
    EXEMPT_PR_LABELS_OPTION,
    ONLY_LABELS_OPTION,
    OPERATIONS_PER_RUN_OPTION,
    REMOVE_STALE_WHEN_UPDATED_OPTION,
    REPO_OPTION,
    STALE_ISSUE_LABEL_OPTION,
    STALE_ISSUE_MESSAGE_OPTION,
    STALE_PR_LABEL_OPTION,
    STALE_PR_MESSAGE_OPTION,
    TOKEN_OPTION,
    VERBOSE_OPTION,
)

console = Console()


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    # PyGitHub and urllib3 are noisy at debug level
    logging.getLogger("github").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def run(
    repo: str = REPO_OPTION,
    token: str | None = TOKEN_OPTION,
    stale_issue_message: str = STALE_ISSUE_MESSAGE_OPTION,
    stale_pr_message: str = STALE_PR_MESSAGE_OPTION,
    days_before_stale: int = DAYS_BEFORE_STALE_OPTION,
    days_before_close: int = DAYS_BEFORE_CLOSE_OPTION,
    stale_issue_label: str = STALE_ISSUE_LABEL_OPTION,
    exempt_issue_labels: str = EXEMPT_ISSUE_LABELS_OPTION,
    stale_pr_label: str = STALE_PR_LABEL_OPTION,
    exempt_pr_labels: str = EXEMPT_PR_LABELS_OPTION,
    only_labels: str = ONLY_LABELS_OPTION,
    operations_per_run: int = OPERATIONS_PER_RUN_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    remove_stale_when_updated: bool = REMOVE_STALE_WHEN_UPDATED_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Mark, un-mark and close stale issues and pull requests.

    Open items idle for --days-before-stale days get the stale label and
    message. Stale items idle for a further --days-before-close days are
    closed. With --remove-stale-when-updated, new comments on a stale item
    remove its stale label instead. The whole run is capped at
    --operations-per-run GitHub calls.

    Examples:
        # Preview what would happen
        gh-stale run --repo myorg/myrepo --dry-run -v

        # Never close, only label
        gh-stale run --repo myorg/myrepo --days-before-close -1 \\
            --stale-issue-message "This issue has been inactive for a while."

        # Inside a GitHub Actions workflow, inputs are read from INPUT_* variables
        gh-stale run
    """
    if "/" not in repo:
        console.print("❌ [red]Error: --repo must be in OWNER/NAME form[/red]")
        raise typer.Exit(1)

    try:
        options = ProcessorOptions(
            repo_token=token or "",
            stale_issue_message=stale_issue_message,
            stale_pr_message=stale_pr_message,
            days_before_stale=days_before_stale,
            days_before_close=days_before_close,
            stale_issue_label=stale_issue_label,
            exempt_issue_labels=exempt_issue_labels,
            stale_pr_label=stale_pr_label,
            exempt_pr_labels=exempt_pr_labels,
            only_labels=only_labels,
            operations_per_run=operations_per_run,
            dry_run=dry_run,
            remove_stale_when_updated=remove_stale_when_updated,
        )
    except ValidationError as e:
        console.print(f"❌ [red]Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    configure_logging(verbose)

    if options.dry_run:
        console.print(
            "⚠️  [yellow]Dry run enabled - no labels, comments or closes "
            "will be sent[/yellow]"
        )

    try:
        processor = build_processor(options, repo, token)
        operations_left = asyncio.run(processor.process_issues())
    except KeyboardInterrupt:
        console.print("\n❌ [yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"❌ [red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"❌ [red]Unexpected error: {escape(str(e))}[/red]")
        console.print("Please check your GitHub token and network connection.")
        raise typer.Exit(1)

    print_summary(processor, operations_left)


def build_processor(
    options: ProcessorOptions, repo: str, token: str | None
) -> IssueProcessor:
    """Wire the GitHub-backed capabilities into a processor."""
    client = GitHubClient(token=token)
    return IssueProcessor(
        options,
        GitHubIssueSource(client, repo),
        GitHubUpdateSource(
            client,
            repo,
            stale_labels={options.stale_issue_label, options.stale_pr_label},
        ),
        GitHubIssueMutator(client, repo, dry_run=options.dry_run),
    )


def _issue_table(title: str, issues: list[GitHubIssue]) -> Table:
    table = Table(title=title)
    table.add_column("Issue #", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Title", style="white")

    for issue in issues:
        table.add_row(
            str(issue.number),
            "PR" if issue.is_pull_request else "Issue",
            issue.title[:50] + "..." if len(issue.title) > 50 else issue.title,
        )
    return table


def print_summary(processor: IssueProcessor, operations_left: int) -> None:
    """Render the run's outcome."""
    results = [
        ("Marked Stale", processor.stale_issues),
        ("Closed", processor.closed_issues),
        ("Stale Label Removed", processor.removed_label_issues),
    ]

    for title, issues in results:
        if issues:
            console.print(_issue_table(title, issues))

    console.print(
        f"📊 Marked stale: {len(processor.stale_issues)}, "
        f"closed: {len(processor.closed_issues)}, "
        f"un-staled: {len(processor.removed_label_issues)}"
    )
    console.print(f"🔢 Operations left: {operations_left}")
