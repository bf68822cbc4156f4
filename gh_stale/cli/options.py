"""Standardized CLI option definitions for the stale triage command.

Every option can also be supplied through the environment. The ``INPUT_*``
names are the variables GitHub Actions sets for action inputs, so the same
command runs unchanged inside a workflow.
"""

import typer

# Target options
REPO_OPTION = typer.Option(
    ...,
    "--repo",
    "-r",
    envvar="GITHUB_REPOSITORY",
    help="Repository to triage as OWNER/NAME",
)

TOKEN_OPTION = typer.Option(
    None,
    "--token",
    "-t",
    envvar=["INPUT_REPO-TOKEN", "GITHUB_TOKEN"],
    help="GitHub API token (defaults to GITHUB_TOKEN env var)",
)

# Message options
STALE_ISSUE_MESSAGE_OPTION = typer.Option(
    "",
    "--stale-issue-message",
    envvar="INPUT_STALE-ISSUE-MESSAGE",
    help="Comment posted when an issue is marked stale",
)

STALE_PR_MESSAGE_OPTION = typer.Option(
    "",
    "--stale-pr-message",
    envvar="INPUT_STALE-PR-MESSAGE",
    help="Comment posted when a pull request is marked stale",
)

# Threshold options
DAYS_BEFORE_STALE_OPTION = typer.Option(
    60,
    "--days-before-stale",
    envvar="INPUT_DAYS-BEFORE-STALE",
    help="Idle days before an item is marked stale (negative = never)",
)

DAYS_BEFORE_CLOSE_OPTION = typer.Option(
    7,
    "--days-before-close",
    envvar="INPUT_DAYS-BEFORE-CLOSE",
    help="Idle days before a stale item is closed (negative = never)",
)

# Label options
STALE_ISSUE_LABEL_OPTION = typer.Option(
    "Stale",
    "--stale-issue-label",
    envvar="INPUT_STALE-ISSUE-LABEL",
    help="Label applied to stale issues",
)

EXEMPT_ISSUE_LABELS_OPTION = typer.Option(
    "",
    "--exempt-issue-labels",
    envvar="INPUT_EXEMPT-ISSUE-LABELS",
    help="Comma-separated labels that exempt issues from triage",
)

STALE_PR_LABEL_OPTION = typer.Option(
    "Stale",
    "--stale-pr-label",
    envvar="INPUT_STALE-PR-LABEL",
    help="Label applied to stale pull requests",
)

EXEMPT_PR_LABELS_OPTION = typer.Option(
    "",
    "--exempt-pr-labels",
    envvar="INPUT_EXEMPT-PR-LABELS",
    help="Comma-separated labels that exempt pull requests from triage",
)

ONLY_LABELS_OPTION = typer.Option(
    "",
    "--only-labels",
    envvar="INPUT_ONLY-LABELS",
    help="Comma-separated labels; when set, only items with one of them are triaged",
)

# Behavior options
OPERATIONS_PER_RUN_OPTION = typer.Option(
    30,
    "--operations-per-run",
    envvar="INPUT_OPERATIONS-PER-RUN",
    help="Maximum GitHub operations (fetches and mutations) per run",
)

DRY_RUN_OPTION = typer.Option(
    False,
    "--dry-run/--no-dry-run",
    "-d",
    envvar=["INPUT_DRY-RUN", "INPUT_DEBUG-ONLY"],
    help="Preview changes without applying them",
)

REMOVE_STALE_WHEN_UPDATED_OPTION = typer.Option(
    True,
    "--remove-stale-when-updated/--keep-stale-when-updated",
    envvar="INPUT_REMOVE-STALE-WHEN-UPDATED",
    help="Remove the stale label when an item receives new comments",
)

VERBOSE_OPTION = typer.Option(
    False, "--verbose", "-v", help="Log every triage decision"
)
