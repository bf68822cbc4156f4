"""GitHub client package for API interaction."""

from .adapters import GitHubIssueMutator, GitHubIssueSource, GitHubUpdateSource
from .client import GitHubClient
from .models import GitHubIssue, GitHubLabel, GitHubUser, IssueUpdate

__all__ = [
    "GitHubClient",
    "GitHubIssueMutator",
    "GitHubIssueSource",
    "GitHubUpdateSource",
    "GitHubUser",
    "GitHubLabel",
    "GitHubIssue",
    "IssueUpdate",
]
