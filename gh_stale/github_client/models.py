"""Pydantic models for GitHub data structures used by stale triage.

These models map onto GitHub's REST API v3 response structures.
API Reference: https://docs.github.com/en/rest/issues
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.dates import ensure_utc, parse_timestamp

BOT_USER_TYPE = "Bot"


def _to_utc(value: object) -> object:
    """Parse timestamp strings and pin naive datetimes to UTC."""
    if isinstance(value, str):
        return parse_timestamp(value)
    if isinstance(value, datetime):
        return ensure_utc(value)
    return value


class GitHubUser(BaseModel):
    """GitHub user model representing a user account.

    Maps to GitHub REST API User object.
    API Reference: https://docs.github.com/en/rest/users/users
    """

    model_config = ConfigDict(frozen=True)

    login: str = Field("", description="GitHub username/login (string)")
    id: int | None = Field(None, description="Unique user identifier (integer)")
    type: str = Field(
        "User", description="Account type: 'User', 'Organization' or 'Bot' (string)"
    )

    @property
    def is_bot(self) -> bool:
        """Whether the account is an automation identity."""
        return self.type == BOT_USER_TYPE


class GitHubLabel(BaseModel):
    """GitHub label model representing repository labels.

    Maps to GitHub REST API Label object.
    API Reference: https://docs.github.com/en/rest/issues/labels
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Name of the label (string)")
    color: str | None = Field(
        None, description="Hexadecimal color code without leading # (string)"
    )
    description: str | None = Field(
        None, description="Short description of the label (string, max 100 characters)"
    )


class GitHubIssue(BaseModel):
    """GitHub issue or pull request as seen by the stale processor.

    Maps to GitHub REST API Issue object. Pull requests are returned by the
    issues endpoint too and are told apart by the ``pull_request`` sub-object.
    API Reference: https://docs.github.com/en/rest/issues/issues
    """

    model_config = ConfigDict(frozen=True)

    number: int = Field(..., description="Issue number within the repository (integer)")
    title: str = Field("", description="Short description/title of the issue (string)")
    labels: list[GitHubLabel] = Field(
        default_factory=list, description="Array of labels attached to the issue"
    )
    updated_at: datetime = Field(
        ..., description="Timestamp of last issue update (ISO 8601)"
    )
    pull_request: dict[str, Any] | None = Field(
        None, description="Present only when the item is a pull request"
    )
    state: str = Field("open", description="Current state: 'open', 'closed' (string)")
    locked: bool = Field(False, description="Whether conversation is locked")

    @field_validator("updated_at", mode="before")
    @classmethod
    def _parse_updated_at(cls, value: object) -> object:
        return _to_utc(value)

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None

    @property
    def is_closed(self) -> bool:
        return self.state == "closed"

    @property
    def label_names(self) -> list[str]:
        return [label.name for label in self.labels]

    def has_label(self, name: str) -> bool:
        """Exact, case-sensitive label membership test."""
        return any(label.name == name for label in self.labels)


class IssueUpdate(BaseModel):
    """An update event on an issue, currently an issue comment.

    Maps to GitHub REST API Issue Comment object.
    API Reference: https://docs.github.com/en/rest/issues/comments
    """

    id: int | None = Field(None, description="Unique comment identifier (integer)")
    user: GitHubUser = Field(
        default_factory=GitHubUser, description="Author of the update"
    )
    created_at: datetime | None = Field(
        None, description="Timestamp of the update (ISO 8601)"
    )

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_created_at(cls, value: object) -> object:
        return _to_utc(value)
