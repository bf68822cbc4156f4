"""Configuration model for the stale issue processor."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


def parse_comma_separated(value: str | None) -> list[str]:
    """Split a comma-separated label list, trimming entries and dropping blanks.

    >>> parse_comma_separated("Exempt, Cool, None")
    ['Exempt', 'Cool', 'None']
    """
    if not value:
        return []
    return [entry.strip() for entry in value.split(",") if entry.strip()]


class ProcessorOptions(BaseModel):
    """Options controlling a single stale triage run.

    Thresholds given as negative numbers mean "never" and are stored as
    ``None``. Label lists accept either a comma-separated string or a list.
    """

    model_config = ConfigDict(frozen=True)

    repo_token: str = Field("", description="Opaque credential for the collaborators")
    stale_issue_message: str = Field(
        "", description="Comment posted when an issue is marked stale"
    )
    stale_pr_message: str = Field(
        "", description="Comment posted when a pull request is marked stale"
    )
    days_before_stale: int | None = Field(
        60, description="Idle days before an item is marked stale (None = never)"
    )
    days_before_close: int | None = Field(
        7, description="Idle days before a stale item is closed (None = never)"
    )
    stale_issue_label: str = Field("Stale", description="Label marking stale issues")
    exempt_issue_labels: list[str] = Field(
        default_factory=list, description="Labels that exempt issues from triage"
    )
    stale_pr_label: str = Field("Stale", description="Label marking stale PRs")
    exempt_pr_labels: list[str] = Field(
        default_factory=list, description="Labels that exempt PRs from triage"
    )
    only_labels: list[str] = Field(
        default_factory=list,
        description="When non-empty, only items carrying one of these are triaged",
    )
    operations_per_run: int = Field(
        30, ge=0, description="Maximum remote operations (fetches + mutations)"
    )
    dry_run: bool = Field(False, description="Record decisions without side effects")
    remove_stale_when_updated: bool = Field(
        True, description="Remove the stale label when an item sees new activity"
    )

    @field_validator("days_before_stale", "days_before_close", mode="before")
    @classmethod
    def _never_when_negative(cls, value: object) -> object:
        if value is None:
            return None
        if isinstance(value, str):
            value = int(value.strip())
        if isinstance(value, int) and value < 0:
            return None
        return value

    @field_validator(
        "exempt_issue_labels", "exempt_pr_labels", "only_labels", mode="before"
    )
    @classmethod
    def _split_labels(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            return parse_comma_separated(value)
        if isinstance(value, (list, tuple)):
            return [str(entry).strip() for entry in value if str(entry).strip()]
        return value
