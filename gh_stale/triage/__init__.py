"""Stale triage decision engine."""

from .options import ProcessorOptions, parse_comma_separated
from .processor import IssueMutator, IssueProcessor, IssueRole, RoleSettings

__all__ = [
    "IssueMutator",
    "IssueProcessor",
    "IssueRole",
    "ProcessorOptions",
    "RoleSettings",
    "parse_comma_separated",
]
