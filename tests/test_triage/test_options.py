"""Tests for processor options parsing."""

import pytest
from pydantic import ValidationError

from gh_stale.triage.options import ProcessorOptions, parse_comma_separated


class TestParseCommaSeparated:
    """Test comma-separated label list parsing."""

    def test_trims_whitespace(self) -> None:
        assert parse_comma_separated("Exempt, Cool, None") == ["Exempt", "Cool", "None"]

    def test_without_spaces(self) -> None:
        assert parse_comma_separated("Exempt,Cool,None") == ["Exempt", "Cool", "None"]

    def test_drops_empty_entries(self) -> None:
        assert parse_comma_separated("a,, b ,") == ["a", "b"]

    @pytest.mark.parametrize("value", ["", None, "  "])
    def test_empty_input(self, value: str | None) -> None:
        assert parse_comma_separated(value) == []

    def test_case_is_preserved(self) -> None:
        assert parse_comma_separated("Bug,bug") == ["Bug", "bug"]


class TestProcessorOptions:
    """Test option validation."""

    def test_defaults(self) -> None:
        options = ProcessorOptions()

        assert options.days_before_stale == 60
        assert options.days_before_close == 7
        assert options.stale_issue_label == "Stale"
        assert options.stale_pr_label == "Stale"
        assert options.operations_per_run == 30
        assert options.dry_run is False
        assert options.remove_stale_when_updated is True
        assert options.exempt_issue_labels == []
        assert options.only_labels == []

    @pytest.mark.parametrize("value", [-1, -30, "-1"])
    def test_negative_days_mean_never(self, value: int | str) -> None:
        options = ProcessorOptions(days_before_stale=value, days_before_close=value)

        assert options.days_before_stale is None
        assert options.days_before_close is None

    def test_zero_days_is_a_threshold(self) -> None:
        options = ProcessorOptions(days_before_close=0)

        assert options.days_before_close == 0

    def test_numeric_strings_are_accepted(self) -> None:
        options = ProcessorOptions(days_before_stale=" 14 ", operations_per_run="50")

        assert options.days_before_stale == 14
        assert options.operations_per_run == 50

    def test_non_numeric_threshold_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ProcessorOptions(days_before_stale="soon")

    def test_negative_operations_are_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ProcessorOptions(operations_per_run=-5)

    def test_label_lists_from_strings(self) -> None:
        options = ProcessorOptions(
            exempt_issue_labels="Exempt, Cool, None",
            exempt_pr_labels="wip",
            only_labels="",
        )

        assert options.exempt_issue_labels == ["Exempt", "Cool", "None"]
        assert options.exempt_pr_labels == ["wip"]
        assert options.only_labels == []

    def test_label_lists_from_lists(self) -> None:
        options = ProcessorOptions(exempt_issue_labels=[" pinned ", "", "security"])

        assert options.exempt_issue_labels == ["pinned", "security"]

    def test_options_are_read_only(self) -> None:
        options = ProcessorOptions()

        with pytest.raises(ValidationError):
            options.dry_run = True  # type: ignore[misc]
