"""Tests for CLI argument parser functionality.

Tests cover parser creation, the custom argument types and subcommand
defaults.
"""

import argparse
from datetime import date

import pytest

from bimcall.cli.parser import (
    create_parser,
    parse_attendee,
    parse_date,
    parse_occurrence_count,
    parse_time,
)


class TestCreateParser:
    """Test suite for create_parser function."""

    def test_create_parser_returns_argument_parser(self):
        """Test that create_parser returns a properly configured ArgumentParser."""
        parser = create_parser()

        assert isinstance(parser, argparse.ArgumentParser)
        assert "BIMCall" in parser.description
        assert parser.epilog is not None

    def test_command_is_required(self, capsys):
        """Test that running without a subcommand is an error."""
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args([])
        assert exc_info.value.code == 2

    def test_global_logging_flags(self):
        """Test logging flags are parsed before the subcommand."""
        args = create_parser().parse_args(
            ["--log-level", "debug", "-v", "--no-log-colors", "--config", "c.yaml", "parse", "a.ics"]
        )

        assert args.log_level == "DEBUG"
        assert args.verbose is True
        assert args.no_log_colors is True
        assert args.config == "c.yaml"
        assert args.command == "parse"

    def test_occurrences_defaults(self):
        """Test weekly and six occurrences by default."""
        args = create_parser().parse_args(["occurrences", "2024-01-01"])

        assert args.start == date(2024, 1, 1)
        assert args.rule == "weekly"
        assert args.count == 6

    def test_occurrences_rejects_unknown_rule(self, capsys):
        """Test that only supported recurrence rules are accepted."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["occurrences", "2024-01-01", "--rule", "daily"])

    def test_export_collects_attendees(self):
        """Test --attendee can be repeated."""
        args = create_parser().parse_args(
            [
                "export",
                "--attendee",
                "Ana Lima <ana@example.com>",
                "--attendee",
                "ben@example.com",
            ]
        )

        assert [a.email for a in args.attendee] == ["ana@example.com", "ben@example.com"]
        assert [a.name for a in args.attendee] == ["Ana Lima", "ben"]

    def test_import_flags(self):
        """Test import options."""
        args = create_parser().parse_args(
            ["import", "cal.ics", "--project-id", "p-1", "--count", "10", "--sync-duplicates", "--dry-run"]
        )

        assert args.project_id == "p-1"
        assert args.count == 10
        assert args.sync_duplicates is True
        assert args.no_duplicate_check is False
        assert args.dry_run is True


class TestArgumentTypes:
    """Test the custom argparse type functions."""

    def test_parse_date_valid(self):
        """Test ISO dates are accepted."""
        assert parse_date("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize("value", ["2024/01/01", "01-02-2024", "2023-02-29"])
    def test_parse_date_invalid(self, value):
        """Test malformed and impossible dates are rejected."""
        with pytest.raises(argparse.ArgumentTypeError):
            parse_date(value)

    @pytest.mark.parametrize("value,expected", [("9:05", "09:05"), ("23:59", "23:59")])
    def test_parse_time_valid(self, value, expected):
        """Test times are normalised to HH:MM."""
        assert parse_time(value) == expected

    @pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "10"])
    def test_parse_time_invalid(self, value):
        """Test out-of-range and malformed times are rejected."""
        with pytest.raises(argparse.ArgumentTypeError):
            parse_time(value)

    @pytest.mark.parametrize("value", ["1", "53", "six"])
    def test_parse_occurrence_count_invalid(self, value):
        """Test counts outside 2-52 are rejected."""
        with pytest.raises(argparse.ArgumentTypeError):
            parse_occurrence_count(value)

    def test_parse_occurrence_count_bounds(self):
        """Test the inclusive bounds."""
        assert parse_occurrence_count("2") == 2
        assert parse_occurrence_count("52") == 52

    def test_parse_attendee_invalid(self):
        """Test a value without an email address is rejected."""
        with pytest.raises(argparse.ArgumentTypeError):
            parse_attendee("Just A Name")
