"""Tests for job-id argument parsing."""

import pytest

from dirsave.cli_ids import JobIdSyntaxError, parse_arguments, parse_job_ids


class TestParseJobIds:
    """Test the accepted job selection forms."""

    def test_single(self):
        """Test a single id."""
        assert parse_job_ids("3") == [3]

    def test_list_keeps_order(self):
        """Test a semicolon list."""
        assert parse_job_ids("5;1;3") == [5, 1, 3]

    def test_range(self):
        """Test an inclusive range."""
        assert parse_job_ids("1-5") == [1, 2, 3, 4, 5]
        assert parse_job_ids("2-2") == [2]

    def test_whitespace(self):
        """Test that whitespace around ids is ignored."""
        assert parse_job_ids(" 1 ; 2 ") == [1, 2]

    @pytest.mark.parametrize("argument", [None, "", "   "])
    def test_missing(self, argument):
        """Test that an empty selection is rejected."""
        with pytest.raises(JobIdSyntaxError):
            parse_job_ids(argument)

    @pytest.mark.parametrize("argument", ["abc", "1;x", "1-2-3", "5-1", "-3", "1;", "1.5", "٣"])
    def test_malformed(self, argument):
        """Test malformed selections."""
        with pytest.raises(JobIdSyntaxError):
            parse_job_ids(argument)

    def test_is_value_error(self):
        """Test that syntax errors are ValueErrors."""
        with pytest.raises(ValueError):
            parse_job_ids("x")


class TestParseArguments:
    """Test parsing from an argument list."""

    def test_uses_first_argument(self):
        """Test that the first argument is the selection."""
        assert parse_arguments(["1;2", "ignored"]) == [1, 2]

    @pytest.mark.parametrize("args", [None, []])
    def test_no_arguments(self, args):
        """Test that no arguments is an error."""
        with pytest.raises(JobIdSyntaxError):
            parse_arguments(args)
