"""Unit tests for CLI error handling."""

import click
import pytest

from agency_finance.cli.error_handlers import (
    ConfigurationError,
    handle_cli_error,
    with_error_handling,
)
from agency_finance.exceptions import (
    FinanceEngineError,
    LedgerWriteError,
    NotFoundError,
    ValidationError,
)


class TestHandleCliError:
    """Test exit codes and messages chosen for each error type."""

    @pytest.mark.parametrize(
        "error, exit_code",
        [
            (ConfigurationError("No snapshot file given"), 1),
            (NotFoundError("Project", "p-404"), 2),
            (ValidationError("Amount must be positive"), 3),
            (LedgerWriteError("Ledger unavailable"), 4),
            (FinanceEngineError("Something failed"), 5),
            (click.Abort(), 130),
            (RuntimeError("boom"), 255),
        ],
    )
    def test_exit_codes(self, error, exit_code):
        assert handle_cli_error(error) == exit_code

    def test_not_found_message_and_hint(self, capsys):
        handle_cli_error(NotFoundError("Milestone", "m-9"))

        output = capsys.readouterr().out
        assert "Not Found: Milestone not found: m-9" in output
        assert "Hint: Check that the milestone id is correct" in output

    def test_unexpected_error_suggests_debug(self, capsys):
        handle_cli_error(RuntimeError("boom"))

        output = capsys.readouterr().out
        assert "Unexpected Error: RuntimeError" in output
        assert "--debug" in output

    def test_unexpected_error_with_debug_prints_trace(self, capsys):
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            handle_cli_error(e, debug=True)

        assert "Full stack trace" in capsys.readouterr().out


class TestWithErrorHandling:
    """Test the with_error_handling context manager."""

    def test_converts_error_to_exit(self):
        with pytest.raises(SystemExit) as exc_info:
            with with_error_handling():
                raise ValidationError("bad value")

        assert exc_info.value.code == 3

    def test_passes_through_without_error(self):
        with with_error_handling():
            result = 42

        assert result == 42

    def test_system_exit_propagates_unchanged(self):
        with pytest.raises(SystemExit) as exc_info:
            with with_error_handling():
                raise SystemExit(0)

        assert exc_info.value.code == 0
