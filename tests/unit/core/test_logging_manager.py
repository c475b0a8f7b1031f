"""
Tests for logging_manager module.

Tests TaxonomyLogger file output, the NullLogger/safe_logger null-safe
pattern, CLI error formatting and handle_cli_error.
"""
import json
import logging

import click
import pytest
from unittest.mock import MagicMock

from taxonomy.core.exceptions import StoreError
from taxonomy.core.logging_manager import (
    NullLogger,
    TaxonomyLogger,
    format_cli_error,
    handle_cli_error,
    safe_logger,
)


def raised(error):
    """Return the error after raising it, so it carries a traceback."""
    try:
        raise error
    except Exception as e:
        return e


class TestTaxonomyLogger:
    """Tests for TaxonomyLogger file handlers."""

    def test_creates_log_directory(self, tmp_path):
        log_dir = tmp_path / "content" / "logs"
        TaxonomyLogger(log_dir, "sync")
        assert log_dir.is_dir()

    def test_operation_written_to_component_log(self, tmp_path):
        """log_operation should write sorted JSON details to <component>.log."""
        logger = TaxonomyLogger(tmp_path, "sync")
        logger.log_operation("sync_relationships", {"writes": 2, "kind": "idea"})

        content = (tmp_path / "sync.log").read_text(encoding="utf-8")
        assert '[sync_relationships] {"kind": "idea", "writes": 2}' in content

    def test_details_are_optional(self, tmp_path):
        logger = TaxonomyLogger(tmp_path, "sync")
        logger.log_info("Resync started")

        content = (tmp_path / "sync.log").read_text(encoding="utf-8")
        assert content.rstrip().endswith("taxonomy.sync: Resync started")

    def test_errors_written_to_errors_log(self, tmp_path):
        """log_error should land in errors.log with its traceback."""
        logger = TaxonomyLogger(tmp_path, "store")
        logger.log_error(raised(StoreError("disk full")), {"operation": "write_mirror"})

        content = (tmp_path / "errors.log").read_text(encoding="utf-8")
        assert "StoreError: disk full" in content
        assert json.dumps({"operation": "write_mirror"}) in content
        assert "Traceback" in content

    def test_info_not_written_to_errors_log(self, tmp_path):
        logger = TaxonomyLogger(tmp_path, "store")
        logger.log_info("Saved idea")
        assert (tmp_path / "errors.log").read_text(encoding="utf-8") == ""

    def test_reinitializing_does_not_duplicate_handlers(self, tmp_path):
        """Creating the same component twice should not stack handlers."""
        TaxonomyLogger(tmp_path, "dup")
        second = TaxonomyLogger(tmp_path, "dup")
        assert len(second.logger.handlers) == 2

    def test_console_only_when_verbose(self, tmp_path):
        def has_console(logger):
            return any(
                type(handler) is logging.StreamHandler for handler in logger.logger.handlers
            )

        assert not has_console(TaxonomyLogger(tmp_path, "quiet"))
        assert has_console(TaxonomyLogger(tmp_path, "loud", verbose=True))

    def test_does_not_propagate(self, tmp_path):
        assert TaxonomyLogger(tmp_path, "sync").logger.propagate is False


class TestFormatCliError:
    def test_one_line(self):
        message = format_cli_error(raised(StoreError("Cannot write _ideas/5.md")))
        assert message == "❌ StoreError: Cannot write _ideas/5.md"

    def test_verbose_adds_traceback(self):
        message = format_cli_error(raised(ValueError("test error")), verbose=True)
        assert message.startswith("❌ ValueError: test error\n")
        assert "Traceback (most recent call last)" in message

    def test_verbose_without_traceback(self):
        assert format_cli_error(ValueError("x"), verbose=True) == "❌ ValueError: x"


class TestNullLogger:
    """Tests for NullLogger class."""

    def test_all_methods_are_no_ops(self):
        """NullLogger methods accept the TaxonomyLogger signatures."""
        logger = NullLogger()
        logger.log_operation("op", {"key": "value"})
        logger.log_error(ValueError("boom"), {"context": "test"})
        logger.log_debug("debug", {"key": "value"})
        logger.log_info("info")
        logger.log_warning("warning", {"key": "value"})


class TestSafeLogger:
    """Tests for safe_logger function."""

    def test_returns_logger_when_provided(self):
        mock_logger = MagicMock(spec=TaxonomyLogger)
        assert safe_logger(mock_logger) is mock_logger

    def test_returns_shared_null_logger_when_none(self):
        first = safe_logger(None)
        assert isinstance(first, NullLogger)
        assert safe_logger(None) is first

    def test_forwards_calls(self):
        """Calls reach the wrapped logger unchanged."""
        mock_logger = MagicMock(spec=TaxonomyLogger)
        details = {"file": "_ideas/5.md"}

        safe_logger(mock_logger).log_operation("save_record", details)
        mock_logger.log_operation.assert_called_once_with("save_record", details)


class TestHandleCliError:
    """Tests for handle_cli_error."""

    def test_logs_echoes_and_exits(self, capsys):
        """Should log through ctx.obj logger, print to stderr, and exit 1."""
        mock_logger = MagicMock(spec=TaxonomyLogger)
        ctx = click.Context(click.Command("test"), obj={"logger": mock_logger})
        error = StoreError("nope")

        with pytest.raises(click.exceptions.Exit) as exc_info:
            handle_cli_error(ctx, error, "delete", {"kind": "idea"})

        assert exc_info.value.exit_code == 1
        mock_logger.log_error.assert_called_once_with(
            error, {"operation": "delete", "kind": "idea"}
        )
        assert "❌ StoreError: nope" in capsys.readouterr().err

    def test_verbose_prints_traceback(self, capsys):
        ctx = click.Context(click.Command("test"), obj={"verbose": True})

        with pytest.raises(click.exceptions.Exit):
            handle_cli_error(ctx, raised(StoreError("nope")), "sync")

        assert "Traceback" in capsys.readouterr().err

    def test_works_without_logger(self, capsys):
        """Missing logger falls back to the null logger."""
        ctx = click.Context(click.Command("test"), obj={})

        with pytest.raises(click.exceptions.Exit) as exc_info:
            handle_cli_error(ctx, StoreError("nope"), "show", exit_code=2)

        assert exc_info.value.exit_code == 2
        assert "StoreError: nope" in capsys.readouterr().err
