#!/usr/bin/env python3
"""
logging_manager.py
------------------
Logging for store writes, relationship syncs and CLI commands.

Each TaxonomyLogger owns one stdlib logger with two rotating files in its
log directory:

    <component>.log   every message from DEBUG up
    errors.log        errors only, with tracebacks

Messages take an optional details mapping, appended as sorted JSON so log
lines can be grepped by operation name and parsed back. With `verbose`
the same lines are also echoed to stderr (the CLI's -v flag).

Code that may run without a logger calls `safe_logger(logger)`, which hands
back a shared NullLogger instead of None.

Usage:
    logger = TaxonomyLogger(log_dir, "sync")
    logger.log_operation("sync_relationships", {"kind": "idea", "writes": 2})

    safe_logger(maybe_logger).log_debug("Saved idea", {"file": "_ideas/5.md"})
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
import logging
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

# --- Third party imports ---
import click

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class TaxonomyLogger:
    """
    File logger for one taxonomy component.

    Attributes:
        log_dir: Directory holding the log files
        component_name: Component name, also the component log's file stem
        logger: Underlying stdlib logger
    """

    def __init__(
        self,
        log_dir: Path,
        component_name: str = "taxonomy",
        verbose: bool = False,
        max_bytes: int = 1024 * 1024,
        backup_count: int = 3,
    ) -> None:
        self.log_dir = Path(log_dir)
        self.component_name = component_name
        self.log_dir.mkdir(parents=True, exist_ok=True)

        name = "taxonomy" if component_name == "taxonomy" else f"taxonomy.{component_name}"
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        # A second logger for the same component replaces the first one's files
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        for filename, level in (
            (f"{component_name}.log", logging.DEBUG),
            ("errors.log", logging.ERROR),
        ):
            handler = RotatingFileHandler(
                self.log_dir / filename,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            handler.setLevel(level)
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

        if verbose:
            console = logging.StreamHandler()
            console.setLevel(logging.DEBUG)
            console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
            self.logger.addHandler(console)

    def _emit(
        self,
        level: int,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        if details:
            message = f"{message} {json.dumps(details, default=str, sort_keys=True)}"
        self.logger.log(level, message, exc_info=error)

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Log a completed operation, e.g. `[sync_relationships] {"writes": 2}`."""
        self._emit(logging.INFO, f"[{operation}]", details)

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        """Log an exception with its context; the traceback goes to errors.log."""
        self._emit(logging.ERROR, f"{type(error).__name__}: {error}", context, error)

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self._emit(logging.DEBUG, message, details)

    def log_info(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self._emit(logging.INFO, message, details)

    def log_warning(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self._emit(logging.WARNING, message, details)


class NullLogger:
    """Logger with TaxonomyLogger's methods, all of them no-ops."""

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_info(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_warning(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass


_null_logger = NullLogger()


def safe_logger(logger: Optional[TaxonomyLogger]) -> TaxonomyLogger:
    """
    Return the provided logger or the shared null logger if None.

    Instead of:
        if logger:
            logger.log_info("message")

    Use:
        safe_logger(logger).log_info("message")
    """
    return logger if logger is not None else _null_logger  # type: ignore[return-value]


# ----- CLI -----

def format_cli_error(error: BaseException, verbose: bool = False) -> str:
    """
    One-line CLI message for an error, plus its traceback when verbose.

    Examples:
        >>> format_cli_error(ValueError("Cannot write _ideas/5.md"))
        '❌ ValueError: Cannot write _ideas/5.md'
    """
    message = f"❌ {type(error).__name__}: {error}"
    if verbose and error.__traceback__ is not None:
        trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        message = f"{message}\n\n{trace}"
    return message


def handle_cli_error(
    ctx: click.Context,
    error: Exception,
    operation: str,
    additional_context: Optional[Dict[str, Any]] = None,
    exit_code: int = 1,
) -> None:
    """
    Log a failed command, print it to stderr and exit.

    Uses the logger and verbose flag stored in `ctx.obj`; never returns.

    Args:
        ctx: Click context of the failing command
        error: Exception that stopped the command
        operation: Command name (e.g. 'sync', 'delete')
        additional_context: Extra fields for the log (kind, id, ...)
        exit_code: Process exit code (default: 1)
    """
    obj = ctx.obj or {}
    context: Dict[str, Any] = {"operation": operation}
    context.update(additional_context or {})

    safe_logger(obj.get("logger")).log_error(error, context)
    click.echo(format_cli_error(error, obj.get("verbose", False)), err=True)
    ctx.exit(exit_code)
