#!/usr/bin/env python3
"""
cli.py
------
Logger setup and resync statistics shared by the CLI commands.

Usage:
    from taxonomy.core.cli import setup_logger, ResyncStats

    logger = setup_logger(log_dir, "taxonomy", verbose=True)
    stats = ResyncStats()
    stats.add_result(result)
    print(stats.summary())
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict

# --- Local imports ---
from taxonomy.core.logging_manager import TaxonomyLogger

if TYPE_CHECKING:
    from taxonomy.relations.engine import SyncResult


def setup_logger(log_dir: Path, component_name: str, verbose: bool = False) -> TaxonomyLogger:
    """
    Create the logger for a CLI run.

    Args:
        log_dir: Directory for the log files, created if missing
        component_name: Component name, also the log file stem
        verbose: Echo log lines to stderr as well

    Returns:
        Configured TaxonomyLogger
    """
    return TaxonomyLogger(Path(log_dir), component_name=component_name, verbose=verbose)


@dataclass
class ResyncStats:
    """
    Counts for one whole-store resync.

    Attributes:
        records_processed: Records read and synced
        records_rewritten: Records whose own lists needed normalizing first
        targets_written: Mirror records rewritten
        targets_failed: Mirror writes that failed
        errors: Records that could not be fully synced
    """

    records_processed: int = 0
    records_rewritten: int = 0
    targets_written: int = 0
    targets_failed: int = 0
    errors: int = 0
    started: float = field(default_factory=time.monotonic, repr=False)

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started

    def add_result(self, result: SyncResult) -> None:
        """Count the writes and failures of one record's sync."""
        self.targets_written += len(result.writes)
        self.targets_failed += len(result.failures)
        if result.failures:
            self.errors += 1

    def summary(self) -> str:
        return (
            f"{self.records_processed} records processed "
            f"({self.records_rewritten} normalized), "
            f"{self.targets_written} mirrors written, "
            f"{self.targets_failed} mirror writes failed, "
            f"{self.errors} errors in {self.elapsed:.2f}s"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Counts for the resync_complete log line."""
        return {
            "records_processed": self.records_processed,
            "records_rewritten": self.records_rewritten,
            "targets_written": self.targets_written,
            "targets_failed": self.targets_failed,
            "errors": self.errors,
            "duration": round(self.elapsed, 3),
        }
