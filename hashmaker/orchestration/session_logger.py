"""SessionLogger for logging hashing sessions in formatted output.

This module provides the SessionLogger class that writes a structured log file
with a header, one entry per hashing call, comparison and export, and a final
summary section.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from hashmaker.models import (
    ComparisonResult,
    HashAlgorithm,
    HashReport,
    ReportTarget,
    SessionSummary,
)


class SessionLogger:
    """Logger for hashing sessions with structured output format.

    Usage:
        with SessionLogger(algorithm=HashAlgorithm.SHA256) as logger:
            logger.log_header()
            logger.log_hash_started(path, ReportTarget.PRIMARY)
            logger.log_hash_completed(report, ReportTarget.PRIMARY)
            logger.log_comparison(primary, comparison, result)
            logger.log_export(archive_path)
            logger.log_summary(summary)

    Attributes:
        SEPARATOR: The 65-character separator line used between sections.
    """

    SEPARATOR = "=" * 65

    def __init__(
        self,
        log_file_path: Optional[Path] = None,
        algorithm: HashAlgorithm = HashAlgorithm.SHA256,
    ) -> None:
        """Initialize the SessionLogger.

        Args:
            log_file_path: Optional path for the log file. If not provided,
                generates a timestamped filename in the current directory.
            algorithm: Hash algorithm of the session (used in header).

        Raises:
            OSError: If the log file path is not writable.
        """
        self._algorithm = algorithm
        self._start_timestamp = datetime.now()
        self._file_handle: Optional[TextIO] = None
        self._run_counter = 0

        if log_file_path is None:
            timestamp_str = self._start_timestamp.strftime("%Y-%m-%d_%H-%M-%S")
            self._log_file_path = Path.cwd() / f"hash_log_{timestamp_str}.log"
        else:
            self._log_file_path = Path(log_file_path)

        self._validate_path()

    def _validate_path(self) -> None:
        """Validate that the log file path is writable.

        Raises:
            OSError: If the parent directory doesn't exist or is not writable.
        """
        parent = self._log_file_path.parent
        if not parent.exists():
            raise OSError(f"Parent directory does not exist: {parent}")
        if not parent.is_dir():
            raise OSError(f"Parent path is not a directory: {parent}")
        try:
            test_file = parent / f".hashmaker_test_{id(self)}"
            test_file.touch()
            test_file.unlink()
        except PermissionError:
            raise OSError(f"Permission denied: cannot write to {parent}")

    def __enter__(self) -> "SessionLogger":
        """Open the log file.

        Raises:
            OSError: If the file cannot be opened for writing.
        """
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def open(self) -> None:
        if self._file_handle is not None:
            return
        try:
            self._file_handle = open(self._log_file_path, "w", encoding="utf-8")
        except OSError as e:
            raise OSError(f"Cannot open log file for writing: {e}")

    def close(self) -> None:
        """Close the log file; safe to call more than once."""
        if self._file_handle is not None:
            try:
                self._file_handle.close()
            except OSError as e:
                print(f"Warning: Error closing log file: {e}", file=sys.stderr)
            finally:
                self._file_handle = None

    def get_log_path(self) -> Path:
        return self._log_file_path

    def log_header(self) -> None:
        """Write the title, timestamp and algorithm."""
        self._write_separator()
        self._write_line("HashMaker - Session Log")
        self._write_separator()
        self._write_line(f"Timestamp: {self._format_timestamp(self._start_timestamp)}")
        self._write_line(f"Algorithm: {self._algorithm.label}")
        self._write_line("")

    def log_hash_started(self, path: str, target: ReportTarget) -> None:
        self._run_counter += 1
        self._write_line(
            f"[{self._format_timestamp(datetime.now())}] Run {self._run_counter} "
            f"({target.value}): hashing {path}"
        )

    def log_hash_completed(self, report: HashReport, target: ReportTarget) -> None:
        """Write the result of a successful hashing call."""
        self._write_line(f"Result ({target.value}):", indent=2)
        self._write_line(f"Hash: {report.hash}", indent=4)
        self._write_line(f"Folders: {report.folder_count:,}", indent=4)
        self._write_line(f"Files: {report.file_count:,}", indent=4)
        self._write_line(f"Entries: {len(report.file_hashes):,}", indent=4)
        self._write_line(f"Time taken: {report.time_taken}", indent=4)
        self._write_line("")

    def log_hash_failed(self, path: str, error: str) -> None:
        self._write_line(f"! Hashing failed for {path}", indent=2)
        self._write_line(f"- {error}", indent=4)
        self._write_line("")

    def log_comparison(
        self,
        primary: HashReport,
        comparison: HashReport,
        result: ComparisonResult,
    ) -> None:
        """Write a comparison entry with both hashes and the verdict."""
        self._write_line(f"[{self._format_timestamp(datetime.now())}] Comparison")
        self._write_line(f"Primary: {primary.path}", indent=2)
        self._write_line(primary.hash, indent=4)
        self._write_line(f"Comparison: {comparison.path}", indent=2)
        self._write_line(comparison.hash, indent=4)
        self._write_line(f"Result: {result.value.upper()}", indent=2)
        self._write_line("")

    def log_export(self, archive_path: Path) -> None:
        self._write_line(
            f"[{self._format_timestamp(datetime.now())}] Exported archive: {archive_path}"
        )
        self._write_line("")

    def log_summary(self, summary: SessionSummary) -> None:
        """Write the summary section to the log file."""
        self._write_separator()
        self._write_line("SUMMARY")
        self._write_separator()
        self._write_line(f"Reports generated: {summary.reports_generated}")
        self._write_line(f"Comparisons run: {summary.comparisons_run}")
        self._write_line(f"Failed hashing calls: {summary.failures}")
        self._write_line(f"Archives exported: {summary.archives_exported}")

        if summary.errors:
            self._write_line(f"Total errors: {len(summary.errors)}")
            self._write_line("Errors:")
            for error in summary.errors:
                self._write_line(f"  - {error}")

        if summary.interrupted:
            self._write_line("Session interrupted by user")

        self._write_line(f"Duration: {self._format_duration(summary.duration_seconds)}")
        self._write_line("")
        self._write_line(f"Log file: {self._log_file_path}")
        self._write_separator()

    def _format_duration(self, seconds: float) -> str:
        """Format duration like "45s", "5m 23s" or "1h 5m 30s"."""
        total_seconds = int(seconds)

        if total_seconds < 60:
            return f"{total_seconds}s"

        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        secs = total_seconds % 60

        if hours > 0:
            return f"{hours}h {minutes}m {secs}s"
        return f"{minutes}m {secs}s"

    def _format_timestamp(self, dt: datetime) -> str:
        return dt.strftime("%Y-%m-%d %H:%M:%S")

    def _write_separator(self) -> None:
        self._write_line(self.SEPARATOR)

    def _write_line(self, text: str, indent: int = 0) -> None:
        """Write a line to the log file with optional indentation."""
        if self._file_handle is None:
            print(
                f"Warning: Attempted to write to closed log file: {text}",
                file=sys.stderr,
            )
            return

        try:
            self._file_handle.write(" " * indent + text + "\n")
            self._file_handle.flush()
        except OSError as e:
            print(f"Warning: Error writing to log file: {e}", file=sys.stderr)
