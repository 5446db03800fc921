"""Per-file table and final summary output."""

import json
import sys
from pathlib import Path
from typing import Optional, TextIO

from resizer.data_models import BYTES_PER_MB, RunStatistics

RULE_WIDTH = 105


def section_rule(title: str) -> str:
    """Return a section heading like '====== SUMMARY ====...'."""
    return f"====== {title} ".ljust(RULE_WIDTH, "=")


def format_megabytes(size_bytes: int) -> str:
    return f"{size_bytes / BYTES_PER_MB:.2f} MB"


def format_elapsed(seconds: float) -> str:
    """
    Format an elapsed time for the summary.

    Args:
        seconds: Elapsed time in seconds

    Returns:
        "45 seconds", "2 minutes" or "2 minutes and 5 seconds"
    """
    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds} seconds"
    minutes, secs = divmod(seconds, 60)
    if secs > 0:
        return f"{minutes} minutes and {secs} seconds"
    return f"{minutes} minutes"


class FileTable:
    """Table of the files re-encoded during the run."""

    ROW_FORMAT = "{:<50} {:<31} {:<30}"

    def __init__(self, enabled: bool = True, stream: Optional[TextIO] = None):
        """
        Initialize the table.

        Args:
            enabled: Whether anything is printed (False in quiet and JSON mode)
            stream: Output stream (defaults to stdout)
        """
        self.enabled = enabled
        self.stream = stream

    def header(self) -> None:
        self._write_line(section_rule("PROCESS"))
        self._write_line(self.ROW_FORMAT.format("File", "Source", "Minimized"))

    def add_row(self, relative_path: Path, source_size: int, dest_size: int) -> None:
        self._write_line(self.ROW_FORMAT.format(
            str(relative_path), format_megabytes(source_size), format_megabytes(dest_size)
        ))

    def add_failure(self, relative_path: Path, source_size: int) -> None:
        self._write_line(self.ROW_FORMAT.format(
            str(relative_path), format_megabytes(source_size), "FAILED"
        ))

    def _write_line(self, text: str) -> None:
        if not self.enabled:
            return
        stream = self.stream or sys.stdout
        # Leading carriage return overwrites a progress bar drawn on this line
        stream.write(f"\r{text}\n")
        stream.flush()


class SummaryReporter:
    """Renders the final run summary as text or as a single JSON record."""

    def __init__(self, json_output: bool = False, quiet: bool = False, stream: Optional[TextIO] = None):
        """
        Initialize the reporter. The output mode is fixed for the whole run.

        Args:
            json_output: Emit one JSON record instead of human-readable text
            quiet: Suppress the human-readable summary
            stream: Output stream (defaults to stdout)
        """
        self.json_output = json_output
        self.quiet = quiet
        self.stream = stream

    def report(self, stats: RunStatistics) -> None:
        """Print the summary for the finished run."""
        if self.json_output:
            self._print(self.to_json(stats))
        elif not self.quiet:
            self._print(self.to_text(stats))

    @staticmethod
    def to_record(stats: RunStatistics) -> dict:
        return {
            "processed_files": stats.discovered_files,
            "minimized_files": stats.processed_files,
            "elapsed_time": int(stats.elapsed_seconds),
            "total_source_size": stats.total_source_mb,
            "total_minimized_size": stats.total_dest_mb,
        }

    @classmethod
    def to_json(cls, stats: RunStatistics) -> str:
        return json.dumps(cls.to_record(stats))

    @staticmethod
    def to_text(stats: RunStatistics) -> str:
        lines = [
            section_rule("SUMMARY"),
            f"Processed files:       {stats.discovered_files}",
            f"Minimized files:       {stats.processed_files}",
        ]
        if stats.failed_files > 0:
            lines.append(f"Failed files:          {stats.failed_files}")
        lines.extend([
            f"Total execution time:  {format_elapsed(stats.elapsed_seconds)}",
            f"Total Source Size:     {stats.total_source_mb:.2f} MB",
            f"Total Minimized Size:  {stats.total_dest_mb:.2f} MB",
        ])
        return "\n".join(lines)

    def _print(self, text: str) -> None:
        stream = self.stream or sys.stdout
        stream.write(text + "\n")
        stream.flush()
