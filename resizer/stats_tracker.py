"""Statistics tracking for resize runs."""

import logging
import time
from typing import Optional

from resizer.data_models import RunStatistics


class StatsTracker:
    """Accumulates per-file counts, sizes and the elapsed time of a run."""

    def __init__(self):
        """Initialize StatsTracker with zero counters."""
        self._discovered_files = 0
        self._processed_files = 0
        self._failed_files = 0
        self._total_source_bytes = 0
        self._start_time: Optional[float] = None
        logging.debug("StatsTracker initialized")

    def start_timer(self) -> None:
        """Start the overall timer."""
        self._start_time = time.time()

    def record(self, file_size_bytes: int) -> None:
        """
        Record a discovered source file.

        Args:
            file_size_bytes: Size of the source file in bytes
        """
        self._discovered_files += 1
        self._total_source_bytes += file_size_bytes
        logging.debug(f"Added {file_size_bytes} bytes to source size (total: {self._total_source_bytes})")

    def record_processed(self) -> None:
        """Record a file that was re-encoded in this run."""
        self._processed_files += 1
        logging.debug(f"Recorded processed file (total: {self._processed_files})")

    def record_failure(self) -> None:
        """Record a file that could not be re-encoded."""
        self._failed_files += 1
        logging.debug(f"Recorded failed file (total: {self._failed_files})")

    @property
    def discovered_files(self) -> int:
        return self._discovered_files

    @property
    def processed_files(self) -> int:
        return self._processed_files

    @property
    def failed_files(self) -> int:
        return self._failed_files

    def elapsed(self) -> float:
        """Seconds since start_timer, or 0 if the timer was never started."""
        if self._start_time is None:
            return 0.0
        return time.time() - self._start_time

    def finalize(self, dest_root_size_bytes: int, elapsed_seconds: Optional[float] = None) -> RunStatistics:
        """
        Produce the final statistics of the run.

        Args:
            dest_root_size_bytes: Total size of the whole destination tree
            elapsed_seconds: Wall-clock duration (defaults to time since start_timer)

        Returns:
            RunStatistics for the summary report
        """
        if elapsed_seconds is None:
            elapsed_seconds = self.elapsed()

        stats = RunStatistics(
            discovered_files=self._discovered_files,
            processed_files=self._processed_files,
            failed_files=self._failed_files,
            total_source_bytes=self._total_source_bytes,
            total_dest_bytes=dest_root_size_bytes,
            elapsed_seconds=elapsed_seconds,
        )
        logging.info(
            f"Statistics: {stats.discovered_files} discovered, "
            f"{stats.processed_files} minimized, "
            f"{stats.failed_files} failed, "
            f"{stats.total_source_mb:.2f} MB source, "
            f"{stats.total_dest_mb:.2f} MB destination"
        )
        return stats
