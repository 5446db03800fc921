"""Data models and dataclasses for the video resizer."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True)
class RunConfiguration:
    """Immutable inputs for one resize run."""
    source_dir: Path
    dest_dir: Path
    max_dimension: int = 800
    compression: int = 23
    output_format: str = "mp4"  # without leading dot
    quiet: bool = False
    json_output: bool = False

    @property
    def show_output(self) -> bool:
        """Whether human-readable output (progress, table, summary) is shown."""
        return not self.quiet and not self.json_output


@dataclass(frozen=True)
class FileTask:
    """One discovered source video and where its resized copy goes."""
    source_path: Path
    relative_path: Path
    dest_path: Path


@dataclass
class TranscodeResult:
    """Result of transcoding a single video."""
    success: bool
    source_size: int = 0
    dest_size: int = 0
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, source_size: int, dest_size: int) -> "TranscodeResult":
        return cls(True, source_size, dest_size)

    @classmethod
    def failed(cls, reason: str) -> "TranscodeResult":
        return cls(False, error_message=reason)


@dataclass
class RunStatistics:
    """Final statistics for a resize run."""
    discovered_files: int
    processed_files: int
    failed_files: int
    total_source_bytes: int
    total_dest_bytes: int
    elapsed_seconds: float

    @property
    def total_source_mb(self) -> float:
        return round(self.total_source_bytes / BYTES_PER_MB, 2)

    @property
    def total_dest_mb(self) -> float:
        return round(self.total_dest_bytes / BYTES_PER_MB, 2)


@dataclass
class ProgressState:
    """Position of the run within the discovered files."""
    current: int
    total: int

    @property
    def fraction(self) -> float:
        # No files discovered renders as an empty bar
        if self.total <= 0:
            return 0.0
        return min(self.current / self.total, 1.0)

    @property
    def percentage(self) -> int:
        return int(self.fraction * 100)

    def filled(self, width: int) -> int:
        """Number of bar cells to fill for a bar of the given width."""
        return int(width * self.fraction)
