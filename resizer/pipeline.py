"""Incremental resize pipeline over a mirrored directory tree."""

import logging
from pathlib import Path
from typing import Optional, Set, Tuple

from resizer.data_models import FileTask, RunConfiguration, RunStatistics
from resizer.file_processor import FileProcessor
from resizer.progress_bar import ProgressBar
from resizer.reporter import FileTable
from resizer.stats_tracker import StatsTracker
from resizer.stop_flag import StopFlag
from resizer.video_converter import Transcoder


class Pipeline:
    """Walks the source tree and resizes every missing or stale video."""

    def __init__(
        self,
        config: RunConfiguration,
        transcoder: Transcoder,
        file_processor: Optional[FileProcessor] = None,
        stats: Optional[StatsTracker] = None,
        progress: Optional[ProgressBar] = None,
        table: Optional[FileTable] = None,
        stop_flag: Optional[StopFlag] = None,
    ):
        """
        Initialize the pipeline. Collaborators not given are built from config.

        Args:
            config: Run configuration
            transcoder: Tool performing the actual re-encoding
            file_processor: Traversal, mirroring and timestamp helper
            stats: Statistics accumulator for this run
            progress: Progress bar
            table: Per-file table
            stop_flag: Flag checked between files
        """
        self.config = config
        self.transcoder = transcoder
        self.file_processor = file_processor or FileProcessor(
            config.source_dir, config.dest_dir, config.output_format
        )
        self.stats = stats or StatsTracker()
        self.progress = progress or ProgressBar(enabled=config.show_output)
        self.table = table or FileTable(enabled=config.show_output)
        self.stop_flag = stop_flag or StopFlag()
        self._folders: Set[Tuple[Path, Path]] = set()

    def run(self) -> RunStatistics:
        """
        Process every discovered video and return the run statistics.

        Returns:
            RunStatistics including the size of the whole destination tree
        """
        self.stats.start_timer()
        tasks = self.file_processor.find_video_files()
        total = len(tasks)

        self.table.header()
        for index, task in enumerate(tasks, 1):
            self.process_file(task)
            self.progress.update(index, total)

            if self.stop_flag.is_stop_requested() and index < total:
                logging.warning(f"Stopping early after {index}/{total} files")
                break

        self.progress.finish()
        self.file_processor.mirror_folder_timestamps(self._folders)
        return self.stats.finalize(self.file_processor.get_folder_size())

    def process_file(self, task: FileTask) -> bool:
        """
        Handle one discovered video.

        Args:
            task: The discovered file

        Returns:
            True if the file was re-encoded in this run
        """
        source_size = self.file_processor.get_file_size(task.source_path)
        self.stats.record(source_size)

        try:
            dest_path = self.file_processor.mirror(task.source_path)
        except IOError as e:
            logging.error(f"Skipping {task.relative_path}: {e}")
            self.stats.record_failure()
            return False

        self._folders.update(self.file_processor.folder_pairs(task.source_path))

        try:
            stale = self.file_processor.needs_processing(task.source_path, dest_path)
        except OSError as e:
            logging.warning(f"Skipping {task.relative_path}: cannot read source: {e}")
            self.stats.record_failure()
            self.table.add_failure(task.relative_path, source_size)
            return False

        if not stale:
            logging.debug(f"Up to date: {task.relative_path}")
            return False

        logging.info(f"Resizing {task.relative_path}")
        result = self.transcoder.transcode(task.source_path, dest_path, self.config)
        if not result.success:
            logging.warning(f"Failed to resize {task.relative_path}: {result.error_message}")
            self.stats.record_failure()
            self.table.add_failure(task.relative_path, source_size)
            return False

        self.file_processor.copy_timestamps(task.source_path, dest_path)
        self.stats.record_processed()
        self.table.add_row(task.relative_path, result.source_size, result.dest_size)
        return True
