"""File system operations for the incremental resize workflow."""

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from resizer.data_models import FileTask

VIDEO_EXTENSIONS = (".mp4", ".mov", ".mkv", ".avi")


class FileProcessor:
    """Manages traversal, path mirroring and timestamps between the two trees."""

    def __init__(self, source_dir: Path, dest_dir: Path, output_format: str = "mp4"):
        """
        Initialize FileProcessor with source and destination directory paths.

        Args:
            source_dir: Root of the tree containing the original videos
            dest_dir: Root of the mirrored tree receiving resized videos
            output_format: Container extension for every produced file (without dot)
        """
        self.source_dir = Path(source_dir).absolute()
        self.dest_dir = Path(dest_dir).absolute()
        # Resolved form catches ".." segments and symlinks in either root
        self._dest_resolved = self.dest_dir.resolve()
        self.output_format = output_format.lstrip(".")

    def find_video_files(self) -> List[FileTask]:
        """
        Scan the source tree recursively for supported video files.

        Files are returned sorted by their path relative to the source root.
        If the destination root lies inside the source root, its subtree is
        not scanned.

        Returns:
            List of FileTask objects, one per discovered video
        """
        tasks = []
        for dirpath, dirnames, filenames in os.walk(self.source_dir):
            current = Path(dirpath)
            dirnames[:] = sorted(
                name for name in dirnames
                if (current / name).resolve() != self._dest_resolved
            )
            for name in sorted(filenames):
                if not self.is_video_file(name):
                    continue
                source_path = current / name
                relative_path = source_path.relative_to(self.source_dir)
                tasks.append(FileTask(
                    source_path=source_path,
                    relative_path=relative_path,
                    dest_path=self.mirror_path(source_path),
                ))

        logging.info(f"Found {len(tasks)} video files in {self.source_dir}")
        return tasks

    @staticmethod
    def is_video_file(name: str) -> bool:
        """Check whether a file name carries a supported video extension."""
        return os.path.splitext(name)[1].lower() in VIDEO_EXTENSIONS

    def mirror_path(self, source_file: Path) -> Path:
        """
        Compute the destination path for a source file.

        The directory structure below the source root is preserved and the
        extension is replaced with the configured output format.

        Args:
            source_file: Absolute path, or path relative to the source root

        Returns:
            Path of the mirrored file under the destination root
        """
        source_file = Path(source_file)
        if source_file.is_absolute():
            relative = source_file.relative_to(self.source_dir)
        else:
            relative = source_file
        return (self.dest_dir / relative).with_suffix(f".{self.output_format}")

    def mirror(self, source_file: Path) -> Path:
        """
        Compute the destination path and create its parent directories.

        Args:
            source_file: Absolute path, or path relative to the source root

        Returns:
            Path of the mirrored file under the destination root

        Raises:
            IOError: If the destination directory cannot be created
        """
        dest_path = self.mirror_path(source_file)
        try:
            dest_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IOError(f"Failed to create destination directory {dest_path.parent}: {e}")
        return dest_path

    def needs_processing(self, source_path: Path, dest_path: Path) -> bool:
        """
        Decide whether a source file has to be (re)encoded.

        Args:
            source_path: Path to the original video
            dest_path: Path to the mirrored destination

        Returns:
            True if the destination is missing or older than the source

        Raises:
            OSError: If the source file cannot be read
        """
        try:
            dest_mtime = dest_path.stat().st_mtime_ns
        except FileNotFoundError:
            logging.debug(f"Destination missing: {dest_path}")
            return True

        stale = source_path.stat().st_mtime_ns > dest_mtime
        if stale:
            logging.debug(f"Destination is stale: {dest_path}")
        return stale

    def copy_timestamps(self, source: Path, dest: Path) -> bool:
        """
        Copy access and modification times from source onto dest.

        Args:
            source: File or folder providing the timestamps
            dest: File or folder receiving them

        Returns:
            True if the timestamps were copied, False otherwise
        """
        try:
            st = source.stat()
            os.utime(dest, ns=(st.st_atime_ns, st.st_mtime_ns))
            return True
        except OSError as e:
            logging.warning(f"Could not copy timestamps from {source} to {dest}: {e}")
            return False

    def folder_pairs(self, source_file: Path) -> List[Tuple[Path, Path]]:
        """
        List (source folder, destination folder) pairs from a file up to the root.

        Args:
            source_file: Absolute path of a source file

        Returns:
            Pairs ordered from the file's own folder up to the roots
        """
        pairs = []
        relative = Path(source_file).relative_to(self.source_dir).parent
        while True:
            pairs.append((self.source_dir / relative, self.dest_dir / relative))
            if relative == Path("."):
                break
            relative = relative.parent
        return pairs

    def mirror_folder_timestamps(self, pairs: Iterable[Tuple[Path, Path]]) -> None:
        """
        Copy folder timestamps from the source tree onto the destination tree.

        Deepest folders are handled first so that touching a child does not
        disturb a parent that was already updated.

        Args:
            pairs: (source folder, destination folder) pairs
        """
        ordered = sorted(set(pairs), key=lambda pair: len(pair[1].parts), reverse=True)
        for source_folder, dest_folder in ordered:
            if dest_folder.is_dir():
                self.copy_timestamps(source_folder, dest_folder)

    def get_file_size(self, path: Path) -> int:
        """Return the size of a file in bytes, or 0 if it cannot be read."""
        try:
            return path.stat().st_size
        except OSError as e:
            logging.warning(f"Could not read size of {path}: {e}")
            return 0

    def get_folder_size(self, folder: Optional[Path] = None) -> int:
        """
        Calculate total size of all files in a folder in bytes.

        Args:
            folder: Path to the folder (defaults to the destination root)

        Returns:
            Total size in bytes
        """
        folder = self.dest_dir if folder is None else folder
        total_size = 0
        for item in folder.rglob("*"):
            if item.is_file():
                total_size += self.get_file_size(item)
        return total_size
