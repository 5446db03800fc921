"""Video resizing with FFmpeg."""

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Optional

from resizer.data_models import RunConfiguration, TranscodeResult

DENOISE_FILTER = "hqdn3d=1:1:1:1"


class TranscodeError(Exception):
    """Exception raised when the external encoder fails for one file."""
    pass


class Transcoder:
    """Interface for tools that turn one source video into a resized copy."""

    def transcode(self, source: Path, dest: Path, config: RunConfiguration) -> TranscodeResult:
        """
        Produce a resized copy of source at dest.

        Args:
            source: Path to the original video
            dest: Path where the resized video should be written
            config: Run configuration (max dimension, compression, format)

        Returns:
            TranscodeResult describing success and resulting sizes
        """
        raise NotImplementedError


def build_scale_filter(max_dimension: int) -> str:
    """
    Build the FFmpeg video filter chain.

    The longer side is scaled to max_dimension and the shorter side follows the
    aspect ratio, rounded to an even value as libx264 requires. A light
    denoise pass is always applied.
    """
    scale = (
        f"scale='if(gt(iw,ih),{max_dimension},-2)'"
        f":'if(gt(iw,ih),-2,{max_dimension})'"
    )
    return f"{scale},{DENOISE_FILTER}"


def partial_path(dest: Path) -> Path:
    """Temporary sibling that receives the encoder output until it succeeds."""
    return dest.with_name(f".{dest.stem}.partial{dest.suffix}")


class FFmpegTranscoder(Transcoder):
    """Resizes videos to H.264/AAC using FFmpeg."""

    def __init__(self, ffmpeg_path: str = "ffmpeg", audio_bitrate: str = "128k", preset: str = "slower"):
        """
        Initialize FFmpegTranscoder.

        Args:
            ffmpeg_path: FFmpeg executable name or path
            audio_bitrate: AAC audio bitrate (e.g., "128k")
            preset: libx264 preset
        """
        self.ffmpeg_path = ffmpeg_path
        self.audio_bitrate = audio_bitrate
        self.preset = preset
        logging.debug(f"FFmpegTranscoder initialized with preset={preset}, audio_bitrate={audio_bitrate}")

    def build_command(self, source: Path, output: Path, config: RunConfiguration) -> List[str]:
        """
        Build the FFmpeg command line for one file.

        Args:
            source: Path to the original video
            output: Path FFmpeg writes to
            config: Run configuration

        Returns:
            Command as a list of arguments
        """
        return [
            self.ffmpeg_path,
            "-y",
            "-nostdin",
            "-loglevel", "error",
            "-i", str(source),
            "-vf", build_scale_filter(config.max_dimension),
            # Video encoding
            "-c:v", "libx264",
            "-crf", str(config.compression),
            "-preset", self.preset,
            "-movflags", "+faststart",
            # Audio encoding
            "-c:a", "aac",
            "-b:a", self.audio_bitrate,
            str(output),
        ]

    def transcode(self, source: Path, dest: Path, config: RunConfiguration) -> TranscodeResult:
        """
        Resize source into dest.

        The encoder writes to a temporary sibling file that replaces dest only
        when FFmpeg succeeds, so a failed run never leaves a truncated dest.

        Args:
            source: Path to the original video
            dest: Path where the resized video should be written
            config: Run configuration

        Returns:
            TranscodeResult with source and destination sizes on success
        """
        temp_output = partial_path(dest)
        try:
            self._run(self.build_command(source, temp_output, config))
            os.replace(temp_output, dest)
            return TranscodeResult.ok(source.stat().st_size, dest.stat().st_size)
        except (TranscodeError, OSError) as e:
            logging.debug(f"Transcoding {source} failed: {e}")
            return TranscodeResult.failed(str(e))
        finally:
            # Also runs on KeyboardInterrupt; a no-op after a successful replace
            self._remove_partial(temp_output)

    def _run(self, command: List[str]) -> None:
        """Execute FFmpeg and raise TranscodeError on failure."""
        logging.debug(f"FFmpeg command: {' '.join(command)}")
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                # Own session: a terminal Ctrl+C only reaches the StopFlag handler
                start_new_session=True,
            )
        except OSError as e:
            raise TranscodeError(f"Could not start FFmpeg: {e}")

        if result.returncode != 0:
            raise TranscodeError(
                f"FFmpeg exited with code {result.returncode}: {self._last_lines(result.stderr)}"
            )

    @staticmethod
    def _last_lines(stderr: Optional[str], count: int = 5) -> str:
        if not stderr:
            return "no error output"
        lines = [line for line in stderr.strip().splitlines() if line.strip()]
        return " | ".join(lines[-count:])

    @staticmethod
    def _remove_partial(path: Path) -> None:
        try:
            if path.exists():
                path.unlink()
                logging.debug(f"Removed partial output: {path}")
        except OSError as e:
            logging.warning(f"Could not remove partial output {path}: {e}")
