#!/usr/bin/env python3
"""
Video Resizer
Resizes all videos in a directory tree, including subdirectories, into a
mirrored destination tree. Videos whose resized copy is already up to date
are skipped.
"""

import argparse
import logging
import sys

from resizer.config_manager import ConfigManager, ConfigurationError, MissingArgumentsError
from resizer.file_processor import VIDEO_EXTENSIONS
from resizer.pipeline import Pipeline
from resizer.reporter import SummaryReporter
from resizer.stop_flag import StopFlag
from resizer.video_converter import FFmpegTranscoder

EPILOG = """\
Supported file formats: {formats}

Dependencies:
  - ffmpeg

Example:
  %(prog)s -s ./originals -d ./resized -m 800 -c 23
"""


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 and shows the help on errors."""

    def error(self, message):
        self.exit_with_help(message)

    def exit_with_help(self, message):
        sys.stderr.write(f"Error: {message}\n\n")
        self.print_help(sys.stderr)
        self.exit(1)


def build_parser() -> ArgumentParser:
    """Build the command line interface."""
    parser = ArgumentParser(
        allow_abbrev=False,
        description="Resizes all videos in the specified directory incl. subdirectories",
        epilog=EPILOG.format(formats=", ".join(VIDEO_EXTENSIONS)),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-s", "--src", "--source", dest="src",
                        help="Source directory containing the original videos.")
    parser.add_argument("-d", "--dest", dest="dest",
                        help="Destination directory for the resized videos.")
    parser.add_argument("-m", "--max-dimension", dest="max_dimension", type=int,
                        help="Maximum dimension for the longer side of the video (default: 800).")
    parser.add_argument("-c", "--compression", dest="compression", type=int,
                        help="Quality for the resized videos. 0 = no compression (large file, good quality); "
                             "50 = strong compression (small file, poor quality) (default: 23).")
    parser.add_argument("-f", "--format", dest="format",
                        help="Container format of the resized videos (default: mp4).")
    parser.add_argument("-j", "--json", dest="json", action="store_true", default=None,
                        help="Display the summary in json format.")
    parser.add_argument("-q", "--quiet", dest="quiet", action="store_true", default=None,
                        help="Run in quiet mode (suppress all output).")
    parser.add_argument("--config", dest="config",
                        help="JSON file with default values for the options above.")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Log progress details to stderr (repeat for debug output).")
    return parser


def configure_logging(verbose: int, quiet: bool = False) -> None:
    """Initialize logging configuration."""
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='[%(asctime)s] [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        force=True,
    )


def main(argv=None) -> int:
    """Main entry point for the video resizer."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, quiet=bool(args.quiet))

    fields = {key: value for key, value in vars(args).items() if key not in ("config", "verbose")}
    try:
        config = ConfigManager(fields, config_path=args.config).run_config
    except MissingArgumentsError as e:
        parser.exit_with_help(str(e))
    except ConfigurationError as e:
        sys.stderr.write(f"Error: {e}\n")
        return 1

    if config.quiet and not args.quiet:
        # quiet came from the config file
        configure_logging(args.verbose, quiet=True)

    logger = logging.getLogger(__name__)
    logger.info(f"Source directory: {config.source_dir}")
    logger.info(f"Destination directory: {config.dest_dir}")
    logger.info(f"Max dimension: {config.max_dimension}, compression: {config.compression}, format: {config.output_format}")

    stop_flag = StopFlag()
    stop_flag.register_signal_handlers()

    try:
        pipeline = Pipeline(config, FFmpegTranscoder(), stop_flag=stop_flag)
        stats = pipeline.run()
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 130
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1
    finally:
        stop_flag.restore_signal_handlers()

    SummaryReporter(json_output=config.json_output, quiet=config.quiet).report(stats)
    return 0


if __name__ == "__main__":
    sys.exit(main())
