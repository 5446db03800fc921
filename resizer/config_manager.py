"""Configuration management for the video resizer."""

import json
import logging
import os
import re
import shutil
from pathlib import Path
from typing import Optional

from resizer.data_models import RunConfiguration

DEFAULTS = {
    "max_dimension": 800,
    "compression": 23,
    "format": "mp4",
    "quiet": False,
    "json": False,
}

FIELD_TYPES = {
    "src": str,
    "dest": str,
    "max_dimension": int,
    "compression": int,
    "format": str,
    "quiet": bool,
    "json": bool,
}

REQUIRED_TOOLS = ["ffmpeg"]


class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""
    pass


class MissingArgumentsError(ConfigurationError):
    """Exception raised when required arguments were not supplied."""
    pass


class ConfigManager:
    """Builds the run configuration from CLI arguments and an optional JSON file."""

    REQUIRED_FIELDS = ["src", "dest"]

    def __init__(self, args: dict, config_path: Optional[str] = None, check_tools: bool = True):
        """
        Initialize ConfigManager.

        Args:
            args: Parsed CLI values keyed by field name; None means "not given"
            config_path: Optional JSON file providing defaults for any field
            check_tools: Whether to verify that the external tools are installed
        """
        self.config_path = Path(config_path) if config_path else None
        self.check_tools = check_tools
        self._config = self._merge(args)
        self.validate_config(self._config)
        self.run_config = self._build_run_config(self._config)

    def _merge(self, args: dict) -> dict:
        """Layer defaults, the config file, then CLI values."""
        config = dict(DEFAULTS)
        if self.config_path is not None:
            config.update(self.load_config())
        config.update({key: value for key, value in args.items() if value is not None})
        return config

    def load_config(self) -> dict:
        """
        Read and parse JSON configuration from file.

        Returns:
            Dictionary containing configuration data

        Raises:
            ConfigurationError: If file is missing or contains invalid JSON
        """
        if not self.config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            logging.debug(f"Reading configuration file: {self.config_path}")
            with open(self.config_path, 'r') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration file: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error reading configuration file: {e}")

        if not isinstance(config, dict):
            raise ConfigurationError("Configuration file must contain a JSON object")

        unknown = sorted(set(config) - set(FIELD_TYPES))
        if unknown:
            raise ConfigurationError(f"Unknown configuration fields: {', '.join(unknown)}")

        logging.info(f"Configuration loaded from {self.config_path}")
        return config

    def validate_config(self, config: dict) -> bool:
        """
        Verify that all required fields exist and are valid.

        Args:
            config: Merged configuration dictionary

        Returns:
            True if configuration is valid

        Raises:
            ConfigurationError: If validation fails
        """
        missing_fields = [field for field in self.REQUIRED_FIELDS if not config.get(field)]
        if missing_fields:
            raise MissingArgumentsError(f"Missing required arguments: {', '.join(missing_fields)}")

        for field, expected in FIELD_TYPES.items():
            value = config[field]
            # bool is a subclass of int and must not pass as a number
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                raise ConfigurationError(
                    f"'{field}' must be of type {expected.__name__}, got {type(value).__name__}"
                )

        if config["max_dimension"] <= 0:
            raise ConfigurationError(f"Max dimension must be positive, got {config['max_dimension']}")

        if not 0 <= config["compression"] <= 51:
            raise ConfigurationError(f"Compression must be between 0 and 51, got {config['compression']}")

        if not re.fullmatch(r"\.?[A-Za-z0-9]+", config["format"]):
            raise ConfigurationError(f"Invalid output format: {config['format']}")

        self.validate_directories(Path(config["src"]), Path(config["dest"]))

        if self.check_tools:
            self.validate_tools()

        logging.debug("Configuration validation successful")
        return True

    def validate_directories(self, source: Path, dest: Path) -> None:
        """Check that the source is readable and the destination writable."""
        if not source.is_dir():
            raise ConfigurationError(f"Source directory '{source}' does not exist.")
        if not os.access(source, os.R_OK | os.X_OK):
            raise ConfigurationError(f"Source directory '{source}' is not readable.")
        if not dest.is_dir():
            raise ConfigurationError(f"Destination directory '{dest}' does not exist.")
        if not os.access(dest, os.W_OK | os.X_OK):
            raise ConfigurationError(f"Destination directory '{dest}' is not writable.")

    def validate_tools(self) -> None:
        """Check that all external tools are on the PATH."""
        for tool in REQUIRED_TOOLS:
            if shutil.which(tool) is None:
                raise ConfigurationError(f"{tool} is not installed.")

    def _build_run_config(self, config: dict) -> RunConfiguration:
        return RunConfiguration(
            source_dir=Path(config["src"]).absolute(),
            dest_dir=Path(config["dest"]).absolute(),
            max_dimension=config["max_dimension"],
            compression=config["compression"],
            output_format=config["format"].lstrip(".").lower(),
            quiet=config["quiet"],
            json_output=config["json"],
        )
