"""Tests for configuration loading and validation."""

import json
import os

import pytest

from resizer import config_manager
from resizer.config_manager import ConfigManager, ConfigurationError, MissingArgumentsError


@pytest.fixture(autouse=True)
def ffmpeg_installed(monkeypatch):
    monkeypatch.setattr(config_manager.shutil, "which", lambda tool: f"/usr/bin/{tool}")


def cli(source, dest, **values):
    args = {"src": str(source), "dest": str(dest), "max_dimension": None,
            "compression": None, "format": None, "json": None, "quiet": None}
    args.update(values)
    return args


def test_defaults(source_tree, dest_dir):
    config = ConfigManager(cli(source_tree, dest_dir)).run_config

    assert config.source_dir == source_tree.absolute()
    assert config.dest_dir == dest_dir.absolute()
    assert config.max_dimension == 800
    assert config.compression == 23
    assert config.output_format == "mp4"
    assert not config.quiet
    assert not config.json_output
    assert config.show_output


def test_cli_values(source_tree, dest_dir):
    config = ConfigManager(cli(source_tree, dest_dir, max_dimension=480, compression=30,
                               format=".MKV", json=True)).run_config

    assert config.max_dimension == 480
    assert config.compression == 30
    assert config.output_format == "mkv"
    assert config.json_output
    assert not config.show_output


def test_missing_source_argument(dest_dir):
    with pytest.raises(MissingArgumentsError):
        ConfigManager(cli("", dest_dir))


def test_source_directory_must_exist(tmp_path, dest_dir):
    with pytest.raises(ConfigurationError, match="does not exist"):
        ConfigManager(cli(tmp_path / "missing", dest_dir))


def test_destination_directory_must_exist(source_tree, tmp_path):
    with pytest.raises(ConfigurationError, match="Destination directory"):
        ConfigManager(cli(source_tree, tmp_path / "missing"))


@pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root ignores permissions")
def test_destination_must_be_writable(source_tree, dest_dir):
    dest_dir.chmod(0o500)
    try:
        with pytest.raises(ConfigurationError, match="not writable"):
            ConfigManager(cli(source_tree, dest_dir))
    finally:
        dest_dir.chmod(0o700)


@pytest.mark.parametrize("values", [
    {"max_dimension": 0},
    {"compression": -1},
    {"compression": 52},
    {"format": "mp4; rm"},
])
def test_invalid_values(source_tree, dest_dir, values):
    with pytest.raises(ConfigurationError):
        ConfigManager(cli(source_tree, dest_dir, **values))


def test_missing_ffmpeg(source_tree, dest_dir, monkeypatch):
    monkeypatch.setattr(config_manager.shutil, "which", lambda tool: None)

    with pytest.raises(ConfigurationError, match="ffmpeg is not installed"):
        ConfigManager(cli(source_tree, dest_dir))


def test_tool_check_can_be_disabled(source_tree, dest_dir, monkeypatch):
    monkeypatch.setattr(config_manager.shutil, "which", lambda tool: None)

    assert ConfigManager(cli(source_tree, dest_dir), check_tools=False).run_config


def test_config_file_provides_defaults(tmp_path, source_tree, dest_dir):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({
        "src": str(source_tree), "dest": str(dest_dir), "compression": 28, "quiet": True,
    }))

    args = cli(source_tree, dest_dir, compression=20)
    args.update(src=None, dest=None)

    config = ConfigManager(args, config_path=str(config_file)).run_config

    assert config.source_dir == source_tree.absolute()
    assert config.compression == 20
    assert config.quiet


def test_config_file_type_errors(tmp_path, source_tree, dest_dir):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"max_dimension": "800"}))

    with pytest.raises(ConfigurationError, match="max_dimension"):
        ConfigManager(cli(source_tree, dest_dir), config_path=str(config_file))


def test_config_file_unknown_field(tmp_path, source_tree, dest_dir):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"threads": 4}))

    with pytest.raises(ConfigurationError, match="Unknown configuration fields"):
        ConfigManager(cli(source_tree, dest_dir), config_path=str(config_file))


def test_config_file_invalid_json(tmp_path, source_tree, dest_dir):
    config_file = tmp_path / "config.json"
    config_file.write_text("{not json")

    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        ConfigManager(cli(source_tree, dest_dir), config_path=str(config_file))


def test_config_file_missing(tmp_path, source_tree, dest_dir):
    with pytest.raises(ConfigurationError, match="not found"):
        ConfigManager(cli(source_tree, dest_dir), config_path=str(tmp_path / "nope.json"))
