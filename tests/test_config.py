"""Tests for configuration loading."""

import tempfile
from pathlib import Path

import pytest

from dirsave.config import DirSaveConfig, EventLogConfig, load_config, save_config
from dirsave.eventlog.models import LogFormat


class TestDirSaveConfig:
    """Test configuration defaults and derived paths."""

    def test_defaults(self):
        """Test default values."""
        config = DirSaveConfig()

        assert config.max_jobs == 5
        assert config.log_level == "INFO"
        assert config.event_log.enabled
        assert config.event_log.format == LogFormat.JSON

    def test_derived_paths(self):
        """Test paths derived from data_dir."""
        config = DirSaveConfig(data_dir=Path("/var/lib/dirsave"))

        assert config.jobs_path == Path("/var/lib/dirsave/jobs.json")
        assert config.state_path == Path("/var/lib/dirsave/state.json")
        assert config.resolve_log_dir() == Path("/var/lib/dirsave/logs")

    def test_log_dir_override(self):
        """Test absolute and relative event log directories."""
        config = DirSaveConfig(data_dir=Path("/data"))

        config.event_log = EventLogConfig(directory=Path("/var/log/dirsave"))
        assert config.resolve_log_dir() == Path("/var/log/dirsave")

        config.event_log = EventLogConfig(directory=Path("audit"))
        assert config.resolve_log_dir() == Path("/data/audit")

    def test_log_file(self):
        """Test resolution of the diagnostic log file."""
        config = DirSaveConfig(data_dir=Path("/data"))
        assert config.resolve_log_file() is None

        config.log_file = Path("dirsave.log")
        assert config.resolve_log_file() == Path("/data/dirsave.log")

        config.log_file = Path("/var/log/dirsave.log")
        assert config.resolve_log_file() == Path("/var/log/dirsave.log")

    def test_invalid_values(self):
        """Test that invalid values are rejected."""
        with pytest.raises(ValueError):
            DirSaveConfig(max_jobs=0)
        with pytest.raises(ValueError):
            EventLogConfig(format="csv")


class TestLoadConfig:
    """Test reading and writing the YAML configuration file."""

    def test_missing_file_writes_defaults(self):
        """Test that a default file is created when none exists."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "conf" / "config.yaml"

            config = load_config(config_path)

            assert config_path.exists()
            assert config.max_jobs == 5

    def test_round_trip(self):
        """Test that saved values load back."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.yaml"
            config = DirSaveConfig(
                data_dir=Path(temp_dir) / "data",
                max_jobs=3,
                event_log=EventLogConfig(format=LogFormat.XML),
            )

            save_config(config, config_path)
            loaded = load_config(config_path)

            assert loaded.data_dir == Path(temp_dir) / "data"
            assert loaded.max_jobs == 3
            assert loaded.event_log.format == LogFormat.XML

    def test_partial_file(self):
        """Test that omitted keys take their defaults."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.yaml"
            config_path.write_text("max_jobs: 2\nevent_log:\n  enabled: false\n")

            config = load_config(config_path)

            assert config.max_jobs == 2
            assert not config.event_log.enabled
            assert config.event_log.format == LogFormat.JSON

    def test_empty_file(self):
        """Test that an empty file gives the defaults."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.yaml"
            config_path.write_text("")

            assert load_config(config_path).max_jobs == 5
