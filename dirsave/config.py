"""Configuration management for dirsave."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from ruamel.yaml import YAML

from .eventlog.models import LogFormat

DEFAULT_CONFIG_PATH = Path.home() / ".config/dirsave/config.yaml"


class EventLogConfig(BaseModel):
    """Configuration for the daily event log."""

    enabled: bool = Field(default=True, description="Write the daily event log")
    format: LogFormat = Field(default=LogFormat.JSON, description="Log file format (json or xml)")
    directory: Optional[Path] = Field(
        default=None,
        description="Log directory override, relative paths are resolved against data_dir"
    )
    lock_timeout_seconds: float = Field(default=10.0, gt=0, description="Cross-process lock wait")


class DirSaveConfig(BaseModel):
    """Main configuration for dirsave."""

    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".local/share/dirsave",
        description="Directory holding jobs.json, state.json and logs"
    )
    max_jobs: int = Field(default=5, ge=1, description="Maximum number of backup jobs")
    log_level: str = Field(default="INFO", description="Diagnostic logging level")
    log_file: Optional[Path] = Field(
        default=None,
        description="Detailed diagnostic log file, relative paths are resolved against data_dir"
    )

    event_log: EventLogConfig = Field(default_factory=EventLogConfig)

    class Config:
        """Pydantic configuration."""

        validate_assignment = True

    @property
    def jobs_path(self) -> Path:
        return self.data_dir / "jobs.json"

    @property
    def state_path(self) -> Path:
        return self.data_dir / "state.json"

    @property
    def default_log_dir(self) -> Path:
        return self.data_dir / "logs"

    def resolve_log_file(self) -> Optional[Path]:
        """File the diagnostic log is also written to, if any."""
        if self.log_file is None or not str(self.log_file).strip():
            return None

        log_file = Path(self.log_file).expanduser()
        if log_file.is_absolute():
            return log_file
        return self.data_dir / log_file

    def resolve_log_dir(self) -> Path:
        """Directory the event log is written to."""
        directory = self.event_log.directory
        if directory is None or not str(directory).strip():
            return self.default_log_dir

        directory = Path(directory).expanduser()
        if directory.is_absolute():
            return directory
        return self.data_dir / directory


def load_config(config_path: Optional[Path] = None) -> DirSaveConfig:
    """Load configuration from file or create default."""

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if config_path.exists():
        yaml = YAML(typ="safe")
        with open(config_path, "r") as f:
            data = yaml.load(f) or {}
        return DirSaveConfig(**data)
    else:
        config = DirSaveConfig()
        save_config(config, config_path)
        return config


def save_config(config: DirSaveConfig, config_path: Optional[Path] = None) -> None:
    """Save configuration to file."""

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    config_path.parent.mkdir(parents=True, exist_ok=True)

    yaml = YAML()
    yaml.default_flow_style = False

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(mode="json"), f)
