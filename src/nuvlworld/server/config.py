"""Configuration for loading and displaying a fact world."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from ..errors import ConfigError
from ..services.temporal import WEEKDAYS

DEFAULT_CONFIG_PATH = "~/.nuvl-world/config.yaml"


@dataclass
class DataConfig:
    """Input files.

    Fact files are loaded in the listed order, then the description file.
    Relative paths are resolved against ``directory``.

    Example:
        directory: ~/wikidata
        fact_files:
          - locationIanaTimeZone.scm
          - jefft0.scm
        descriptions_file: itemEnLabel.tsv
    """
    directory: str = "."
    fact_files: list[str] = field(default_factory=list)
    descriptions_file: Optional[str] = None

    def __post_init__(self):
        self.directory = str(Path(self.directory).expanduser())

    def resolve(self, name: str) -> Path:
        path = Path(name).expanduser()
        if path.is_absolute():
            return path
        return Path(self.directory) / path

    @property
    def fact_paths(self) -> list[Path]:
        return [self.resolve(name) for name in self.fact_files]

    @property
    def descriptions_path(self) -> Optional[Path]:
        if self.descriptions_file is None:
            return None
        return self.resolve(self.descriptions_file)


@dataclass
class DisplayConfig:
    """Calendar display settings."""
    time_zone: str = "UTC"
    start_of_week: str = "monday"

    def __post_init__(self):
        try:
            ZoneInfo(self.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigError(f"Unknown time zone: {self.time_zone}") from exc
        self.start_of_week = self.start_of_week.lower()
        if self.start_of_week not in WEEKDAYS:
            raise ConfigError(
                f"Invalid start_of_week: {self.start_of_week}. "
                f"Valid options: {', '.join(WEEKDAYS)}"
            )

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.time_zone)


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    host: str = "127.0.0.1"
    port: int = 18791


@dataclass
class NuvlWorldConfig:
    """Full configuration."""
    data: DataConfig = field(default_factory=DataConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_file(cls, path: str | Path) -> "NuvlWorldConfig":
        """Load configuration from YAML file."""
        path = Path(path).expanduser()
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "NuvlWorldConfig":
        """Create configuration from dictionary."""
        data_data = data.get("data", {})
        display_data = data.get("display", {})
        server_data = data.get("server", {})

        try:
            return cls(
                data=DataConfig(**data_data) if data_data else DataConfig(),
                display=DisplayConfig(**display_data) if display_data else DisplayConfig(),
                server=ServerConfig(**server_data) if server_data else ServerConfig(),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc

    @classmethod
    def from_env(cls) -> "NuvlWorldConfig":
        """Create configuration from environment variables."""
        config_path = os.environ.get("NUVL_WORLD_CONFIG", DEFAULT_CONFIG_PATH)
        return cls.from_file(config_path)

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if not self.data.fact_files:
            errors.append("data.fact_files must list at least one file")
        for path in self.data.fact_paths:
            if not path.exists():
                errors.append(f"Fact file not found: {path}")
        descriptions = self.data.descriptions_path
        if descriptions is not None and not descriptions.exists():
            errors.append(f"Descriptions file not found: {descriptions}")

        return errors
