"""Loading of YAML configuration and request descriptions."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .query import QueryState

__all__ = [
    "ConfigError",
    "CrumbtrailConfig",
    "DEFAULT_CONFIG_NAME",
    "load_config",
    "load_request",
    "load_yaml_mapping",
]

DEFAULT_CONFIG_NAME = "crumbtrail.yaml"


class ConfigError(ValueError):
    """Raised when configuration files are missing or malformed."""


class ConfigSection(BaseModel):
    model_config = ConfigDict(extra="forbid")


class SiteSection(ConfigSection):
    path: str = "site.yaml"
    request: Union[str, Dict[str, Any], None] = None


class PathsSection(ConfigSection):
    db_path: Optional[str] = None


class LoggingSection(ConfigSection):
    level: str = "WARNING"


class CrumbtrailConfig(ConfigSection):
    """Validated configuration; relative paths resolve against ``base_dir``."""

    site: SiteSection = Field(default_factory=SiteSection)
    paths: PathsSection = Field(default_factory=PathsSection)
    logging: LoggingSection = Field(default_factory=LoggingSection)
    base_dir: Path = Field(default_factory=Path.cwd, exclude=True)

    def resolve(self, value: str | Path) -> Path:
        path = Path(value)
        if not path.is_absolute():
            path = (self.base_dir / path).resolve()
        return path

    @property
    def site_path(self) -> Path:
        return self.resolve(self.site.path)

    @property
    def db_path(self) -> Path | None:
        if not self.paths.db_path:
            return None
        return self.resolve(self.paths.db_path)


def load_yaml_mapping(path: Path) -> Dict[str, Any]:
    """Load a YAML mapping from disk, rejecting other top-level types."""
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise ConfigError(f"Failed to parse {path}: {error}") from error
    if not isinstance(data, Mapping):
        raise ConfigError(f"Expected mapping at top level of {path}")
    return dict(data)


def load_config(config_path: Path | str) -> CrumbtrailConfig:
    """Load and validate the configuration file at ``config_path``."""
    path = Path(config_path)
    data = load_yaml_mapping(path)
    try:
        return CrumbtrailConfig.model_validate({**data, "base_dir": path.resolve().parent})
    except ValidationError as error:
        raise ConfigError(f"Configuration in {path} did not validate: {error}") from error


def load_request(
    source: str | Path | Mapping[str, Any] | None,
    *,
    base_dir: Path | None = None,
) -> QueryState:
    """Build a ``QueryState`` from an inline mapping or a YAML file."""
    if source is None:
        return QueryState()
    if isinstance(source, Mapping):
        data = dict(source)
        origin = "inline request"
    else:
        path = Path(source)
        if base_dir is not None and not path.is_absolute():
            path = (base_dir / path).resolve()
        data = load_yaml_mapping(path)
        origin = str(path)
    try:
        return QueryState.model_validate(data)
    except ValidationError as error:
        raise ConfigError(f"Request in {origin} did not validate: {error}") from error
