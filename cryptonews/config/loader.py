"""Configuration loader."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError
from rich.console import Console

from .models import ConfigModel, SourceConfig

console = Console()

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "cryptonews"
CONFIG_PATH_ENV = "CRYPTONEWS_CONFIG"


def _with_env_secret(section: Dict[str, Any], env_key: str, value_key: str) -> Dict[str, Any]:
    """Fill ``value_key`` from the environment variable named by ``env_key``, when set."""
    env_name = section.get(env_key)
    secret = os.environ.get(env_name) if env_name else None
    if secret:
        section[value_key] = secret
    return section


def _read_yaml(path: Path, kind: str) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"{kind.capitalize()} file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {kind} file: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid {kind} file: expected a mapping at the top level")
    return data


def _write_yaml(data: Dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True))


class Config:
    """Configuration manager.

    The config file path comes from the argument, then ``CRYPTONEWS_CONFIG``,
    then ``~/.config/cryptonews/config.yaml``. ``sources.yaml`` lives beside it.
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        if config_path is None:
            env_path = os.environ.get(CONFIG_PATH_ENV)
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_DIR / "config.yaml"
        self.config_path = config_path
        self._config: Optional[ConfigModel] = None

    @property
    def config(self) -> ConfigModel:
        """Parsed config, loaded on first access."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @property
    def sources_path(self) -> Path:
        return self.config_path.parent / "sources.yaml"

    def get_sources(self) -> List[SourceConfig]:
        """Sources from ``sources.yaml``, or the built-in registry when there is none."""
        if not self.sources_path.exists():
            from ..ingestion.sources import DEFAULT_SOURCES

            return list(DEFAULT_SOURCES)
        return load_sources(self.sources_path)

    def get_db_config(self) -> Dict[str, Any]:
        """Postgres settings with the password resolved from ``password_env``."""
        return _with_env_secret(self.config.postgres.model_dump(), "password_env", "password")

    def get_llm_config(self) -> Dict[str, Any]:
        """LLM settings with the key resolved from ``api_key_env``."""
        return _with_env_secret(self.config.llm.model_dump(), "api_key_env", "api_key")


def load_config(config_path: Path) -> ConfigModel:
    """
    Load configuration from YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the YAML or the settings in it are invalid
    """
    data = _read_yaml(config_path, "config")
    try:
        return ConfigModel(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e


def load_sources(sources_path: Path) -> List[SourceConfig]:
    """Load sources from YAML file; invalid entries are skipped with a warning."""
    data = _read_yaml(sources_path, "sources")

    sources = []
    for entry in data.get("sources") or []:
        try:
            sources.append(SourceConfig(**entry))
        except ValidationError as e:
            console.print(f"[yellow]Skipping invalid source {entry.get('name', 'unknown')}: {e}[/yellow]")
    return sources


def save_config(config: ConfigModel, config_path: Path) -> None:
    _write_yaml(config.model_dump(), config_path)


def save_sources(sources: List[SourceConfig], sources_path: Path) -> None:
    _write_yaml({"sources": [s.model_dump() for s in sources]}, sources_path)
