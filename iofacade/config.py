"""Filesystem configuration.

Named filesystems live in ~/.iofacade/filesystems/<name>.json (or .yaml/.yml).
Priority for picking one: explicit name > IOFACADE_FILESYSTEM env > "local" (default)
"""

from __future__ import annotations

import json
import logging
import os
import posixpath
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from iofacade.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_HOME = Path.home() / ".iofacade"
FILESYSTEMS_DIR = CONFIG_HOME / "filesystems"
ENV_FILESYSTEM = "IOFACADE_FILESYSTEM"


class BackendConfig(BaseModel):
    """Base for backend connection settings."""

    model_config = ConfigDict(extra="forbid")


class LocalConfig(BackendConfig):
    root: str = Field("/", description="Chroot-like base every path string is resolved against")

    @field_validator("root")
    @classmethod
    def normalize_root(cls, v: str) -> str:
        if not v:
            raise ValueError("root must not be empty")
        return os.path.abspath(os.path.expanduser(os.path.expandvars(v)))


class MemoryConfig(BackendConfig):
    root: str = Field("/", description="Location every path string is resolved against")
    label: str = Field("memory", description="Human-readable name of the store")

    @field_validator("root")
    @classmethod
    def normalize_root(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("root must be absolute")
        normalized = posixpath.normpath(v)
        # POSIX keeps a leading "//"; the store has a single root
        return "/" + normalized.lstrip("/")


class FileSystemSettings(BaseModel):
    """A named filesystem: which backend, and its raw options."""

    backend: str = "local"
    # carries the config file stem through to the factory
    name: str = "local"
    options: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def load(cls, name: str, config_dir: Path | None = None) -> FileSystemSettings:
        base = config_dir or FILESYSTEMS_DIR
        path = _find_settings_file(base, name)
        if path is None:
            if name == "local":
                return cls()
            raise FileNotFoundError(f"Filesystem config not found: {base / name}.json")

        data = _read_settings_file(path)
        data = _remove_none_values(_expand_env_vars(data))
        try:
            settings = cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid filesystem config: {e}", str(path)) from e
        settings.name = name
        logger.debug("Loaded filesystem settings %s from %s", name, path)
        return settings

    def save(self, name: str, config_dir: Path | None = None) -> Path:
        path = (config_dir or FILESYSTEMS_DIR) / f"{name}.json"
        path.parent.mkdir(parents=True, exist_ok=True)

        data: dict[str, Any] = {"backend": self.backend}
        if self.options:
            data["options"] = self.options

        path.write_text(json.dumps(data, indent=2))
        return path


def resolve_filesystem_name(cli_arg: str | None) -> str:
    if cli_arg:
        return cli_arg
    return os.getenv(ENV_FILESYSTEM, "local")


def _find_settings_file(base: Path, name: str) -> Path | None:
    for suffix in (".json", ".yaml", ".yml"):
        candidate = base / f"{name}{suffix}"
        if candidate.exists():
            return candidate
    return None


def _read_settings_file(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read filesystem config: {e}", str(path)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError("Filesystem config must be a mapping", str(path))
    return data


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand ${VAR} and ~ in string values."""
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    if isinstance(obj, str):
        return os.path.expandvars(os.path.expanduser(obj))
    return obj


def _remove_none_values(obj: Any) -> Any:
    """Recursively remove None values to allow Pydantic defaults."""
    if isinstance(obj, dict):
        return {k: _remove_none_values(v) for k, v in obj.items() if v is not None}
    if isinstance(obj, list):
        return [_remove_none_values(v) for v in obj if v is not None]
    return obj
