"""User configuration: where and how the tracker blob is stored."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import typer
import yaml
from pydantic import BaseModel, ValidationError, field_validator

from shiftlog.core.errors import ShiftLogValueError
from shiftlog.storage import (
    STORAGE_KEY,
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    SqliteStore,
)

__all__ = ["APP_NAME", "ShiftLogConfig", "app_dir", "build_store", "default_config_path", "load_config"]

APP_NAME = "shiftlog"

_DEFAULT_FILENAMES = {
    "json": "state.json",
    "sqlite": "state.sqlite3",
    "memory": "",
}


def app_dir() -> Path:
    return Path(typer.get_app_dir(APP_NAME))


def default_config_path() -> Path:
    return app_dir() / "config.yaml"


class ShiftLogConfig(BaseModel):
    """Storage and logging settings.

    Attributes
    ----------
    store:
        Backend holding the blob: ``json`` (default), ``sqlite`` or ``memory``.
    path:
        File backing the store. Defaults to ``state.json`` / ``state.sqlite3`` in the
        per-user application directory; ignored for ``memory``.
    key:
        Key the blob is stored under.
    log_level:
        Level applied to the ``shiftlog`` logger by the CLI.
    """

    store: Literal["json", "sqlite", "memory"] = "json"
    path: Path | None = None
    key: str = STORAGE_KEY
    log_level: str = "WARNING"

    @field_validator("key")
    @classmethod
    def _key_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("key must not be blank")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level '{value}'")
        return level

    def resolved_path(self) -> Path | None:
        if self.store == "memory":
            return None
        if self.path is not None:
            return self.path.expanduser()
        return app_dir() / _DEFAULT_FILENAMES[self.store]


def load_config(path: str | Path | None = None) -> ShiftLogConfig:
    """Read a YAML config file; a missing default file yields the defaults.

    An explicitly requested file must exist.
    """
    explicit = path is not None
    config_path = Path(path) if explicit else default_config_path()
    if not config_path.exists():
        if explicit:
            raise ShiftLogValueError(f"Config file not found: {config_path}")
        return ShiftLogConfig()
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ShiftLogValueError(f"Config file {config_path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ShiftLogValueError(f"Config file {config_path} must contain a mapping")
    if data.get("path") is not None:
        raw_path = Path(str(data["path"])).expanduser()
        if not raw_path.is_absolute():
            raw_path = config_path.parent / raw_path
        data["path"] = raw_path
    try:
        return ShiftLogConfig.model_validate(data)
    except ValidationError as exc:
        raise ShiftLogValueError(f"Invalid config {config_path}: {exc}") from exc


def build_store(config: ShiftLogConfig) -> KeyValueStore:
    path = config.resolved_path()
    if config.store == "sqlite":
        return SqliteStore(path)
    if config.store == "memory":
        return MemoryStore()
    return JsonFileStore(path)
