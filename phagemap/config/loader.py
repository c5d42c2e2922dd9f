from __future__ import annotations

import functools
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load the YAML config (default: config/phagemap.yml)
- Validate it against config_schema.json (shipped next to this module)
- Apply defaults for missing sections
- Apply the MAX_FILE_SIZE environment override
"""

__all__ = [
    "ConfigError",
    "DatabaseConfig",
    "UploadConfig",
    "AppConfig",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_MAX_FILE_SIZE",
    "default_config",
    "load_config",
]

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/phagemap.yml")

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
DEFAULT_EXTENSIONS = (".xlsx", ".xls")
DEFAULT_TABLE = "excel_data"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection fallback values; environment variables take precedence."""
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None
    table: str = DEFAULT_TABLE


@dataclass(frozen=True)
class UploadConfig:
    max_file_size: int = DEFAULT_MAX_FILE_SIZE  # bytes
    allowed_extensions: tuple[str, ...] = DEFAULT_EXTENSIONS


@dataclass(frozen=True)
class AppConfig:
    source_directory: str | None = None
    upload: UploadConfig = field(default_factory=UploadConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)


@functools.cache
def _schema() -> dict[str, Any]:
    try:
        return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Check config data against the bundled JSON schema.

    Raises:
        ConfigError: schema unreadable, or data fails validation (first error only)
    """
    try:
        jsonschema.validate(data, _schema())
    except ValidationError as e:
        where = ".".join(str(p) for p in e.absolute_path)
        raise ConfigError(f"config validation failed: {where + ': ' if where else ''}{e.message}") from e


def _env_max_file_size(fallback: int) -> int:
    raw = os.getenv("MAX_FILE_SIZE")
    if raw is None or raw.strip() == "":
        return fallback
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"invalid MAX_FILE_SIZE: {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"invalid MAX_FILE_SIZE: {raw!r}")
    return value


def _build(data: dict[str, Any]) -> AppConfig:
    up_raw = data.get("upload") or {}
    db_raw = data.get("database") or {}
    upload = UploadConfig(
        max_file_size=_env_max_file_size(up_raw.get("max_file_size", DEFAULT_MAX_FILE_SIZE)),
        allowed_extensions=tuple(
            e.lower() for e in up_raw.get("allowed_extensions", DEFAULT_EXTENSIONS)
        ),
    )
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
        table=db_raw.get("table", DEFAULT_TABLE),
    )
    return AppConfig(source_directory=data.get("source_directory"), upload=upload, database=db)


def default_config() -> AppConfig:
    """Defaults only (plus environment overrides); used when no config file exists."""
    return _build({})


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)
    return _build(data)
