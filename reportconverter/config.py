"""Application configuration loaded from a YAML file with environment overrides."""

import functools
import os
from dataclasses import dataclass, field, fields
from typing import Any, Mapping

import yaml

CONFIG_FILE = "config.yaml"


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server settings."""

    port: int = 0
    name: str = ""
    url: str = ""
    os: str = ""


@dataclass(frozen=True)
class DbConfig:
    """PostgreSQL connection settings."""

    host: str = ""
    port: int = 0
    user: str = ""
    password: str = ""
    dbname: str = ""
    sslmode: str = ""
    timezone: str = ""


@dataclass(frozen=True)
class Config:
    """Complete application configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    db: DbConfig = field(default_factory=DbConfig)


def _env_name(key: str) -> str:
    return key.replace(".", "_").upper()


def _coerce(value: Any, kind: type, key: str) -> Any:
    if kind is int:
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"config key {key!r}: cannot convert {value!r} to int") from exc
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _lowered(raw: Any, where: str) -> dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"config section {where!r} must be a mapping")
    return {str(key).lower(): value for key, value in raw.items()}


def _build_section(cls: type, section: str, raw: Any, environ: Mapping[str, str]) -> Any:
    present = _lowered(raw, section)
    values = {}
    for spec in fields(cls):
        if spec.name not in present:
            continue
        key = f"{section}.{spec.name}"
        value = environ.get(_env_name(key), present[spec.name])
        values[spec.name] = _coerce(value, spec.type, key)
    return cls(**values)


def load_config(path=CONFIG_FILE, environ=None) -> Config:
    """Read the YAML file at ``path``; keys it defines may be overridden by
    environment variables such as ``SERVER_PORT`` or ``DB_HOST``."""
    environ = os.environ if environ is None else environ
    with open(path, encoding="utf-8") as handle:
        raw = yaml.safe_load(handle)
    top = _lowered(raw, "<root>")
    return Config(
        server=_build_section(ServerConfig, "server", top.get("server"), environ),
        db=_build_section(DbConfig, "db", top.get("db"), environ),
    )


@functools.lru_cache(maxsize=None)
def get_config() -> Config:
    """Load ``config.yaml`` from the working directory once and reuse it."""
    return load_config()