from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from .db.models import ConnectionParams
from .errors import ConfigError


@dataclass
class ConnectionConfig:
    host: str = ""
    port: str = ""
    database: str = ""
    user: str = ""
    password: str = field(default="", repr=False)
    max_prompt_attempts: int = 3

    def params(self) -> ConnectionParams:
        return ConnectionParams(
            host=self.host,
            port=self.port,
            database=self.database,
            user=self.user,
            password=self.password,
        )


@dataclass
class ProjectionConfig:
    exact_decimals: bool = False


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000


@dataclass
class ObservabilityConfig:
    log_level: str = "info"


@dataclass
class AppConfig:
    connection: ConnectionConfig
    projection: ProjectionConfig
    server: ServerConfig
    observability: ObservabilityConfig


_ENV_FIELDS = {
    "host": "DB2_HOST",
    "port": "DB2_PORT",
    "database": "DB2_DATABASE",
    "user": "DB2_USER",
    "password": "DB2_PASSWORD",
}


def _resolve_env(value: Any, env: Mapping[str, str], required: bool = True) -> Any:
    if isinstance(value, str):
        expanded = os.path.expandvars(value)
        if expanded.startswith("${") and expanded.endswith("}"):
            key = expanded[2:-1]
            if key not in env:
                if not required:
                    return ""
                raise ConfigError(f"Environment variable {key} is required but not set")
            return env[key]
        return expanded
    if isinstance(value, list):
        return [_resolve_env(v, env) for v in value]
    if isinstance(value, dict):
        return {k: _resolve_env(v, env) for k, v in value.items()}
    return value


def _resolve_connection(raw: Mapping[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    # unset credential variables stay empty so the credential prompt can fill them
    return {
        key: _resolve_env(value, env, required=key not in _ENV_FIELDS)
        for key, value in raw.items()
    }


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"Config section {name} must be a mapping")
    return value


def _text(value: Any) -> str:
    # ports are service-number text, YAML may hand them over as int
    return "" if value is None else str(value)


def _positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{field_name} must be an integer") from exc
    if number <= 0:
        raise ConfigError(f"{field_name} must be greater than 0")
    return number


def _build(resolved: Mapping[str, Any]) -> AppConfig:
    connection_raw = _section(resolved, "connection")
    projection_raw = _section(resolved, "projection")
    server_raw = _section(resolved, "server")
    observability_raw = _section(resolved, "observability")

    connection = ConnectionConfig(
        host=_text(connection_raw.get("host")),
        port=_text(connection_raw.get("port")),
        database=_text(connection_raw.get("database")),
        user=_text(connection_raw.get("user")),
        password=_text(connection_raw.get("password")),
        max_prompt_attempts=_positive_int(
            connection_raw.get("max_prompt_attempts", 3), "max_prompt_attempts"
        ),
    )
    projection = ProjectionConfig(
        exact_decimals=bool(projection_raw.get("exact_decimals", False)),
    )
    server = ServerConfig(
        host=str(server_raw.get("host", "0.0.0.0")),
        port=_positive_int(server_raw.get("port", 8000), "server.port"),
    )
    observability = ObservabilityConfig(
        log_level=str(observability_raw.get("log_level", "info")),
    )
    return AppConfig(
        connection=connection,
        projection=projection,
        server=server,
        observability=observability,
    )


def load_config(path: str | Path, env: Mapping[str, str] | None = None) -> AppConfig:
    env = env if env is not None else os.environ
    try:
        raw = yaml.safe_load(Path(path).read_text()) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise ConfigError("Config root must be a mapping")
    resolved = _resolve_env({k: v for k, v in raw.items() if k != "connection"}, env)
    resolved["connection"] = _resolve_connection(_section(raw, "connection"), env)
    return _build(resolved)


def config_from_env(env: Mapping[str, str] | None = None) -> AppConfig:
    """Build the configuration from DB2_* environment variables alone."""
    env = env if env is not None else os.environ
    connection = {name: env.get(key, "") for name, key in _ENV_FIELDS.items()}
    raw: dict[str, Any] = {
        "connection": connection,
        "observability": {"log_level": env.get("DB2_BROWSER_LOG_LEVEL", "info")},
    }
    if "DB2_BROWSER_PORT" in env:
        raw["server"] = {"port": env["DB2_BROWSER_PORT"]}
    return _build(raw)
