"""Client settings, read from the environment (and ``.env``) or a mapping."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional
import os

from dotenv import load_dotenv

from .exceptions import BadParameterError

DEFAULT_PORT = 8086
ENV_PREFIX = "INFLUXDB_"

# ClientConfig field -> environment variable suffix
_ENV_NAMES = {
    "host": "HOST",
    "port": "PORT",
    "username": "USER",
    "password": "PWD",
    "database": "DB",
    "ssl": "SSL",
    "verify_ssl": "VERIFY_SSL",
    "precision": "PRECISION",
    "timeout": "TIMEOUT",
    "allow_write": "ALLOW_WRITE",
}

# Short mapping keys accepted next to the field names.
_ALIASES = {"user": "username", "pwd": "password", "db": "database"}

_TRUE_WORDS = {"1", "true", "yes", "y", "on"}


def load_env() -> None:
    """Load environment variables from a .env file if present."""
    load_dotenv()


@dataclass(frozen=True)
class ClientConfig:
    host: str
    port: int = DEFAULT_PORT
    username: Optional[str] = None
    password: Optional[str] = None
    database: Optional[str] = None
    ssl: bool = False
    verify_ssl: bool = False
    precision: Optional[str] = None
    timeout: Optional[float] = None
    allow_write: bool = False


def config_from_env() -> ClientConfig:
    """Build a ClientConfig from ``INFLUXDB_*`` variables.

    Unset or blank variables keep the dataclass defaults. ``INFLUXDB_HOST``
    is required.
    """
    load_env()
    values = {}
    for name, suffix in _ENV_NAMES.items():
        raw = os.getenv(ENV_PREFIX + suffix)
        if raw is not None and raw.strip():
            values[name] = raw.strip()
    return resolve_config(values)


def resolve_config(config: ClientConfig | Mapping[str, Any]) -> ClientConfig:
    """Turn a mapping (field names or ``user``/``pwd``/``db``) into a ClientConfig.

    Text values are converted to the field types, so the same mapping shape
    works for environment variables and parsed config files.
    """
    if isinstance(config, ClientConfig):
        return config
    values: Dict[str, Any] = {}
    for key, value in config.items():
        name = _ALIASES.get(key, key)
        # Field names win over aliases.
        if name in values and key != name:
            continue
        values[name] = value

    unknown = set(values) - {f.name for f in fields(ClientConfig)}
    if unknown:
        raise BadParameterError(f"Unknown config keys: {', '.join(sorted(unknown))}")
    if not values.get("host"):
        raise BadParameterError(f"No host configured (set {ENV_PREFIX}HOST)")

    for name in ("ssl", "verify_ssl", "allow_write"):
        if name in values:
            values[name] = _to_bool(values[name])
    if values.get("port") is not None:
        values["port"] = _to_number(int, "port", values["port"])
    if values.get("timeout") is not None:
        values["timeout"] = _to_number(float, "timeout", values["timeout"])
    return ClientConfig(**values)


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_WORDS
    return bool(value)


def _to_number(kind: type, name: str, value: Any) -> Any:
    try:
        return kind(value)
    except (TypeError, ValueError) as exc:
        raise BadParameterError(f"Invalid {name}: {value!r}") from exc
