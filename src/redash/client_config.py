"""Client configuration loaded from TOML files and command-line overrides."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import tomllib

from .connection import DEFAULT_HOST, DEFAULT_PORT
from .protocol import DEFAULT_MAX_DEPTH


VALID_PORT_RANGE = range(1, 65536)
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ClientConfigError(ValueError):
    """Raised when a client configuration file fails validation."""


@dataclass(frozen=True)
class ClientConfig:
    """Resolved settings for one client session."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    connect_timeout: float | None = None
    max_depth: int = DEFAULT_MAX_DEPTH
    sidebar_ratio: float = 0.2
    log_file: Path | None = None
    log_level: str = "WARNING"

    def merged(self, **overrides: Any) -> "ClientConfig":
        """Return a copy with every non-``None`` entry of ``overrides`` applied."""

        known = {field.name for field in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ClientConfigError(
                f"unknown client settings: {', '.join(sorted(unknown))}"
            )
        applied = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **applied)


def load_client_config(config_path: Path) -> ClientConfig:
    """Parse and validate the ``[client]`` table stored at ``config_path``."""

    try:
        with config_path.open("rb") as stream:
            raw_data = tomllib.load(stream)
    except OSError as exc:
        raise ClientConfigError(f"unable to read {config_path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ClientConfigError(f"invalid TOML in {config_path}: {exc}") from exc

    client = _parse_client_section(raw_data)
    defaults = ClientConfig()
    settings: dict[str, Any] = {}

    if "host" in client:
        settings["host"] = _coerce_host(client["host"])
    if "port" in client:
        settings["port"] = _coerce_port(client["port"])
    if "connect_timeout" in client:
        settings["connect_timeout"] = _coerce_positive_float(
            client["connect_timeout"], "connect_timeout"
        )
    if "max_depth" in client:
        settings["max_depth"] = _coerce_max_depth(client["max_depth"])
    if "sidebar_ratio" in client:
        settings["sidebar_ratio"] = _coerce_ratio(client["sidebar_ratio"])
    if "log_file" in client:
        settings["log_file"] = _normalise_log_path(
            client["log_file"], base=config_path.parent
        )
    if "log_level" in client:
        settings["log_level"] = coerce_log_level(client["log_level"])

    unknown = set(client) - {field.name for field in fields(defaults)}
    if unknown:
        raise ClientConfigError(
            f"unknown [client] keys: {', '.join(sorted(unknown))}"
        )
    return replace(defaults, **settings)


def _parse_client_section(data: Mapping[str, Any]) -> Mapping[str, Any]:
    client = data.get("client")
    if client is None:
        raise ClientConfigError("client configuration requires a [client] table")
    if not isinstance(client, Mapping):
        raise ClientConfigError("[client] section must be a mapping")
    return client


def _coerce_host(raw_host: Any) -> str:
    if not isinstance(raw_host, str) or not raw_host.strip():
        raise ClientConfigError("host must be a non-empty string")
    return raw_host.strip()


def _coerce_port(raw_port: Any) -> int:
    if isinstance(raw_port, bool) or not isinstance(raw_port, (int, str)):
        raise ClientConfigError("port must be an integer")
    try:
        port = int(raw_port)
    except ValueError as exc:
        raise ClientConfigError(f"invalid port: {raw_port!r}") from exc
    if port not in VALID_PORT_RANGE:
        raise ClientConfigError(
            f"port {port} outside supported range {VALID_PORT_RANGE.start}-"
            f"{VALID_PORT_RANGE.stop - 1}"
        )
    return port


def _coerce_positive_float(raw_value: Any, name: str) -> float:
    if isinstance(raw_value, bool) or not isinstance(raw_value, (int, float)):
        raise ClientConfigError(f"{name} must be a number")
    value = float(raw_value)
    if value <= 0.0:
        raise ClientConfigError(f"{name} must be positive")
    return value


def _coerce_max_depth(raw_depth: Any) -> int:
    if isinstance(raw_depth, bool) or not isinstance(raw_depth, int):
        raise ClientConfigError("max_depth must be an integer")
    if raw_depth <= 0:
        raise ClientConfigError("max_depth must be positive")
    return raw_depth


def _coerce_ratio(raw_ratio: Any) -> float:
    if isinstance(raw_ratio, bool) or not isinstance(raw_ratio, (int, float)):
        raise ClientConfigError("sidebar_ratio must be a number")
    ratio = float(raw_ratio)
    if not 0.0 < ratio < 1.0:
        raise ClientConfigError("sidebar_ratio must be between 0 and 1")
    return ratio


def coerce_log_level(raw_level: Any) -> str:
    """Normalise ``raw_level`` to one of :data:`VALID_LOG_LEVELS`."""

    if not isinstance(raw_level, str):
        raise ClientConfigError("log_level must be a string")
    level = raw_level.strip().upper()
    if level not in VALID_LOG_LEVELS:
        raise ClientConfigError(
            f"log_level must be one of {', '.join(VALID_LOG_LEVELS)}"
        )
    return level


def _normalise_log_path(raw_path: Any, *, base: Path) -> Path:
    if not isinstance(raw_path, str) or not raw_path.strip():
        raise ClientConfigError("log_file must be a non-empty string")
    path = Path(raw_path).expanduser()
    if not path.is_absolute():
        path = base / path
    return path.resolve()


__all__ = [
    "ClientConfig",
    "ClientConfigError",
    "VALID_LOG_LEVELS",
    "coerce_log_level",
    "load_client_config",
]
