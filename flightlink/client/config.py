from __future__ import annotations

import logging
import os
from typing import Any, Dict

from dotenv import load_dotenv

from flightlink.protocol.constants import DEFAULT_PORT

ENV_PREFIX = "FLIGHTLINK_"

DEFAULT_CONFIG: Dict[str, Any] = {
    "server_host": "127.0.0.1",
    "server_port": DEFAULT_PORT,
    "read_chunk_size": 65536,
    "reconnect_backoff": 1.0,
    "max_reconnect_backoff": 30.0,
    "max_reconnect_retries": 0,
    "log_level": "INFO",
    "debug_mode": False,
}

CLIENT_CONFIG: Dict[str, Any] = DEFAULT_CONFIG.copy()


class ConfigError(Exception):
    """Raised when a configuration value cannot be used."""


def load_config(env_path: str = ".env") -> Dict[str, Any]:
    """
    Rebuild ``CLIENT_CONFIG`` from ``env_path`` and ``FLIGHTLINK_*`` variables.

    Variables already present in the environment win over the file. Nothing
    is changed when a value is rejected.
    """
    if os.path.exists(env_path):
        load_dotenv(env_path)

    loaded = {
        key: _coerce_type(key, os.environ.get(ENV_PREFIX + key.upper(), default))
        for key, default in DEFAULT_CONFIG.items()
    }
    _validate_config(loaded)

    CLIENT_CONFIG.update(loaded)
    logging.getLogger().setLevel(CLIENT_CONFIG["log_level"])
    return CLIENT_CONFIG


def _coerce_type(key: str, value: Any) -> Any:
    target_type = type(DEFAULT_CONFIG[key])
    if isinstance(value, target_type):
        return value
    if target_type is bool:
        return str(value).strip().lower() in ("1", "true", "yes", "on")
    try:
        return target_type(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{ENV_PREFIX}{key.upper()}={value!r} is not a valid {target_type.__name__}") from exc


def _validate_config(values: Dict[str, Any]) -> None:
    if not (1 <= values["server_port"] <= 65535):
        raise ConfigError("server_port must be between 1 and 65535")
    if values["read_chunk_size"] <= 0:
        raise ConfigError("read_chunk_size must be positive")
    if values["max_reconnect_retries"] < 0:
        raise ConfigError("max_reconnect_retries must not be negative")
    if values["reconnect_backoff"] < 0 or values["max_reconnect_backoff"] < 0:
        raise ConfigError("reconnect backoff must not be negative")
    level = values["log_level"].upper()
    if level not in logging.getLevelNamesMapping():
        raise ConfigError(f"Unknown log_level {values['log_level']}")
    values["log_level"] = level


__all__ = ["CLIENT_CONFIG", "DEFAULT_CONFIG", "ENV_PREFIX", "ConfigError", "load_config"]
