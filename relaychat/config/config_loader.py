"""Configuration loading utilities."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors.internal import ConfigError
from ..logs.logger import logger
from .model import ClientConfig

DEFAULT_CONFIG_FILE = "relaychat.json"

# Environment variable -> config field
ENV_OVERRIDES = {
    "RELAYCHAT_HOST": "host",
    "RELAYCHAT_PORT": "port",
    "RELAYCHAT_NICK": "nickname",
    "RELAYCHAT_CHANNELS": "channels",
}


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a JSON object from ``path``.

    Raises:
        ConfigError: the file cannot be read or does not hold a JSON object.
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            raw: Any = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", data={"path": str(path)}) from e
    except ValueError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}", data={"path": str(path)}) from e
    if not isinstance(raw, Mapping):
        raise ConfigError(f"{path} must contain a JSON object", data={"path": str(path)})
    return dict(raw)


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    environ = os.environ if environ is None else environ
    return {
        field: environ[name]
        for name, field in ENV_OVERRIDES.items()
        if environ.get(name)
    }


def load_config(
    path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> ClientConfig:
    """Build the client configuration.

    Precedence, lowest first: model defaults, the JSON file, ``RELAYCHAT_*``
    environment variables, then explicit ``overrides`` (``None`` values are
    ignored). Without an explicit ``path`` the file named by
    ``RELAYCHAT_CONF_FILE`` (default ``relaychat.json``) is optional.

    Raises:
        ConfigError: an explicit file is missing or unreadable, or the merged
            values fail validation.
    """
    env = os.environ if environ is None else environ
    explicit = path is not None
    config_path = Path(path if explicit else env.get("RELAYCHAT_CONF_FILE", DEFAULT_CONFIG_FILE))

    data: dict[str, Any] = {}
    if config_path.exists() or explicit:
        data.update(read_config_file(config_path))
        source = str(config_path)
    else:
        logger.log_event("config", "missing_file", level=logging.DEBUG, path=str(config_path))
        source = "defaults"

    data.update(env_overrides(env))
    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        config = ClientConfig.from_dict(data)
    except ValidationError as e:
        logger.log_event("config", "invalid", level=logging.ERROR, error=str(e))
        raise ConfigError(f"Invalid configuration: {e}", data={"source": source}) from e
    logger.log_event("config", "loaded", level=logging.DEBUG, source=source)
    return config
