# src/zipserve/core/config.py
"""
ZipServe - Directory Archive Server - Configuration Management
Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as published
by the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program. If not, see <https://www.gnu.org/licenses/>.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from . import constants
from .exceptions import ConfigurationError
from .logging_config import parse_log_level

log = logging.getLogger(__name__)

# --- Default Configuration Values ---
# Central source of truth for all settings and their defaults.

DEFAULT_SETTINGS = {
    "server_port": constants.DEFAULT_PORT,
    "root_directory": constants.DEFAULT_ROOT_DIRECTORY,
    "host": constants.DEFAULT_HOST,
    "log_level": constants.DEFAULT_LOG_LEVEL,
}

# Older config.json files spell these keys differently.
LEGACY_KEYS = {
    "port": "server_port",
    "rootDirectory": "root_directory",
}


class ServerConfig(BaseModel):
    """
    Process-wide settings. Built once at startup and passed explicitly to the
    app factory; instances are immutable.
    """

    model_config = ConfigDict(frozen=True)

    port: int = Field(constants.DEFAULT_PORT, ge=1, le=65535)
    root_directory: Path
    host: str = constants.DEFAULT_HOST
    log_level: str = constants.DEFAULT_LOG_LEVEL

    @field_validator("root_directory")
    @classmethod
    def _make_root_absolute(cls, value: Path) -> Path:
        return value.expanduser().resolve()

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        parse_log_level(value)
        return value.lower()


def _read_config_file(config_file: Path) -> Dict[str, Any]:
    """Reads a JSON config file and maps it onto DEFAULT_SETTINGS keys."""
    try:
        with config_file.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except (IOError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot load configuration from {config_file}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Configuration in {config_file} must be a JSON object")

    settings = {}
    for key, value in raw.items():
        key = LEGACY_KEYS.get(key, key)
        if key not in DEFAULT_SETTINGS:
            log.warning(f"Ignoring unknown configuration key: '{key}'")
            continue
        settings[key] = value
    log.info(f"Configuration loaded from {config_file}")
    return settings


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ServerConfig:
    """
    Builds the ServerConfig from defaults, then the optional JSON file, then
    explicit overrides (None values in overrides are skipped).
    """
    settings = DEFAULT_SETTINGS.copy()
    if config_file is not None:
        settings.update(_read_config_file(Path(config_file)))
    if overrides:
        settings.update({key: value for key, value in overrides.items() if value is not None})

    try:
        config = ServerConfig(
            port=settings["server_port"],
            root_directory=settings["root_directory"],
            host=settings["host"],
            log_level=settings["log_level"],
        )
    except (ValidationError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    if not config.root_directory.is_dir():
        log.warning(f"Served root {config.root_directory} is not a readable directory yet.")
    return config
