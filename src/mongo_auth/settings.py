"""Process-wide connection defaults.

Sessions take an explicit host and port, but either may be left empty.  The
gaps are filled from a YAML settings file, falling back to the built-in
``localhost:27017``.  The file looks like::

    mongo:
      default_host: db.internal
      default_port: 27017
      auto_reconnect: true

and is located through the *path* argument of ``load_settings`` or the
``MONGO_AUTH_SETTINGS`` environment variable.
"""

from __future__ import annotations

import dataclasses
import os
import pathlib
from typing import Any

import yaml

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 27017
MAX_PORT = 65535
SETTINGS_ENV_VAR = "MONGO_AUTH_SETTINGS"


class SettingsError(Exception):
    """Raised when the settings file is missing or malformed."""


@dataclasses.dataclass(frozen=True)
class ClientSettings:
    """Defaults applied when a caller leaves host or port unset."""

    default_host: str = DEFAULT_HOST
    default_port: int = DEFAULT_PORT
    auto_reconnect: bool = True

    def resolve_address(self, host: str | None = None, port: int | None = None) -> str:
        """Return ``host:port``, substituting defaults for empty values.

        Raises ``SettingsError`` when the resulting port is not a valid TCP port.
        """
        port = port or self.default_port
        _check_port(port)
        return f"{host or self.default_host}:{port}"


def load_settings(path: str | pathlib.Path | None = None) -> ClientSettings:
    """Load settings from *path*, ``$MONGO_AUTH_SETTINGS``, or built-in defaults."""
    if path is None:
        path = os.environ.get(SETTINGS_ENV_VAR)
    if not path:
        return ClientSettings()

    settings_path = pathlib.Path(path)
    if not settings_path.exists():
        raise SettingsError(f"Settings file not found: {settings_path}")
    with open(settings_path) as fh:
        data = yaml.safe_load(fh)

    if data is None:
        return ClientSettings()
    if not isinstance(data, dict):
        raise SettingsError("Settings file must contain a mapping")
    block = data.get("mongo", {})
    if not isinstance(block, dict):
        raise SettingsError("'mongo' settings must be a mapping")
    return _from_block(block)


def _from_block(block: dict[str, Any]) -> ClientSettings:
    host = block.get("default_host") or DEFAULT_HOST
    port = block.get("default_port") or DEFAULT_PORT
    auto_reconnect = block.get("auto_reconnect", True)

    if not isinstance(host, str):
        raise SettingsError(f"default_host must be a string, got {host!r}")
    _check_port(port, "default_port")
    if not isinstance(auto_reconnect, bool):
        raise SettingsError(f"auto_reconnect must be a boolean, got {auto_reconnect!r}")

    return ClientSettings(
        default_host=host,
        default_port=port,
        auto_reconnect=auto_reconnect,
    )


def _check_port(port: Any, label: str = "port") -> None:
    # bool is an int subclass; reject it explicitly.
    if isinstance(port, bool) or not isinstance(port, int):
        raise SettingsError(f"{label} must be an integer, got {port!r}")
    if not 1 <= port <= MAX_PORT:
        raise SettingsError(f"{label} must be between 1 and {MAX_PORT}, got {port}")
