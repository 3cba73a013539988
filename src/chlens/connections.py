"""Named connection management — ~/.chlens/connections.toml."""

from __future__ import annotations

import os
import stat
import tomllib
from pathlib import Path

from chlens.adapters._base import ConnectionCredentials

_CONNECTIONS_FILE = Path.home() / ".chlens" / "connections.toml"


def _escape_toml_value(v: str) -> str:
    """Escape a string for safe inclusion in a TOML double-quoted value."""
    return v.replace("\\", "\\\\").replace('"', '\\"')


def _write_toml(data: dict[str, dict]) -> None:
    """Serialize connections dict to TOML and write with restricted permissions."""
    lines: list[str] = []
    for conn_name, entry in data.items():
        lines.append(f'["{_escape_toml_value(conn_name)}"]')
        for k, v in entry.items():
            lines.append(f'{k} = "{_escape_toml_value(str(v))}"')
        lines.append("")

    _CONNECTIONS_FILE.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    _CONNECTIONS_FILE.write_text("\n".join(lines))
    os.chmod(_CONNECTIONS_FILE, stat.S_IRUSR | stat.S_IWUSR)  # 0600


def _load_file() -> dict:
    if not _CONNECTIONS_FILE.exists():
        return {}
    return tomllib.loads(_CONNECTIONS_FILE.read_text())


def list_connections() -> dict[str, dict]:
    """Return all named connections as {name: {param: value}}."""
    return _load_file()


def get_connection(name: str) -> ConnectionCredentials | None:
    """Look up a named connection. Returns None if not found.

    Raises DriverError if the stored entry has invalid params.
    """
    data = _load_file()
    if name not in data:
        return None
    params = {k: str(v) for k, v in data[name].items()}
    return ConnectionCredentials.from_params(name, params)


def save_connection(name: str, params: dict[str, str]) -> Path:
    """Validate and save a named connection to the config file."""
    ConnectionCredentials.from_params(name, params)
    data = _load_file()
    data[name] = dict(params)
    _write_toml(data)
    return _CONNECTIONS_FILE


def remove_connection(name: str) -> bool:
    """Remove a named connection. Returns True if removed, False if not found."""
    data = _load_file()
    if name not in data:
        return False
    del data[name]
    if not data:
        _CONNECTIONS_FILE.unlink(missing_ok=True)
    else:
        _write_toml(data)
    return True
