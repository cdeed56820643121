from __future__ import annotations

import dataclasses
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .registry import DEFAULT_TIMEOUT_MS

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _default_settings_path() -> Path:
    """Return bundled default settings TOML path.

    Example:
        ```python
        path = _default_settings_path()
        ```
    """
    return Path(__file__).with_name("default_settings.toml")


def _read_settings_toml(path: Path) -> dict[str, Any]:
    """Read settings TOML and return the server table.

    Example:
        ```python
        raw = _read_settings_toml(Path("/tmp/just-mcp.toml"))
        ```
    """
    raw = tomllib.loads(path.read_text(encoding="utf-8"))
    server_obj = raw.get("server", raw)
    if not isinstance(server_obj, dict):
        raise ValueError("Settings config must be a TOML table")
    return server_obj


def _read_default_settings() -> dict[str, Any]:
    """Read the bundled defaults, falling back to built-in values.

    Example:
        ```python
        defaults = _read_default_settings()
        ```
    """
    path = _default_settings_path()
    if not path.exists():
        return {"executable": "just", "default_timeout_ms": DEFAULT_TIMEOUT_MS, "log_level": "INFO"}
    return _read_settings_toml(path)


_DEFAULT_SETTINGS_RAW = _read_default_settings()
DEFAULT_EXECUTABLE = str(_DEFAULT_SETTINGS_RAW.get("executable", "just"))
DEFAULT_SERVER_TIMEOUT_MS = float(_DEFAULT_SETTINGS_RAW.get("default_timeout_ms", DEFAULT_TIMEOUT_MS))
DEFAULT_LOG_LEVEL = str(_DEFAULT_SETTINGS_RAW.get("log_level", "INFO"))


@dataclass(frozen=True, slots=True)
class ServerSettings:
    """Process-wide configuration, fixed at startup.

    Example:
        ```python
        settings = ServerSettings(executable="just", default_timeout_ms=60_000)
        ```
    """

    executable: str = DEFAULT_EXECUTABLE
    default_timeout_ms: float = DEFAULT_SERVER_TIMEOUT_MS
    log_level: str = DEFAULT_LOG_LEVEL
    config_path: str | None = None

    def __post_init__(self) -> None:
        """Validate values after dataclass initialization.

        Example:
            ```python
            ServerSettings(log_level="DEBUG")
            ```
        """
        if not isinstance(self.executable, str) or not self.executable.strip():
            raise ValueError("'executable' must be a non-empty string")
        if isinstance(self.default_timeout_ms, bool) or not isinstance(self.default_timeout_ms, (int, float)):
            raise ValueError("'default_timeout_ms' must be a number")
        if self.default_timeout_ms <= 0:
            raise ValueError("'default_timeout_ms' must be positive")
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ValueError(f"'log_level' must be one of {', '.join(LOG_LEVELS)}")

    @classmethod
    def from_file(cls, config_path: str) -> "ServerSettings":
        """Create settings from a TOML file.

        Example:
            ```python
            settings = ServerSettings.from_file("/etc/just-mcp.toml")
            ```
        """
        raw = _read_settings_toml(Path(config_path))
        return cls(
            executable=raw.get("executable", DEFAULT_EXECUTABLE),
            default_timeout_ms=raw.get("default_timeout_ms", DEFAULT_SERVER_TIMEOUT_MS),
            log_level=str(raw.get("log_level", DEFAULT_LOG_LEVEL)),
            config_path=config_path,
        )

    def with_overrides(self, **overrides: Any) -> "ServerSettings":
        """Return a copy with every non-None override applied.

        Example:
            ```python
            settings = ServerSettings().with_overrides(executable="/opt/just", log_level=None)
            ```
        """
        changes = {key: value for key, value in overrides.items() if value is not None}
        return dataclasses.replace(self, **changes)
