"""tooldialect configuration management.

Loads configuration from .tooldialect/config.yaml with sensible defaults.
Settings can be overridden via environment variables (TOOLDIALECT_*).

Config locations (in priority order):
1. Explicit path passed to load_config()
2. .tooldialect/config.yaml (project-local)
3. ~/.tooldialect/config.yaml (user-global)
4. Built-in defaults

Example config.yaml:

    default_dialect: fenced
    dialects:
      tagged:
        validate_arguments: true
      structured:
        wrap_errors: false
        system_template: |
          Tools: {tools}
"""

import logging
import os
import threading
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from tooldialect.foundation.errors import ErrorCode, config_error

logger = logging.getLogger(__name__)

_ENV_PREFIX = "TOOLDIALECT_"


@dataclass(frozen=True, slots=True)
class DialectSettings:
    """Per-dialect overrides."""

    system_template: str | None = None
    """Replacement system template. Must still contain the ``{tools}`` placeholder."""

    wrap_errors: bool | None = None
    """Whether failures are wrapped in the dialect's feedback markers.

    ``None`` keeps the dialect's own choice.
    """

    validate_arguments: bool = False
    """Check intent arguments against the capability schema before invoking."""


@dataclass(frozen=True, slots=True)
class ToolDialectConfig:
    """Root configuration for tooldialect."""

    default_dialect: str = "tagged"
    """Dialect used when the caller does not pick one (CLI default)."""

    dialects: dict[str, DialectSettings] = field(default_factory=dict)
    """Settings keyed by dialect id."""

    debug: bool = False
    """Enable debug logging by default."""

    def settings_for(self, dialect_id: str) -> DialectSettings:
        """Settings for one dialect, defaults when none are configured."""
        return self.dialects.get(dialect_id) or DialectSettings()


_SETTING_KEYS = tuple(f.name for f in fields(DialectSettings))

# Global config instance (lazy-loaded, thread-safe)
_config: ToolDialectConfig | None = None
_config_lock = threading.Lock()


def _coerce_env_value(value: str) -> Any:
    if value.lower() in ("true", "false", "yes", "no", "1", "0"):
        return value.lower() in ("true", "yes", "1")
    return value


def _apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides.

    Examples:
        TOOLDIALECT_DEFAULT_DIALECT=fenced
        TOOLDIALECT_DEBUG=true
        TOOLDIALECT_TAGGED_VALIDATE_ARGUMENTS=true
        TOOLDIALECT_STRUCTURED_WRAP_ERRORS=false
    """
    for key, value in os.environ.items():
        if not key.startswith(_ENV_PREFIX):
            continue
        path = key[len(_ENV_PREFIX):].lower()

        if path == "default_dialect":
            config_dict["default_dialect"] = value
            continue
        if path == "debug":
            config_dict["debug"] = _coerce_env_value(value) is True
            continue

        for setting in _SETTING_KEYS:
            suffix = f"_{setting}"
            if path.endswith(suffix) and len(path) > len(suffix):
                dialect_id = path[: -len(suffix)]
                section = config_dict.setdefault("dialects", {}).setdefault(dialect_id, {})
                section[setting] = (
                    value if setting == "system_template" else _coerce_env_value(value)
                )
                break

    return config_dict


def _dict_to_config(data: dict[str, Any]) -> ToolDialectConfig:
    """Convert a dict to ToolDialectConfig."""
    raw_dialects = data.get("dialects") or {}
    if not isinstance(raw_dialects, dict):
        raise config_error(ErrorCode.CONFIG_INVALID, key="dialects", detail="expected a mapping")

    dialects: dict[str, DialectSettings] = {}
    for dialect_id, section in raw_dialects.items():
        try:
            dialects[str(dialect_id)] = DialectSettings(**(section or {}))
        except TypeError as e:
            raise config_error(
                ErrorCode.CONFIG_INVALID,
                cause=e,
                key=f"dialects.{dialect_id}",
                detail=str(e),
            ) from e

    return ToolDialectConfig(
        default_dialect=str(data.get("default_dialect", "tagged")),
        dialects=dialects,
        debug=bool(data.get("debug", False)),
    )


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise config_error(ErrorCode.CONFIG_INVALID, cause=e, key=str(path), detail=str(e)) from e
    if not isinstance(data, dict):
        raise config_error(ErrorCode.CONFIG_INVALID, key=str(path), detail="expected a mapping")
    return data


def load_config(path: str | Path | None = None) -> ToolDialectConfig:
    """Load configuration from file with defaults and env overrides.

    Args:
        path: Optional explicit config file path.

    Returns:
        Merged ToolDialectConfig instance.

    Raises:
        ToolDialectError: If a config file exists but is invalid.
    """
    global _config

    config_dict: dict[str, Any] = {}

    config_paths: list[Path] = []
    if path:
        config_paths.append(Path(path))
    config_paths.extend([
        Path(".tooldialect/config.yaml"),
        Path.home() / ".tooldialect" / "config.yaml",
    ])

    for config_path in config_paths:
        if config_path.exists():
            config_dict = _read_yaml(config_path)
            logger.debug("Loaded config from %s", config_path)
            break

    config_dict = _apply_env_overrides(config_dict)

    _config = _dict_to_config(config_dict)
    return _config


def get_config() -> ToolDialectConfig:
    """Get the current configuration, loading if needed."""
    global _config

    if _config is not None:
        return _config

    with _config_lock:
        if _config is None:
            _config = load_config()
        return _config


def reset_config() -> None:
    """Reset the global config (useful for testing)."""
    global _config
    with _config_lock:
        _config = None


def load_declarations(path: str | Path) -> list[dict[str, Any]]:
    """Load capability declarations from a YAML file.

    The file holds a list (or a mapping with a ``tools`` list) of entries
    with ``name``, ``description`` and ``parameters``.

    Example:
        tools:
          - name: get_weather
            description: Current weather for a city
            parameters:
              type: object
              properties:
                city: {type: string}
              required: [city]
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or []
        except yaml.YAMLError as e:
            raise config_error(ErrorCode.CONFIG_INVALID, cause=e, key=str(path), detail=str(e)) from e

    if isinstance(data, dict):
        data = data.get("tools", [])
    if not isinstance(data, list):
        raise config_error(ErrorCode.CONFIG_INVALID, key=str(path), detail="expected a list of tools")

    declarations: list[dict[str, Any]] = []
    for idx, entry in enumerate(data):
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
            raise config_error(
                ErrorCode.CONFIG_INVALID,
                key=f"{path}[{idx}]",
                detail="each tool needs a string 'name'",
            )
        parameters = entry.get("parameters")
        if parameters is None:
            parameters = {"type": "object", "properties": {}}
        if not isinstance(parameters, dict):
            raise config_error(
                ErrorCode.CONFIG_INVALID,
                key=f"{path}[{idx}].parameters",
                detail="expected a JSON Schema mapping",
            )
        declarations.append({
            "name": entry["name"],
            "description": str(entry.get("description", "")),
            "parameters": parameters,
        })
    return declarations
