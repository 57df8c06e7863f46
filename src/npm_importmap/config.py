"""Configuration loader for import map generation.

Options are read from a JSON file (explicit path, else the
``NPM_IMPORTMAP_CONFIG`` environment variable) and validated here. Every key
is optional; missing keys fall back to the defaults on :class:`GeneratorOptions`.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .errors import ConfigError

CONFIG_PATH_ENV_VAR = "NPM_IMPORTMAP_CONFIG"

JSDELIVR_CDN = "https://cdn.jsdelivr.net/npm"
JSDELIVR_API = "https://data.jsdelivr.com/v1"

_BOOL_FIELDS = {
    "includeDependencies": "include_dependencies",
    "includeDevDependencies": "include_dev_dependencies",
    "includeOptionalDependencies": "include_optional_dependencies",
    "browser": "browser",
}
_URL_FIELDS = {
    "cdnBase": "cdn_base",
    "listingBase": "listing_base",
}


@dataclass(slots=True, frozen=True)
class GeneratorOptions:
    """Options controlling which dependencies are mapped and where from."""

    include_dependencies: bool = True
    include_dev_dependencies: bool = True
    include_optional_dependencies: bool = False
    cdn_base: str = JSDELIVR_CDN
    listing_base: str = JSDELIVR_API
    conditions: tuple[str, ...] = ("module",)
    browser: bool = False
    timeout: float = 30.0
    fetch_attempts: int = 1

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GeneratorOptions:
        """Create options from a camelCase dictionary, validating each field."""
        values: dict[str, Any] = {}

        for key, attr in _BOOL_FIELDS.items():
            if key in data:
                if not isinstance(data[key], bool):
                    raise ConfigError(f"Option '{key}' must be a boolean")
                values[attr] = data[key]

        for key, attr in _URL_FIELDS.items():
            if key in data:
                value = data[key]
                if not isinstance(value, str) or not value.startswith(("http://", "https://")):
                    raise ConfigError(f"Option '{key}' must be an http(s) URL")
                values[attr] = value.rstrip("/")

        if "conditions" in data:
            conditions = data["conditions"]
            if not isinstance(conditions, list) or not all(
                isinstance(c, str) and c for c in conditions
            ):
                raise ConfigError("Option 'conditions' must be an array of non-empty strings")
            values["conditions"] = tuple(conditions)

        if "timeout" in data:
            timeout = data["timeout"]
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ConfigError("Option 'timeout' must be a positive number")
            values["timeout"] = float(timeout)

        if "fetchAttempts" in data:
            attempts = data["fetchAttempts"]
            if isinstance(attempts, bool) or not isinstance(attempts, int) or attempts < 1:
                raise ConfigError("Option 'fetchAttempts' must be an integer >= 1")
            values["fetch_attempts"] = attempts

        unknown = set(data) - set(_BOOL_FIELDS) - set(_URL_FIELDS)
        unknown -= {"conditions", "timeout", "fetchAttempts"}
        if unknown:
            raise ConfigError(f"Unknown option(s): {', '.join(sorted(unknown))}")

        return cls(**values)

    def with_overrides(self, **overrides: Any) -> GeneratorOptions:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _resolve_config_path(path: Path | str | None = None) -> Path | None:
    """Resolve the configuration file path.

    Priority:
    1. Explicit path argument
    2. NPM_IMPORTMAP_CONFIG environment variable
    3. None (built-in defaults)
    """
    if path is not None:
        return Path(path)

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)

    return None


def _read_options_file(config_path: Path) -> dict[str, Any]:
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {config_path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read {config_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{config_path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must hold a JSON object of options")
    return data


def load_options(path: Path | str | None = None) -> GeneratorOptions:
    """Load generator options, falling back to defaults when no file is configured.

    Raises:
        ConfigError: If the file cannot be read or contains invalid data.
    """
    config_path = _resolve_config_path(path)
    if config_path is None:
        return GeneratorOptions()
    return GeneratorOptions.from_dict(_read_options_file(config_path))
