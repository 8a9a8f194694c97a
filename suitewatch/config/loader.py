"""Configuration loading utilities."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping

from pydantic import ValidationError

from suitewatch.config.schema import ActionConfig
from suitewatch.errors import ConfigError

# Environment variables GitHub Actions sets for the action inputs.
INPUT_ENV_VARS = {
    "apiKey": "INPUT_APIKEY",
    "originUrl": "INPUT_ORIGINURL",
    "suiteIds": "INPUT_SUITEIDS",
    "failFast": "INPUT_FAILFAST",
    "block": "INPUT_BLOCK",
    "maxRetries": "INPUT_MAXRETRIES",
    "streamTimeout": "INPUT_STREAMTIMEOUT",
}


def _read_file(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return data


def _read_env(environ: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, var in INPUT_ENV_VARS.items():
        value = environ.get(var)
        if value is not None and value != "":
            values[key] = value
    return values


def _format_errors(err: ValidationError) -> str:
    parts = []
    for item in err.errors():
        loc = ".".join(str(p) for p in item["loc"]) or "config"
        parts.append(f"{loc}: {item['msg']}")
    return "; ".join(parts)


def _canonical(values: Mapping[str, Any]) -> dict[str, Any]:
    """Key everything by field alias so later sources override earlier ones."""
    aliases = {name: field.alias or name for name, field in ActionConfig.model_fields.items()}
    return {aliases.get(key, key): value for key, value in values.items()}


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> ActionConfig:
    """Build an :class:`ActionConfig`.

    Sources, lowest precedence first: the JSON file at *path*, ``INPUT_*``
    environment variables, then keyword *overrides* (``None`` values ignored).
    """
    data: dict[str, Any] = {}
    if path is not None:
        data.update(_canonical(_read_file(Path(path))))
    data.update(_read_env(os.environ if environ is None else environ))
    data.update(_canonical({k: v for k, v in overrides.items() if v is not None}))

    try:
        return ActionConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {_format_errors(e)}") from e
