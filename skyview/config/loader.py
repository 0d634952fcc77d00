"""YAML config loader with environment overrides and runtime get/set."""

import json
import os
from pathlib import Path
from typing import Any

import yaml

from skyview.config.schema import AppConfig

API_KEY_ENV = "WEATHERAPI_KEY"


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate config from a YAML file.

    A missing file or an empty document yields the defaults. The API key
    from ``WEATHERAPI_KEY`` wins over the file when the variable is set.
    """
    raw = _read_yaml(path) if path is not None else {}

    env_key = os.environ.get(API_KEY_ENV)
    if env_key:
        raw["api"] = {**(raw.get("api") or {}), "api_key": env_key}

    return AppConfig(**raw)


def _read_yaml(path: str | Path) -> dict[str, Any]:
    path = Path(path)
    if not path.exists():
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


def get_config_value(config: AppConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'search.debounce_ms'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(config: AppConfig, dotted_key: str, value: Any) -> AppConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new AppConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        target = target[part]
    old_value = target.get(parts[-1])
    if isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    target[parts[-1]] = value
    return AppConfig(**data)


def save_config(config: AppConfig, path: str | Path) -> None:
    """Write config back to YAML.

    A key that came from ``WEATHERAPI_KEY`` is not written out; the file
    keeps whatever key it already held.
    """
    data = json.loads(config.model_dump_json())
    env_key = os.environ.get(API_KEY_ENV)
    if env_key and data["api"]["api_key"] == env_key:
        stored = (_read_yaml(path).get("api") or {}).get("api_key")
        data["api"]["api_key"] = stored or ""
    if not data["api"]["api_key"]:
        del data["api"]["api_key"]

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(data, f, sort_keys=False)
