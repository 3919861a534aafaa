"""YAML config loader with hashing and runtime get/set."""

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from tidewatch.config.defaults import DEFAULT_SPOTS
from tidewatch.config.schema import AppConfig


def load_config(path: str | Path | None) -> AppConfig:
    """Load and validate config from a YAML file.

    A missing path yields the defaults. If no spots are specified in the
    YAML, injects DEFAULT_SPOTS.
    """
    raw: dict[str, Any] = {}
    if path is not None and Path(path).exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}

    if "spots" not in raw or not raw["spots"]:
        raw["spots"] = [s.model_dump() for s in DEFAULT_SPOTS]

    return AppConfig(**raw)


def config_hash(config: AppConfig) -> str:
    """Compute a deterministic SHA256 hash of the config."""
    data = config.model_dump_json(indent=None)
    return hashlib.sha256(data.encode()).hexdigest()[:16]


def dump_config(config: AppConfig) -> str:
    """Render the config as YAML, the bundled API key masked."""
    data = json.loads(config.model_dump_json())
    if data["provider"]["bundled_api_key"]:
        data["provider"]["bundled_api_key"] = "***"
    return yaml.safe_dump(data, sort_keys=False)


def get_config_value(config: AppConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'fetch.max_attempts'."""
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
        if part not in target:
            raise KeyError(f"Config key not found: {dotted_key}")
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Config key not found: {dotted_key}")
    old_value = target.get(parts[-1])
    # Attempt type coercion for common cases
    if isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    target[parts[-1]] = value
    return AppConfig(**data)


def save_config(config: AppConfig, path: str | Path) -> None:
    """Write the config back to YAML."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(json.loads(config.model_dump_json()), f, sort_keys=False)
