"""Configuration loading for the regex-mask CLI and server."""

import copy
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
import jsonschema

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "server": {
        "host": "0.0.0.0",
        "port": 8080,
    },
    "masking": {
        "mask_char": "*",
    },
    "logging": {
        "level": "INFO",
    },
}

CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "server": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "host": {"type": "string", "minLength": 1},
                "port": {"type": "integer", "minimum": 1, "maximum": 65535},
            },
        },
        "masking": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "mask_char": {"type": "string", "minLength": 1, "maxLength": 1},
            },
        },
        "logging": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "level": {
                    "type": "string",
                    "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                },
            },
        },
    },
}


def load_config(path: Optional[Union[str, Path]] = None) -> dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        path: Config file path. If None, returns defaults.

    Returns:
        Configuration dictionary with defaults filled in

    Raises:
        FileNotFoundError: If config file not found
        ValueError: If config validation fails
    """
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    logger.info(f"Loading config from {path}")
    data = _load_yaml_file(path)
    _validate_schema(data)
    return _merge(DEFAULT_CONFIG, data)


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load YAML file; an empty file yields an empty mapping."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if data is not None else {}


def _validate_schema(data: Any) -> None:
    """Validate config data against CONFIG_SCHEMA."""
    try:
        jsonschema.validate(data, CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ValueError(f"Config validation failed: {e.message}") from e


def _merge(defaults: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Merge overrides into a copy of defaults, one section deep."""
    merged = copy.deepcopy(defaults)
    for section, values in overrides.items():
        merged.setdefault(section, {}).update(values or {})
    return merged
