from copy import deepcopy
from pathlib import Path
from typing import Any, Dict

import yaml

from samplebank.capabilities.elements import MAX_ELEMENTS
from samplebank.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("samplebank.config.yaml")

CONCEPTS = ("account", "transaction", "event")

BASE_CONFIG: Dict[str, Any] = {
    "storage": {
        "sqlite_path": "samplebank.db",
    },
    "capabilities": {
        "max_elements": MAX_ELEMENTS,
        "time_attributes": {
            "account": "lastUpdate",
            "transaction": "timestamp",
            "event": "time",
        },
    },
    "logging": {
        "level": "INFO",
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _validate(config: Dict[str, Any]) -> None:
    storage = config.get("storage")
    if not isinstance(storage, dict) or not storage.get("sqlite_path"):
        raise ValueError("Config 'storage.sqlite_path' is required")

    capabilities = config.get("capabilities")
    if not isinstance(capabilities, dict):
        raise ValueError("Config 'capabilities' must be a dictionary")

    max_elements = capabilities.get("max_elements")
    if isinstance(max_elements, bool) or not isinstance(max_elements, int):
        raise ValueError("Config 'capabilities.max_elements' must be an integer")
    if not 1 <= max_elements <= MAX_ELEMENTS:
        raise ValueError(f"Config 'capabilities.max_elements' must be between 1 and {MAX_ELEMENTS}")

    time_attributes = capabilities.get("time_attributes")
    if not isinstance(time_attributes, dict):
        raise ValueError("Config 'capabilities.time_attributes' must be a dictionary")
    for concept in CONCEPTS:
        if not isinstance(time_attributes.get(concept), str):
            raise ValueError(f"Config 'capabilities.time_attributes.{concept}' must be a string")


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load service configuration from YAML and fill in defaults.

    Args:
        path: Optional path to the config file. Defaults to samplebank.config.yaml;
            when the default file is absent the built-in defaults are used.

    Returns:
        Validated configuration dictionary

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist
        ValueError: If config structure is invalid
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        if path is not None:
            raise FileNotFoundError(f"Config file not found: {cfg_path}")
        logger.debug(f"No config at {cfg_path}, using defaults")
        return deepcopy(BASE_CONFIG)

    with cfg_path.open("r", encoding="utf-8") as f:
        user_config = yaml.safe_load(f) or {}

    if not isinstance(user_config, dict):
        raise ValueError("Config must be a dictionary")

    config = _merge(BASE_CONFIG, user_config)
    _validate(config)
    return config


def get_sqlite_path(config: Dict[str, Any]) -> str:
    return config["storage"]["sqlite_path"]


def get_max_elements(config: Dict[str, Any]) -> int:
    return config["capabilities"]["max_elements"]


def get_time_attribute(config: Dict[str, Any], concept: str) -> str:
    """Record attribute the interval capability is matched against for a concept."""
    return config["capabilities"]["time_attributes"][concept]
