"""Configuration module."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..exceptions import ConfigError

CONFIG_DIR = Path(__file__).parent
DEFAULT_SETTINGS_PATH = CONFIG_DIR / "settings.yaml"
DEFAULT_STATES_PATH = CONFIG_DIR / "states.yaml"


def read_yaml(path) -> Dict[str, Any]:
    """Read a YAML mapping, raising ConfigError if it is missing or malformed."""
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config/settings.yaml

    Returns:
        Configuration dictionary
    """
    config = read_yaml(config_path or DEFAULT_SETTINGS_PATH)

    for section in ("fetcher", "report", "extraction", "states", "logging"):
        config.setdefault(section, {})

    # Override with environment variables if present
    if "LOG_LEVEL" in os.environ:
        config["logging"]["level"] = os.environ["LOG_LEVEL"]

    if "FETCH_TIMEOUT" in os.environ:
        try:
            config["fetcher"]["timeout"] = float(os.environ["FETCH_TIMEOUT"])
        except ValueError as e:
            raise ConfigError(f"FETCH_TIMEOUT must be a number: {e}") from e

    if "DRAW_TIMEZONE" in os.environ:
        config["report"]["timezone"] = os.environ["DRAW_TIMEZONE"]

    if "STATES_PATH" in os.environ:
        config["states"]["path"] = os.environ["STATES_PATH"]

    return config
