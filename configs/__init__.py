"""Configuration loading for procsim scenarios."""

from pathlib import Path
from typing import Union

import yaml

CONFIG_DIR = Path(__file__).resolve().parent
DEFAULT_CONFIG_PATH = CONFIG_DIR / "default.yaml"


def load_config(config_path: Union[str, Path]) -> dict:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary (empty for an empty file)
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    with open(path, 'r') as f:
        config = yaml.safe_load(f)

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"Config {path} must contain a mapping, got {type(config).__name__}")
    return config


def load_default_config() -> dict:
    """Load the bundled default scenario configuration."""
    return load_config(DEFAULT_CONFIG_PATH)


def merge_configs(base_config: dict, override_config: dict) -> dict:
    """Recursively merge ``override_config`` on top of ``base_config``.

    Neither input is modified.
    """
    merged = dict(base_config)
    for key, value in override_config.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value
    return merged
