"""
Configuration loading (config.yaml merged over built-in defaults)
"""
import copy
import os
from pathlib import Path
from typing import Optional, Union

import yaml

from hebvocab.errors import ConfigError

DEFAULT_CONFIG_PATH = Path("config.yaml")

DEFAULTS = {
    'paths': {
        'data_dir': 'data',
    },
    'matching': {
        'unknown_token_limit': 30,
        'suggestion_distance': 1,
    },
    'news': {
        'feed_url': 'https://www.jpost.com/Rss/RssFeedsHeadlines.aspx',
        'max_items': 5,
        'timeout': 10,
    },
    'llm': {
        'base_url': 'https://openrouter.ai/api/v1',
        'model': 'perplexity/sonar',
        'timeout': 60,
        'temperature': 0.2,
        'max_tokens': 1500,
    },
}


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[Union[str, Path]] = None, required: bool = False) -> dict:
    """
    Load configuration from YAML file

    Args:
        path: Config file (default: $HEBVOCAB_CONFIG or ./config.yaml)
        required: Raise instead of falling back to defaults when missing

    Returns:
        Configuration dictionary with every default filled in
    """
    if path is None:
        path = os.getenv("HEBVOCAB_CONFIG", DEFAULT_CONFIG_PATH)
    config_path = Path(path)

    if not config_path.exists():
        if required:
            raise ConfigError(f"Config file not found: {config_path}")
        return copy.deepcopy(DEFAULTS)

    try:
        with open(config_path, encoding='utf-8') as f:
            loaded = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    return _merge(DEFAULTS, loaded)
