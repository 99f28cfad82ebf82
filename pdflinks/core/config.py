"""
Configuration loading.
Values from config.yaml are merged over the defaults below, so a partial file is fine.
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from loguru import logger

DEFAULT_CONFIG: Dict[str, Any] = {
    'pdf': {
        'backend': 'pymupdf',           # pymupdf | pypdf | pdfplumber
        'annotation_scope': 'page',     # page | document
    },
    'pipeline': {
        'parallel': False,
        'max_workers': 4,
        'parallel_page_threshold': 30,  # go parallel automatically above this many pages
    },
    'analysis_log': {
        'max_message_length': 500,
        'sample_length': 100,
    },
    'logging': {
        'level': 'INFO',
        'log_file': 'logs/pdflinks.log',
        'log_rotation': '10 MB',
    },
    'output': {
        'directory': 'output',
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Union[str, Path]] = None,
                overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Load configuration.

    Args:
        config_path: Path to a YAML file. Missing file falls back to defaults.
        overrides: Extra values merged last (e.g. from CLI flags)

    Returns:
        Complete configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ValueError(f"Configuration file {path} must contain a mapping")
            config = _deep_merge(config, loaded)
            logger.debug(f"Loaded configuration from {path}")
        else:
            logger.warning(f"Config file not found: {path}. Using defaults.")

    if overrides:
        config = _deep_merge(config, overrides)

    return config
