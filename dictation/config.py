"""Configuration loading for the dictation app.

The configuration is a plain dict read from a JSON file and merged over the
built-in defaults, section by section.
"""
import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

INJECTION_BACKENDS = ('pynput', 'wtype')

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    'sync': {
        'poll_interval_ms': 400,
        'finalize_delay_ms': 50,
        'finalize_wait_ms': 2000,
    },
    'injection': {
        'backend': 'pynput',
        'restore_focus': True,
        'focus_delay_ms': 30,
    },
    'toggle': {
        'enabled': True,
        'socket_name': 'stable-dictation.sock',
    },
}


def load_config(config_path: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
    """Load configuration from a JSON file, falling back to defaults.

    Args:
        config_path: Path to dictation_config.json; None uses the defaults only

    Returns:
        Configuration dictionary with every default section present

    Raises:
        FileNotFoundError: config_path was given but does not exist
        ValueError: the file is not a JSON object or a value is invalid
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is None:
        return config

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, 'r', encoding='utf-8') as f:
        loaded = json.load(f)

    if not isinstance(loaded, dict):
        raise ValueError(f"Config file must contain a JSON object: {config_path}")

    for section, values in loaded.items():
        if section not in config:
            logger.warning(f"Config: unknown section '{section}' ignored")
            continue
        if not isinstance(values, dict):
            raise ValueError(f"Config section '{section}' must be an object")
        config[section].update(values)

    validate_config(config)
    return config


def validate_config(config: Dict[str, Dict[str, Any]]) -> None:
    """Raises ValueError on values the app cannot run with."""
    sync = config['sync']
    if sync['poll_interval_ms'] <= 0:
        raise ValueError(f"sync.poll_interval_ms must be positive, got {sync['poll_interval_ms']}")
    for key in ('finalize_delay_ms', 'finalize_wait_ms'):
        if sync[key] < 0:
            raise ValueError(f"sync.{key} must not be negative, got {sync[key]}")

    backend = config['injection']['backend']
    if backend not in INJECTION_BACKENDS:
        raise ValueError(f"injection.backend must be one of {INJECTION_BACKENDS}, got '{backend}'")
