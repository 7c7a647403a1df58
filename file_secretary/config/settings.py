"""Settings for the URL generator, read from environment variables."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from file_secretary.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Configuration from environment
FILE_SECRETARY_CONFIG = os.environ.get('FILE_SECRETARY_CONFIG')
FILE_SECRETARY_TABLE_NAME = os.environ.get('FILE_SECRETARY_TABLE_NAME', 'file_secretary_files')
ROUTED_URLS_EXTERNAL = os.environ.get('FILE_SECRETARY_ROUTED_URLS_EXTERNAL', 'false').lower() == 'true'


@dataclass
class SecretarySettings:
    config_path: Optional[str]
    routed_urls_external: bool = False
    config: Dict[str, Any] = field(default_factory=dict)


def load_config_file(path: str) -> Dict[str, Any]:
    """
    Read the contexts/templates configuration from a JSON file.

    Args:
        path: Path to a JSON document with a top-level object

    Returns:
        The parsed configuration mapping

    Raises:
        ConfigurationError: If the file is missing, unreadable or not an object
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Config file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Config file {path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")
    return data


def load_settings_from_env() -> SecretarySettings:
    config_path = os.environ.get('FILE_SECRETARY_CONFIG', FILE_SECRETARY_CONFIG)
    config = {}
    if config_path:
        config = load_config_file(config_path)
        logger.info(f"Loaded file secretary config from {config_path}")
    else:
        logger.warning("FILE_SECRETARY_CONFIG not set, no contexts are configured")

    return SecretarySettings(
        config_path=config_path,
        routed_urls_external=os.environ.get(
            'FILE_SECRETARY_ROUTED_URLS_EXTERNAL', str(ROUTED_URLS_EXTERNAL)
        ).lower() == 'true',
        config=config,
    )
