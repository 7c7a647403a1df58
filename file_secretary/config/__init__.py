"""Configuration loading for contexts, templates and asset folders."""

from .settings import SecretarySettings, load_config_file, load_settings_from_env

__all__ = [
    'SecretarySettings',
    'load_config_file',
    'load_settings_from_env',
]
