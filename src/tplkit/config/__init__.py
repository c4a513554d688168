"""
Configuration for building template registries.
"""
from .settings import RegistrySettings, ensure_settings
from .loader import LoadedConfig, load_config, load_spec, parse_config

__all__ = [
    'RegistrySettings',
    'ensure_settings',
    'LoadedConfig',
    'load_config',
    'load_spec',
    'parse_config',
]
