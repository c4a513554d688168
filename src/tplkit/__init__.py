"""
tplkit: named composite templates assembled from Jinja2 fragment files.
"""

__version__ = "0.1.0"

from .error.exceptions import (
    TemplateKitError,
    BuildError,
    ReadError,
    ParseError,
    InvalidSpecError,
    UnknownTemplateError,
    RenderError,
    ConfigurationError
)
from .filesystem import FileSystem, DirectoryFileSystem, MemoryFileSystem
from .spec import CompositeSpec, FragmentSpec, layer_functions
from .config.settings import RegistrySettings
from .config.loader import LoadedConfig, load_config, load_spec, parse_config
from .registry import Renderer, TemplateRegistry

__all__ = [
    'TemplateKitError',
    'BuildError',
    'ReadError',
    'ParseError',
    'InvalidSpecError',
    'UnknownTemplateError',
    'RenderError',
    'ConfigurationError',
    'FileSystem',
    'DirectoryFileSystem',
    'MemoryFileSystem',
    'CompositeSpec',
    'FragmentSpec',
    'layer_functions',
    'RegistrySettings',
    'LoadedConfig',
    'load_config',
    'load_spec',
    'parse_config',
    'Renderer',
    'TemplateRegistry',
]
