"""
Error types raised by tplkit.
"""
from .exceptions import (
    ErrorContext,
    TemplateKitError,
    BuildError,
    ReadError,
    ParseError,
    InvalidSpecError,
    UnknownTemplateError,
    RenderError,
    ConfigurationError
)

__all__ = [
    'ErrorContext',
    'TemplateKitError',
    'BuildError',
    'ReadError',
    'ParseError',
    'InvalidSpecError',
    'UnknownTemplateError',
    'RenderError',
    'ConfigurationError'
]
