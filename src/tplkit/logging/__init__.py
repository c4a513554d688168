"""
Logging setup for applications that use tplkit.
"""
from .config import JsonFormatter, configure_logging, parse_level

__all__ = ['JsonFormatter', 'configure_logging', 'parse_level']
