"""
Engine settings shared by every composite in a registry.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from jinja2 import StrictUndefined, Undefined
from jinja2.utils import import_string
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..error.exceptions import ConfigurationError, ErrorContext

logger = logging.getLogger(__name__)


class RegistrySettings(BaseModel):
    """Jinja2 environment options applied to each composite."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    autoescape: bool = Field(default=True, description="HTML-escape expression output")
    strict_undefined: bool = Field(default=True, description="Raise on undefined variables at render time")
    trim_blocks: bool = Field(default=False, description="Remove the first newline after a block tag")
    lstrip_blocks: bool = Field(default=False, description="Strip whitespace before a block tag")
    keep_trailing_newline: bool = Field(default=True, description="Keep the final newline of a fragment")
    extensions: List[str] = Field(default_factory=list, description="Jinja2 extensions to load")

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, value: List[str]) -> List[str]:
        """Every extension must be importable."""
        for path in value:
            try:
                import_string(path)
            except (ImportError, AttributeError) as e:
                raise ValueError(f"Cannot import extension '{path}': {e}") from e
        return value

    def environment_options(self) -> Dict[str, Any]:
        """Keyword arguments for a Jinja2 Environment."""
        return {
            "autoescape": self.autoescape,
            "undefined": StrictUndefined if self.strict_undefined else Undefined,
            "trim_blocks": self.trim_blocks,
            "lstrip_blocks": self.lstrip_blocks,
            "keep_trailing_newline": self.keep_trailing_newline,
            "extensions": list(self.extensions),
            # Compiled fragments must stay cached for the registry's lifetime.
            "cache_size": -1,
        }


def ensure_settings(settings: Optional[Union[Dict[str, Any], RegistrySettings]] = None) -> RegistrySettings:
    """
    Coerce ``settings`` into a RegistrySettings instance.

    Raises:
        ConfigurationError: If the values do not validate
    """
    if settings is None:
        return RegistrySettings()
    if isinstance(settings, RegistrySettings):
        return settings
    try:
        return RegistrySettings(**settings)
    except (TypeError, ValidationError) as e:
        logger.error(f"Invalid registry settings: {e}")
        raise ConfigurationError(
            f"Invalid registry settings: {e}",
            ErrorContext("settings", "ensure")
        ) from e
