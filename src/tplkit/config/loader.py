"""
Load composite specifications from YAML documents.

Document layout::

    settings:
      autoescape: true
    globals: [upper]
    composites:
      page:
        - {name: page, path: page.html, functions: [shout]}
        - {name: header, path: header.html}

Function names are looked up in a function library supplied by the caller.
"""
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..error.exceptions import ConfigurationError, ErrorContext
from ..spec import CompositeSpec, FragmentSpec, FunctionMap
from .settings import RegistrySettings

logger = logging.getLogger(__name__)


class FragmentEntry(BaseModel):
    """A fragment as written in the YAML document."""

    model_config = ConfigDict(extra="forbid")

    name: str
    path: str
    functions: List[str] = Field(default_factory=list)


class SpecDocument(BaseModel):
    """Schema of a YAML spec document."""

    model_config = ConfigDict(extra="forbid")

    settings: RegistrySettings = Field(default_factory=RegistrySettings)
    globals: List[str] = Field(default_factory=list)
    composites: Dict[str, List[FragmentEntry]]


class LoadedConfig(BaseModel):
    """Everything needed to build a registry."""

    model_config = ConfigDict(frozen=True)

    spec: Dict[str, List[FragmentSpec]]
    global_functions: Dict[str, Callable[..., Any]] = Field(default_factory=dict)
    settings: RegistrySettings = Field(default_factory=RegistrySettings)


def _resolve(names: List[str], library: FunctionMap, where: str) -> Dict[str, Callable[..., Any]]:
    functions = {}
    for name in names:
        if name not in library:
            raise ConfigurationError(
                f"Unknown function '{name}' referenced by {where}",
                ErrorContext("loader", "resolve", function=name)
            )
        functions[name] = library[name]
    return functions


def parse_config(document: Union[str, Dict[str, Any]], functions: Optional[FunctionMap] = None) -> LoadedConfig:
    """
    Build a LoadedConfig from YAML text or an already-parsed mapping.

    Args:
        document: YAML text or mapping
        functions: Function library that names in the document refer to

    Returns:
        Loaded configuration

    Raises:
        ConfigurationError: If the document is not valid
    """
    library = dict(functions or {})

    if isinstance(document, str):
        try:
            document = yaml.safe_load(document)
        except yaml.YAMLError as e:
            logger.error(f"Invalid YAML in spec document: {e}")
            raise ConfigurationError(
                f"Invalid YAML in spec document: {e}",
                ErrorContext("loader", "parse")
            ) from e

    if not isinstance(document, dict):
        raise ConfigurationError(
            "Spec document must be a mapping",
            ErrorContext("loader", "parse")
        )

    try:
        parsed = SpecDocument(**document)
    except (TypeError, ValidationError) as e:
        logger.error(f"Invalid spec document: {e}")
        raise ConfigurationError(
            f"Invalid spec document: {e}",
            ErrorContext("loader", "parse")
        ) from e

    spec = {}
    for composite, entries in parsed.composites.items():
        fragments = []
        for entry in entries:
            try:
                fragments.append(FragmentSpec(
                    name=entry.name,
                    path=entry.path,
                    functions=_resolve(entry.functions, library, f"fragment '{entry.name}' of '{composite}'")
                ))
            except ValidationError as e:
                raise ConfigurationError(
                    f"Invalid fragment in composite '{composite}': {e}",
                    ErrorContext("loader", "parse", composite=composite)
                ) from e
        spec[composite] = fragments

    logger.debug(f"Parsed spec document with {len(spec)} composites")
    return LoadedConfig(
        spec=spec,
        global_functions=_resolve(parsed.globals, library, "globals"),
        settings=parsed.settings
    )


def load_config(config_path: Union[str, Path], functions: Optional[FunctionMap] = None) -> LoadedConfig:
    """
    Load a YAML spec document from a file.

    Raises:
        ConfigurationError: If the file cannot be read or is not valid
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        logger.error(f"Unable to read spec document {config_path}: {e}")
        raise ConfigurationError(
            f"Unable to read spec document '{config_path}': {e}",
            ErrorContext("loader", "load")
        ) from e
    logger.info(f"Loading template spec from {config_path}")
    return parse_config(text, functions)


def load_spec(config_path: Union[str, Path], functions: Optional[FunctionMap] = None) -> CompositeSpec:
    """Load only the composite specification from a YAML file."""
    return load_config(config_path, functions).spec
