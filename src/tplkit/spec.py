"""
Declarative description of composites and the fragments they are built from.
"""
import logging
from collections import ChainMap
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .error.exceptions import ErrorContext, InvalidSpecError

logger = logging.getLogger(__name__)

FunctionMap = Mapping[str, Callable[..., Any]]


class FragmentSpec(BaseModel):
    """
    One file-backed piece of template source.

    Attributes:
        name: Name the fragment is registered under inside its composite
        path: Path of the source file in the file system
        functions: Functions visible to this fragment, overriding globals
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    functions: Dict[str, Callable[..., Any]] = Field(default_factory=dict)

    @field_validator("name", "path")
    @classmethod
    def validate_not_empty(cls, value: str) -> str:
        """Names and paths must be non-empty."""
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value


CompositeSpec = Mapping[str, Sequence[FragmentSpec]]


def layer_functions(*layers: Optional[FunctionMap]) -> ChainMap:
    """
    Stack function maps so that later layers override earlier ones.

    Args:
        *layers: Function maps, lowest precedence first. ``None`` is skipped.

    Returns:
        Read-through view over the layers
    """
    return ChainMap(*(dict(layer) for layer in reversed(layers) if layer))


def validate_spec(spec: CompositeSpec) -> None:
    """
    Check the shape of a composite specification.

    This only checks structure. The entry point rule is enforced while the
    registry is built.

    Raises:
        InvalidSpecError: If a composite name is empty or a fragment is not a FragmentSpec
    """
    if not isinstance(spec, Mapping):
        raise InvalidSpecError(
            f"Spec must be a mapping, got {type(spec).__name__}",
            ErrorContext("spec", "validate")
        )
    for name, fragments in spec.items():
        if not isinstance(name, str) or not name:
            raise InvalidSpecError(
                f"Invalid composite name: {name!r}",
                ErrorContext("spec", "validate")
            )
        if isinstance(fragments, (str, bytes)) or not isinstance(fragments, Sequence):
            raise InvalidSpecError(
                f"Fragments of composite '{name}' must be a sequence",
                ErrorContext("spec", "validate", composite=name)
            )
        for fragment in fragments:
            if not isinstance(fragment, FragmentSpec):
                raise InvalidSpecError(
                    f"Composite '{name}' holds {type(fragment).__name__}, expected FragmentSpec",
                    ErrorContext("spec", "validate", composite=name)
                )
