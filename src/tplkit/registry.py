"""
Template registry: builds named composites from fragment files and renders them.

A composite is a group of fragments compiled into one private Jinja2
environment. Fragments refer to each other by name with ``include``,
``import`` and ``extends``; the fragment that shares the composite's name is
the entry point rendered by that name.
"""
import io
import logging
from typing import (
    Any, Callable, Dict, Iterator, Mapping, Optional, Protocol, Sequence, Tuple, Union,
    runtime_checkable
)

from jinja2 import BaseLoader, Environment, Template, TemplateNotFound, TemplateSyntaxError

from .config.settings import RegistrySettings, ensure_settings
from .error.exceptions import (
    ErrorContext,
    InvalidSpecError,
    ParseError,
    ReadError,
    RenderError,
    UnknownTemplateError
)
from .filesystem import FileSystem
from .spec import CompositeSpec, FragmentSpec, FunctionMap, layer_functions, validate_spec

logger = logging.getLogger(__name__)


@runtime_checkable
class Renderer(Protocol):
    """Protocol for rendering named templates into a text sink."""

    def render(
        self,
        writer: Any,
        name: str,
        data: Any = None,
        extra_functions: Optional[FunctionMap] = None
    ) -> None: ...


class FragmentLoader(BaseLoader):
    """Jinja2 loader over the already-read sources of one composite."""

    def __init__(self, sources: Dict[str, Tuple[str, str]]):
        """
        Args:
            sources: Fragment name mapped to (source text, file path)
        """
        self.sources = sources

    def get_source(self, environment: Environment, template: str) -> Tuple[str, str, Callable[[], bool]]:
        if template not in self.sources:
            raise TemplateNotFound(template)
        source, path = self.sources[template]
        return source, path, lambda: True

    def list_templates(self):
        return sorted(self.sources)


class Composite:
    """A compiled composite and the functions visible while rendering it."""

    def __init__(self, name: str, template: Template, functions: FunctionMap):
        self.name = name
        self.template = template
        self.functions = functions

    def context(self, data: Any, extra_functions: Optional[FunctionMap]) -> Dict[str, Any]:
        """Variables for one render, data layered over functions."""
        if data is None:
            variables = {}
        elif isinstance(data, Mapping):
            variables = data
        else:
            variables = {"data": data}
        return dict(layer_functions(self.functions, extra_functions, variables))


class TemplateRegistry:
    """
    Immutable collection of compiled composites.

    Use :meth:`build` to create one. After construction the registry is only
    read, so one instance may be shared by concurrent renders.
    """

    def __init__(self, composites: Mapping[str, Composite]):
        self._composites: Dict[str, Composite] = dict(composites)

    @classmethod
    def build(
        cls,
        filesystem: FileSystem,
        spec: CompositeSpec,
        global_functions: Optional[FunctionMap] = None,
        settings: Optional[Union[Dict[str, Any], RegistrySettings]] = None
    ) -> "TemplateRegistry":
        """
        Read, parse and validate every composite in ``spec``.

        Args:
            filesystem: Where fragment paths are read from
            spec: Composite name mapped to its fragments
            global_functions: Functions visible to every fragment
            settings: Jinja2 environment options

        Returns:
            A fully built registry

        Raises:
            InvalidSpecError: If the spec is malformed or a composite has no entry fragment
            ReadError: If a fragment file cannot be read
            ParseError: If a fragment is not valid template syntax
            ConfigurationError: If the settings are invalid
        """
        validate_spec(spec)
        settings = ensure_settings(settings)
        global_functions = dict(global_functions or {})

        composites = {}
        for name, fragments in spec.items():
            composites[name] = _build_composite(filesystem, name, fragments, global_functions, settings)

        logger.info(f"Built template registry with {len(composites)} composites")
        return cls(composites)

    def render(
        self,
        writer: Any,
        name: str,
        data: Any = None,
        extra_functions: Optional[FunctionMap] = None
    ) -> None:
        """
        Render composite ``name`` into ``writer``.

        Output is streamed as it is produced, so on failure ``writer`` may
        already hold part of it. Use :meth:`render_to_string` when the output
        must be all or nothing.

        Args:
            writer: Text sink with a ``write`` method
            name: Composite name
            data: Mapping of template variables, or any value bound as ``data``
            extra_functions: Functions visible only to this render

        Raises:
            UnknownTemplateError: If no composite is registered under ``name``
            RenderError: If execution or writing fails
        """
        composite = self._composites.get(name)
        if composite is None:
            logger.error(f"Template not found in registry: {name}", extra={"template": name})
            raise UnknownTemplateError(
                f"Template '{name}' not found in registry",
                ErrorContext("registry", "render", template=name)
            )

        try:
            for chunk in composite.template.generate(composite.context(data, extra_functions)):
                writer.write(chunk)
        except Exception as e:
            logger.error(f"Error rendering template {name}: {e}", extra={"template": name})
            raise RenderError(
                f"Cannot render template '{name}': {e}",
                ErrorContext("registry", "render", template=name)
            ) from e

    def render_to_string(
        self,
        name: str,
        data: Any = None,
        extra_functions: Optional[FunctionMap] = None
    ) -> str:
        """Render into a buffer and return the text only if rendering succeeds."""
        buffer = io.StringIO()
        self.render(buffer, name, data, extra_functions)
        return buffer.getvalue()

    def names(self) -> Tuple[str, ...]:
        """Names of all registered composites, sorted."""
        return tuple(sorted(self._composites))

    def __contains__(self, name: object) -> bool:
        return name in self._composites

    def __len__(self) -> int:
        return len(self._composites)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __repr__(self) -> str:
        return f"TemplateRegistry({list(self.names())!r})"


def _fragment_context(composite: str, fragment: FragmentSpec) -> Dict[str, str]:
    return {"composite": composite, "fragment": fragment.name, "path": fragment.path}


def _build_composite(
    filesystem: FileSystem,
    name: str,
    fragments: Sequence[FragmentSpec],
    global_functions: Dict[str, Callable[..., Any]],
    settings: RegistrySettings
) -> Composite:
    sources: Dict[str, Tuple[str, str]] = {}
    fragment_functions: Dict[str, FunctionMap] = {}
    env = Environment(loader=FragmentLoader(sources), **settings.environment_options())
    env.globals.update(global_functions)
    has_entry = False

    for fragment in fragments:
        if fragment.name == name:
            has_entry = True

        try:
            text = filesystem.read_text(fragment.path)
        except (OSError, ValueError) as e:
            logger.error(f"Unable to read template file {fragment.path}: {e}", extra=_fragment_context(name, fragment))
            raise ReadError(
                f"Unable to read template file '{fragment.path}': {e}",
                ErrorContext("registry", "build", composite=name, fragment=fragment.name)
            ) from e

        try:
            # compile rather than parse so unknown filters and tests fail here too
            env.compile(text, fragment.name, fragment.path)
        except TemplateSyntaxError as e:
            logger.error(f"Error parsing template {fragment.name} ({fragment.path}): {e}", extra=_fragment_context(name, fragment))
            raise ParseError(
                f"Cannot parse template '{fragment.name}' ({fragment.path}), line {e.lineno}: {e.message}",
                ErrorContext("registry", "build", composite=name, fragment=fragment.name),
                lineno=e.lineno
            ) from e

        if fragment.name in sources:
            logger.warning(f"Fragment '{fragment.name}' redefined in composite '{name}'", extra=_fragment_context(name, fragment))
        sources[fragment.name] = (text, fragment.path)
        fragment_functions[fragment.name] = fragment.functions
        logger.debug(f"Loaded fragment {fragment.name} from {fragment.path} into {name}", extra=_fragment_context(name, fragment))

    if not has_entry:
        logger.error(f"Composite '{name}' has no fragment named '{name}'", extra={"composite": name})
        raise InvalidSpecError(
            f"Composite '{name}' has no fragment named '{name}'",
            ErrorContext("registry", "build", composite=name)
        )

    templates = {
        fragment_name: env.get_template(
            fragment_name, globals=layer_functions(fragment_functions[fragment_name])
        )
        for fragment_name in sources
    }
    functions = dict(layer_functions(global_functions, *fragment_functions.values(), fragment_functions[name]))
    return Composite(name, templates[name], functions)
