from tplkit.error.exceptions import (
    BuildError,
    ErrorContext,
    InvalidSpecError,
    ParseError,
    ReadError,
    RenderError,
    TemplateKitError,
    UnknownTemplateError
)


def test_error_string_includes_context():
    error = RenderError("Cannot render", ErrorContext("registry", "render", template="page"))
    assert str(error) == "Cannot render [in registry.render]"
    assert error.context.details == {"template": "page"}


def test_error_without_context():
    error = UnknownTemplateError("missing")
    assert str(error) == "missing"
    assert error.details == {}


def test_error_hierarchy():
    for error_type in (ReadError, ParseError, InvalidSpecError):
        assert issubclass(error_type, BuildError)
    for error_type in (BuildError, UnknownTemplateError, RenderError):
        assert issubclass(error_type, TemplateKitError)
