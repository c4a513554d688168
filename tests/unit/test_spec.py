import pytest
from pydantic import ValidationError

from tplkit.spec import FragmentSpec, layer_functions


def test_fragment_spec_is_immutable():
    fragment = FragmentSpec(name="page", path="page.html")
    assert fragment.functions == {}
    with pytest.raises(ValidationError):
        fragment.name = "other"


@pytest.mark.parametrize("field", ["name", "path"])
def test_fragment_spec_rejects_empty_values(field):
    values = {"name": "page", "path": "page.html"}
    values[field] = " "
    with pytest.raises(ValidationError):
        FragmentSpec(**values)


def test_fragment_spec_rejects_non_callable_functions():
    with pytest.raises(ValidationError):
        FragmentSpec(name="page", path="page.html", functions={"x": 42})


def test_layer_functions_later_layers_win():
    first = {"a": 1, "b": 1}
    second = {"b": 2, "c": 2}
    layered = layer_functions(first, None, second, {})
    assert dict(layered) == {"a": 1, "b": 2, "c": 2}
    # layers are copied
    first["a"] = 9
    assert layered["a"] == 1
