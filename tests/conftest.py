"""Pytest configuration and fixtures."""
import pytest
from pathlib import Path

from tplkit.filesystem import DirectoryFileSystem, MemoryFileSystem
from tplkit.spec import FragmentSpec

@pytest.fixture
def memory_fs():
    """In-memory fragment sources."""
    return MemoryFileSystem({
        "page.tmpl": "Hello {{ Name }}",
        "header.tmpl": "<h1>{{ title }}</h1>",
        "layout.html": '{% include "header" %}\n<main>{{ body }}</main>',
        "shout.tmpl": "{{ shout(word) }}",
        "bad.tmpl": "{% if %}",
    })

@pytest.fixture
def page_spec():
    """Spec with a single valid composite."""
    return {
        "page": [
            FragmentSpec(name="page", path="page.tmpl"),
            FragmentSpec(name="header", path="header.tmpl"),
        ]
    }

@pytest.fixture
def template_dir(tmp_path: Path):
    """Directory tree with fragment files and a YAML spec document."""
    (tmp_path / "partials").mkdir()
    (tmp_path / "page.html").write_text('{% include "header" %}<p>{{ Name }}</p>')
    (tmp_path / "partials" / "header.html").write_text("<h1>{{ title | default('Home') }}</h1>")
    (tmp_path / "tplkit.yaml").write_text(
        "composites:\n"
        "  page:\n"
        "    - {name: page, path: page.html}\n"
        "    - {name: header, path: partials/header.html}\n"
    )
    return tmp_path

@pytest.fixture
def directory_fs(template_dir: Path):
    return DirectoryFileSystem(template_dir)
