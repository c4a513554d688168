import json
import logging

import pytest
from typer.testing import CliRunner

from tplkit.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_tplkit_logger():
    logger = logging.getLogger("tplkit")
    handlers = logger.handlers[:]
    level = logger.level
    yield
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


def test_check_lists_composites(template_dir):
    result = runner.invoke(app, ["check", str(template_dir / "tplkit.yaml")])
    assert result.exit_code == 0
    assert result.stdout.split() == ["page"]


def test_check_reports_invalid_spec(tmp_path):
    (tmp_path / "spec.yaml").write_text("composites:\n  page:\n    - {name: header, path: h.html}\n")
    (tmp_path / "h.html").write_text("header")
    result = runner.invoke(app, ["check", str(tmp_path / "spec.yaml")])
    assert result.exit_code == 1


def test_render_to_stdout(template_dir, tmp_path):
    data_file = tmp_path / "data.json"
    data_file.write_text(json.dumps({"Name": "Ada", "title": "Hi"}))
    result = runner.invoke(app, [
        "render", str(template_dir / "tplkit.yaml"), "page",
        "--root", str(template_dir), "--data", str(data_file)
    ])
    assert result.exit_code == 0
    assert result.stdout == "<h1>Hi</h1><p>Ada</p>"


def test_render_to_file_with_yaml_data(template_dir, tmp_path):
    data_file = tmp_path / "data.yaml"
    data_file.write_text("Name: Grace\n")
    output = tmp_path / "out.html"
    result = runner.invoke(app, [
        "render", str(template_dir / "tplkit.yaml"), "page",
        "-d", str(data_file), "-o", str(output)
    ])
    assert result.exit_code == 0
    assert output.read_text() == "<h1>Home</h1><p>Grace</p>"


def test_render_unknown_template(template_dir):
    result = runner.invoke(app, ["render", str(template_dir / "tplkit.yaml"), "missing"])
    assert result.exit_code == 1


def test_render_failure_writes_no_output(template_dir, tmp_path):
    output = tmp_path / "out.html"
    result = runner.invoke(app, ["render", str(template_dir / "tplkit.yaml"), "page", "-o", str(output)])
    assert result.exit_code == 1
    assert not output.exists()


def test_render_to_unwritable_output(template_dir, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    result = runner.invoke(app, [
        "render", str(template_dir / "tplkit.yaml"), "page",
        "-o", str(blocker / "out.html")
    ])
    assert result.exit_code == 1
    assert not isinstance(result.exception, OSError)


def test_check_rejects_unknown_extension(tmp_path):
    (tmp_path / "spec.yaml").write_text(
        "settings: {extensions: [no.such.ext]}\n"
        "composites:\n  page:\n    - {name: page, path: page.html}\n"
    )
    (tmp_path / "page.html").write_text("page")
    result = runner.invoke(app, ["check", str(tmp_path / "spec.yaml")])
    assert result.exit_code == 1
    assert not isinstance(result.exception, ImportError)


def test_check_writes_json_log_file(tmp_path):
    (tmp_path / "spec.yaml").write_text("composites:\n  page:\n    - {name: page, path: missing.html}\n")
    log_file = tmp_path / "tplkit.log"
    result = runner.invoke(app, [
        "check", str(tmp_path / "spec.yaml"), "--log-file", str(log_file), "--json-logs"
    ])
    assert result.exit_code == 1
    records = [json.loads(line) for line in log_file.read_text().splitlines()]
    assert records[0]["level"] == "ERROR"
    assert records[0]["composite"] == "page"
    assert records[0]["path"] == "missing.html"


def test_check_rejects_unknown_log_level(template_dir):
    result = runner.invoke(app, ["check", str(template_dir / "tplkit.yaml"), "--log-level", "chatty"])
    assert result.exit_code == 1
