import json
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape

from .config.loader import LoadedConfig, load_config
from .error.exceptions import TemplateKitError
from .filesystem import DirectoryFileSystem
from .logging.config import configure_logging
from .registry import TemplateRegistry

app = typer.Typer(help="Build and render composite templates")

console = Console(stderr=True)


def _build(config_path: Path, root: Optional[Path]) -> TemplateRegistry:
    config: LoadedConfig = load_config(config_path)
    filesystem = DirectoryFileSystem(root or config_path.parent)
    return TemplateRegistry.build(filesystem, config.spec, config.global_functions, config.settings)


def _load_data(data_path: Optional[Path]) -> Any:
    if data_path is None:
        return None
    text = data_path.read_text(encoding="utf-8")
    if data_path.suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


@app.command("check")
def check(
    config_path: Path = typer.Argument(..., help="YAML spec document"),
    root: Optional[Path] = typer.Option(None, "--root", "-r", help="Template root directory (defaults to the spec's directory)"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON records")
):
    """Build every composite and list the names."""
    try:
        configure_logging(log_level, str(log_file) if log_file else None, json_logs)
        registry = _build(config_path, root)
    except (TemplateKitError, OSError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    for name in registry.names():
        typer.echo(name)


@app.command("render")
def render(
    config_path: Path = typer.Argument(..., help="YAML spec document"),
    name: str = typer.Argument(..., help="Composite to render"),
    root: Optional[Path] = typer.Option(None, "--root", "-r", help="Template root directory (defaults to the spec's directory)"),
    data_path: Optional[Path] = typer.Option(None, "--data", "-d", help="JSON or YAML data file"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write output to this file instead of stdout"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON records")
):
    """Render one composite."""
    try:
        configure_logging(log_level, str(log_file) if log_file else None, json_logs)
        registry = _build(config_path, root)
        data = _load_data(data_path)
        text = registry.render_to_string(name, data)
        if output:
            output.write_text(text, encoding="utf-8")
    except (TemplateKitError, OSError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if not output:
        typer.echo(text, nl=False)


def main():
    app()


if __name__ == "__main__":
    main()
