"""Report CLI commands — report and callbacks."""

import importlib
import json
import sys
from pathlib import Path
from typing import Any

import click
import yaml

from hookscope.analysis import ModelAnalysis, analyze
from hookscope.core.config import AnalysisConfig
from hookscope.core.errors import InstallationError

FORMATS = ("text", "json", "yaml")


def _load_model(target: str) -> type:
    """Import MODULE:CLASS, exiting with an error message on failure."""
    module_name, _, class_name = target.partition(":")
    if not module_name or not class_name:
        click.echo(f"Error: expected MODULE:CLASS, got '{target}'", err=True)
        raise SystemExit(1)

    # Models usually live in the project the command runs from
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        click.echo(click.style(f"Error: cannot import '{module_name}': {e}", fg="red"), err=True)
        raise SystemExit(1)

    model = getattr(module, class_name, None)
    if not isinstance(model, type):
        click.echo(
            click.style(f"Error: '{class_name}' is not a class in '{module_name}'", fg="red"),
            err=True,
        )
        raise SystemExit(1)
    return model


def _resolve_config(
    config_path: Path | None, root_path: Path | None, model_path: Path | None
) -> AnalysisConfig:
    config = AnalysisConfig.load(config_path)
    if root_path is not None:
        config.root_path = root_path
    if model_path is not None:
        config.model_path = model_path
    return config


def _analyze(target: str, config: AnalysisConfig) -> ModelAnalysis:
    model = _load_model(target)
    try:
        return analyze(model, config=config)
    except InstallationError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)


def _dump(data: Any, output_format: str) -> str:
    if output_format == "json":
        return json.dumps(data, indent=2)
    return yaml.safe_dump(data, sort_keys=False).rstrip()


def _path_options(fn):
    fn = click.option(
        "--model-path",
        default=None,
        type=click.Path(file_okay=False, path_type=Path),
        help="Model source root; report paths are shown relative to it.",
    )(fn)
    fn = click.option(
        "--root-path",
        default=None,
        type=click.Path(file_okay=False, path_type=Path),
        help="Project root; report paths are shown relative to it.",
    )(fn)
    fn = click.option(
        "--config",
        "config_path",
        default=None,
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="YAML config file (defaults to ./hookscope.yaml when present).",
    )(fn)
    fn = click.option(
        "--format",
        "output_format",
        type=click.Choice(FORMATS),
        default="text",
        show_default=True,
        help="Output format.",
    )(fn)
    return fn


@click.command()
@click.argument("target")
@_path_options
def report(
    target: str,
    output_format: str,
    config_path: Path | None,
    root_path: Path | None,
    model_path: Path | None,
):
    """Summarize the callbacks of TARGET (MODULE:CLASS)."""
    config = _resolve_config(config_path, root_path, model_path)
    summary = _analyze(target, config).report()

    if output_format != "text":
        click.echo(_dump(summary.to_dict(), output_format))
        return

    click.echo(click.style(summary.model_name, bold=True) + f" ({summary.model_file_path})")
    for key, value in summary.to_dict().items():
        if key in ("model_name", "model_file_path"):
            continue
        click.echo(f"  {key}: {value}")


@click.command()
@click.argument("target")
@click.option("--event", default=None, help="Only show callbacks for this event (e.g., before_save).")
@_path_options
def callbacks(
    target: str,
    event: str | None,
    output_format: str,
    config_path: Path | None,
    root_path: Path | None,
    model_path: Path | None,
):
    """List the analyzed callbacks of TARGET (MODULE:CLASS), grouped by event."""
    config = _resolve_config(config_path, root_path, model_path)
    analysis = _analyze(target, config)

    groups = analysis.analyzed_callbacks
    if event is not None:
        groups = {event: groups.get(event, [])}

    if output_format != "text":
        data = {name: [c.to_dict(config) for c in entries] for name, entries in groups.items()}
        click.echo(_dump(data, output_format))
        return

    if not any(groups.values()):
        click.echo("No callbacks collected.")
        return

    for name, entries in groups.items():
        click.echo(click.style(name, bold=True))
        for callback in entries:
            info = callback.to_dict(config)
            line = f"  {info['target']}  {info['callback_file_path']}:{info['callback_line_number']}"
            if info["target_line_number"] is not None:
                line += f" -> {info['target_file_path']}:{info['target_line_number']}"
            if info["lines_to_target"] is not None:
                line += f" ({info['lines_to_target']:+d} lines)"
            if info["conditional"]:
                guard = info["conditional_target"] or "<guard>"
                line += f"  {info['conditional']} {guard}"
            colour = "yellow" if info["external_callback"] else None
            click.echo(click.style(line, fg=colour))
