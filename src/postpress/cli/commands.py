"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from postpress.config import CONFIG_FILE, Settings, dump_config, load_config
from postpress.core.export import build_sidecar, json_default
from postpress.core.models import BuildReport
from postpress.core.pipeline import process_file, run_build
from postpress.errors import DocumentError
from postpress.log import setup_logging


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling, then configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    setup_logging(settings.log_level, settings.log_format)
    return settings


def _echo_report(report: BuildReport) -> None:
    """Print per-doc failures to stderr and a summary line."""
    for path, message in report.failures:
        typer.echo(f"Error: {path}: {message}", err=True)
    typer.echo(
        f"{len(report.rendered)} rendered, "
        f"{len(report.skipped)} skipped, "
        f"{len(report.failures)} failed, "
        f"{len(report.warnings)} warning(s)"
    )


def build_cmd(
    paths: Annotated[list[Path], typer.Argument(exists=True, readable=True, help="Files or directories to render")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    drafts: Annotated[Optional[bool], typer.Option("--drafts/--no-drafts", help="Render unpublished documents")] = None,
    workers: Annotated[Optional[int], typer.Option("--workers", help="Documents rendered concurrently")] = None,
    ):
    """Render documents to HTML + sidecar JSON, plus _index.json."""
    settings = _settings(overrides={
        "output_dir": out, "parser_config": parser,
        "include_drafts": drafts, "workers": workers,
    })
    try:
        report = run_build(paths, settings)
    except OSError as e:
        _fail("Build failed", e)
    for doc_id, html_path in report.rendered:
        typer.echo(f"  {doc_id} -> {html_path}")
    _echo_report(report)
    if not report.ok:
        raise typer.Exit(1)


def check_cmd(
    paths: Annotated[list[Path], typer.Argument(exists=True, readable=True, help="Files or directories to check")],
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Parse and render without writing; report warnings and errors."""
    settings = _settings(overrides={"parser_config": parser, "include_drafts": True})
    report = run_build(paths, settings, write=False)
    for path, message in report.warnings:
        typer.echo(f"  warning: {path}: {message}")
    _echo_report(report)
    if not report.ok:
        raise typer.Exit(1)


def render_cmd(
    path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="Document to render")],
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Print the rendered HTML body of one document."""
    settings = _settings(overrides={"parser_config": parser})
    try:
        rendered = process_file(path, settings)
    except DocumentError as e:
        _fail(str(e))
    typer.echo(rendered.html, nl=False)


def meta_cmd(
    path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="Document to inspect")],
    ):
    """Print one document's metadata as JSON."""
    settings = _settings()
    try:
        rendered = process_file(path, settings)
    except DocumentError as e:
        _fail(str(e))
    sidecar = build_sidecar(rendered)
    typer.echo(json.dumps(sidecar, indent=2, ensure_ascii=False, default=json_default))


def init_cmd(
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing config.yaml")] = False,
    ):
    """Write config.yaml with the current settings."""
    target = Path(CONFIG_FILE)
    if target.exists() and not force:
        _fail(f"{CONFIG_FILE} already exists (use --force to overwrite)")
    settings = _settings()
    target.write_text(dump_config(settings), encoding="utf-8")
    typer.echo(f"Wrote {target}")
