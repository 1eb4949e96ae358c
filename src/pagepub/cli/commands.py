"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from pagepub.config import Settings, load_config
from pagepub.core.errors import TaskFailed
from pagepub.core.models import BuildContext
from pagepub.core.pipeline import (
    PAGE_EXTENSIONS,
    discover_files,
    run_build_pages,
    run_build_resources,
)
from pagepub.log import setup_logging


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _pages(settings: Settings, path: Optional[str]) -> None:
    files = discover_files(Path(path or settings.source_dir), PAGE_EXTENSIONS)
    context = BuildContext(target_dir=settings.pages_dir)
    try:
        run_build_pages(files, settings, context)
    except TaskFailed as e:
        _fail(str(e))
    for out_file in context.written:
        typer.echo(f"  {out_file}")
    typer.echo(f"Built {len(files)} pages.")


def _resources(settings: Settings) -> None:
    root = Path(settings.resources_dir)
    files = discover_files(root) if root.exists() else []
    context = BuildContext(target_dir=settings.resources_target_dir)
    try:
        run_build_resources(files, settings, context)
    except TaskFailed as e:
        _fail(str(e))
    typer.echo(f"Built {len(files)} resources.")


def build_cmd(
    path: Annotated[Optional[str], typer.Argument(help="File or directory to build (defaults to source_dir)")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    source: Annotated[Optional[str], typer.Option("--source-dir", help="Source pages directory")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    no_highlight: Annotated[bool, typer.Option("--no-highlight", help="Skip code block highlighting")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log each processed file")] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Debug logging")] = False,
    ):
    """Build html and markdown pages: include @partials and highlight code blocks."""
    setup_logging(verbose, debug)
    settings = _settings(overrides={
        "output_dir": out, "source_dir": source, "parser_config": parser,
        "highlight": False if no_highlight else None,
    })
    _pages(settings, path)


def resources_cmd(
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    resources: Annotated[Optional[str], typer.Option("--resources-dir", help="Resources directory")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log each copied file")] = False,
    ):
    """Copy resources into the output directory."""
    setup_logging(verbose)
    settings = _settings(overrides={"output_dir": out, "resources_dir": resources})
    _resources(settings)


def all_cmd(
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    source: Annotated[Optional[str], typer.Option("--source-dir", help="Source pages directory")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    no_highlight: Annotated[bool, typer.Option("--no-highlight", help="Skip code block highlighting")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log each processed file")] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Debug logging")] = False,
    ):
    """Run build-pages then build-resources."""
    setup_logging(verbose, debug)
    settings = _settings(overrides={
        "output_dir": out, "source_dir": source, "parser_config": parser,
        "highlight": False if no_highlight else None,
    })
    _pages(settings, None)
    _resources(settings)
