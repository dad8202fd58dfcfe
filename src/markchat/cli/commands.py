"""CLI command implementations"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError

from markchat.config import Settings, load_config
from markchat.core.compiler import compile_document
from markchat.core.utils.emoji import EMOJI
from markchat.core.utils.files import discover_files, output_path


logger = logging.getLogger(__name__)


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and apply its log level."""
    try:
        settings = load_config(overrides=overrides)
    except (ValueError, ValidationError) as e:
        _fail("Invalid configuration", e)
    # basicConfig is a no-op when --verbose already installed a handler.
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Cannot read {path}", e)


def render_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file or directory to render")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    depth: Annotated[Optional[int], typer.Option("--max-depth", help="Max quote/list nesting")] = None,
    stdout: Annotated[bool, typer.Option("--stdout", help="Print markup instead of writing files")] = False,
    ):
    """Compile markdown files to HTML, mirroring the source layout under the output dir."""
    settings = _settings(overrides={"output_dir": out, "max_depth": depth})
    root = Path(path)
    if not root.exists():
        _fail(f"Path not found: {root}")

    files = discover_files(root, tuple(settings.extensions))
    if not files:
        typer.echo("No markdown files found.")
        raise typer.Exit(1)

    output_dir = Path(settings.output_dir)
    for src in files:
        result = compile_document(_read(src), settings.max_depth)
        if stdout:
            typer.echo(result.html)
            continue
        dest = output_path(src, root, output_dir)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_text(result.html, encoding="utf-8")
        except OSError as e:
            _fail(f"Cannot write {dest}", e)
        logger.info("rendered %s -> %s", src, dest)
        typer.echo(f"  {src} -> {dest}")

    if not stdout:
        typer.echo(f"Rendered {len(files)} document(s) to {output_dir}/")


def headings_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file to inspect")],
    ):
    """Print the heading outline (level, text, anchor id) of a file as JSON."""
    settings = _settings()
    src = Path(path)
    if not src.is_file():
        _fail(f"Not a file: {src}")
    result = compile_document(_read(src), settings.max_depth)
    typer.echo(json.dumps([h.model_dump() for h in result.headings], indent=2, ensure_ascii=False))


def emoji_cmd():
    """List the built-in emoji shortcodes."""
    for code, glyph in sorted(EMOJI.items()):
        typer.echo(f":{code}:  {glyph}")
