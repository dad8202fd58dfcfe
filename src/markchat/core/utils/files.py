"""Markdown source discovery and output path mapping"""

from pathlib import Path


MD_EXTENSIONS = ('.md', '.markdown')


def discover_files(path: Path, extensions: tuple[str, ...] = MD_EXTENSIONS) -> list[Path]:
    """Return sorted markdown files under path, or [path] if it is a single matching file."""
    if path.is_file():
        return [path] if path.suffix.lower() in extensions else []
    return sorted(p for p in path.rglob('*') if p.is_file() and p.suffix.lower() in extensions)


def output_path(source: Path, root: Path, output_dir: Path) -> Path:
    """Map a source file to `<output_dir>/<relative dir>/<stem>.html`, mirroring the source tree."""
    base = root if root.is_dir() else root.parent
    return output_dir / source.relative_to(base).parent / f"{source.stem}.html"
