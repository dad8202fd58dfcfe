"""Pipe-table parsing and rendering"""

import re

from markchat.core.context import CompileContext
from markchat.core.inline import render_inline
from markchat.core.models import Alignment, Table


CELL_SPLIT_RE = re.compile(r'(?<!\\)\|')
DIVIDER_CELL_RE = re.compile(r'^:?-{3,}:?$')


def split_row(line: str) -> list[str]:
    """Split a row on unescaped pipes after trimming the outer delimiters."""
    line = line.strip()
    if line.startswith('|'):
        line = line[1:]
    if line.endswith('|') and not line.endswith('\\|'):
        line = line[:-1]
    return [cell.strip() for cell in CELL_SPLIT_RE.split(line)]


def _alignment(cell: str) -> Alignment:
    if cell.startswith(':') and cell.endswith(':'):
        return Alignment.center
    if cell.endswith(':'):
        return Alignment.right
    if cell.startswith(':'):
        return Alignment.left
    return Alignment.none


def parse_divider(line: str) -> list[Alignment] | None:
    """Return per-column alignments, or None if line is not a divider row."""
    if '-' not in line or '|' not in line:
        return None
    cells = split_row(line)
    if not cells or not all(DIVIDER_CELL_RE.match(c) for c in cells):
        return None
    return [_alignment(c) for c in cells]


def is_table_start(lines: list[str], i: int) -> bool:
    """A table starts where a row with a delimiter is followed by a divider row."""
    return (
        '|' in lines[i]
        and i + 1 < len(lines)
        and parse_divider(lines[i + 1]) is not None
    )


def parse_table(lines: list[str], start: int) -> tuple[Table, int]:
    """Parse the table at lines[start]; return it with the index of the next unconsumed line."""
    header = split_row(lines[start])
    alignments = parse_divider(lines[start + 1]) or []
    width = len(header)
    # Header width wins; pad or trim the alignment list to match.
    alignments = (alignments + [Alignment.none] * width)[:width]
    table = Table(header_cells=header, alignments=alignments)

    i = start + 2
    while i < len(lines) and lines[i].strip() and '|' in lines[i]:
        cells = split_row(lines[i])
        table.rows.append((cells + [''] * width)[:width])
        i += 1
    return table, i


def _cell(ctx: CompileContext, tag: str, text: str, alignment: Alignment) -> str:
    style = '' if alignment is Alignment.none else f' style="text-align: {alignment.value}"'
    return f'<{tag}{style}>{render_inline(ctx, text)}</{tag}>'


def render_table(ctx: CompileContext, table: Table) -> str:
    head = ''.join(_cell(ctx, 'th', c, a) for c, a in zip(table.header_cells, table.alignments))
    parts = ['<table>', '<thead>', f'<tr>{head}</tr>', '</thead>', '<tbody>']
    for row in table.rows:
        parts.append('<tr>' + ''.join(_cell(ctx, 'td', c, a) for c, a in zip(row, table.alignments)) + '</tr>')
    parts += ['</tbody>', '</table>']
    return '\n'.join(parts)
