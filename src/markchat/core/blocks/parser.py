"""Block parser: turns body text into block-level markup, one structural unit at a time"""

import html
import logging
import re

from markchat.core.blocks.lines import (
    DEF_LIST_RE,
    FENCE_RE,
    HEADING_RE,
    HR_RE,
    HTML_BLOCK_RE,
    INDENTED_CODE_RE,
    QUOTE_RE,
    QUOTE_STRIP_RE,
    TOC_RE,
    interrupts_paragraph,
    is_list_item,
)
from markchat.core.blocks.lists import parse_list
from markchat.core.blocks.tables import is_table_start, parse_table, render_table
from markchat.core.context import CompileContext
from markchat.core.inline import render_inline
from markchat.core.models import Heading
from markchat.core.utils.slug import anchor_id, strip_tags


logger = logging.getLogger(__name__)

HTML_COMMENT_END_RE = re.compile(r'-->')


def _escape(text: str) -> str:
    return html.escape(text, quote=False)


def _fenced_code(lines: list[str], i: int) -> tuple[str, int]:
    m = FENCE_RE.match(lines[i])
    fence, lang = m.group(1), m.group(2)
    body = []
    i += 1
    # Unterminated fences run to the end of input.
    while i < len(lines) and not lines[i].lstrip().startswith(fence):
        body.append(lines[i])
        i += 1
    cls = f' class="language-{html.escape(lang)}"' if lang else ''
    code = _escape('\n'.join(body))
    return f'<pre><code{cls}>{code}</code></pre>', i + 1


def _indented_code(lines: list[str], i: int) -> tuple[str, int]:
    body = []
    while i < len(lines):
        if INDENTED_CODE_RE.match(lines[i]):
            body.append(INDENTED_CODE_RE.sub('', lines[i], count=1))
        elif not lines[i].strip() and i + 1 < len(lines) and INDENTED_CODE_RE.match(lines[i + 1]):
            body.append('')
        else:
            break
        i += 1
    code = _escape('\n'.join(body))
    return f'<pre><code>{code}</code></pre>', i


def _heading_text(raw: str) -> str:
    """Drop an optional closing run of '#' (it must follow whitespace)."""
    text = raw.strip()
    bare = text.rstrip('#')
    if bare != text and (not bare or bare[-1] in ' \t'):
        return bare.rstrip()
    return text


def _heading(ctx: CompileContext, lines: list[str], i: int) -> tuple[str, int]:
    m = HEADING_RE.match(lines[i])
    level = len(m.group(1))
    rendered = render_inline(ctx, _heading_text(m.group(2) or ''))
    plain = strip_tags(ctx.vault.restore(rendered)).strip()
    heading = Heading(level=level, text=plain, anchor_id=anchor_id(plain))
    ctx.headings.append(heading)
    return f'<h{level} id="{html.escape(heading.anchor_id)}">{rendered}</h{level}>', i + 1


def _blockquote(ctx: CompileContext, lines: list[str], i: int, depth: int) -> tuple[str, int]:
    inner = []
    while i < len(lines) and QUOTE_RE.match(lines[i]):
        inner.append(QUOTE_STRIP_RE.sub('', lines[i], count=1))
        i += 1
    text = '\n'.join(inner)
    if depth + 1 >= ctx.max_depth:
        logger.warning("block nesting limit (%d) reached; quote rendered as literal text", ctx.max_depth)
        return f'<blockquote>\n<p>{_escape(text.strip())}</p>\n</blockquote>', i
    return f'<blockquote>\n{parse_blocks(ctx, text, depth + 1)}\n</blockquote>', i


def _toc_marker(ctx: CompileContext, i: int) -> tuple[str, int]:
    key = ctx.vault.reserve()
    ctx.toc_keys.append(key)
    return key, i + 1


def _html_block(lines: list[str], i: int) -> tuple[str, int]:
    """Copy comment and tag lines verbatim; escape any bare text lines between them."""
    out = []
    in_comment = False
    while i < len(lines) and (in_comment or lines[i].strip()):
        line = lines[i]
        if in_comment or line.lstrip().startswith('<'):
            out.append(line)
            if '<!--' in line:
                in_comment = True
            if in_comment and HTML_COMMENT_END_RE.search(line.split('<!--', 1)[-1]):
                in_comment = False
        else:
            out.append(_escape(line))
        i += 1
    return '\n'.join(out), i


def _definition_list(ctx: CompileContext, lines: list[str], i: int) -> tuple[str, int]:
    parts = ['<dl>']
    while i < len(lines) and (m := DEF_LIST_RE.match(lines[i])):
        parts.append(f'<dt>{render_inline(ctx, m.group(1).strip())}</dt>')
        parts.append(f'<dd>{render_inline(ctx, m.group(2).strip())}</dd>')
        i += 1
    parts.append('</dl>')
    return '\n'.join(parts), i


def _paragraph(ctx: CompileContext, lines: list[str], i: int) -> tuple[str, int]:
    body = [lines[i].strip()]
    i += 1
    while i < len(lines) and lines[i].strip() and not interrupts_paragraph(lines, i):
        body.append(lines[i].strip())
        i += 1
    text = '\n'.join(body)
    return f'<p>{render_inline(ctx, text)}</p>', i


def parse_blocks(ctx: CompileContext, text: str, depth: int = 0) -> str:
    """Parse text into block markup; quotes and footnote bodies re-enter here one level deeper.

    Units are tried in precedence order on the first line of each unit; blank
    lines separate units and emit nothing.
    """
    lines = text.split('\n')
    fragments: list[str] = []
    i = 0

    while i < len(lines):
        line = lines[i]
        if not line.strip():
            i += 1
            continue

        if FENCE_RE.match(line):
            fragment, i = _fenced_code(lines, i)
        elif INDENTED_CODE_RE.match(line):
            fragment, i = _indented_code(lines, i)
        elif HEADING_RE.match(line):
            fragment, i = _heading(ctx, lines, i)
        elif HR_RE.match(line):
            fragment, i = '<hr>', i + 1
        elif QUOTE_RE.match(line):
            fragment, i = _blockquote(ctx, lines, i, depth)
        elif TOC_RE.match(line):
            fragment, i = _toc_marker(ctx, i)
        elif is_table_start(lines, i):
            table, i = parse_table(lines, i)
            fragment = render_table(ctx, table)
        elif is_list_item(line):
            fragment, i = parse_list(ctx, lines, i, depth)
        elif HTML_BLOCK_RE.match(line):
            fragment, i = _html_block(lines, i)
        elif DEF_LIST_RE.match(line):
            fragment, i = _definition_list(ctx, lines, i)
        else:
            fragment, i = _paragraph(ctx, lines, i)
        fragments.append(fragment)

    logger.debug("parsed %d blocks at depth %d", len(fragments), depth)
    return '\n'.join(fragments)
