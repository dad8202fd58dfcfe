"""Post-processing: resolve table-of-contents markers and append the footnote section"""

import html
import logging

from markchat.core.blocks.parser import parse_blocks
from markchat.core.context import CompileContext
from markchat.core.models import Heading


logger = logging.getLogger(__name__)


def render_toc(headings: list[Heading]) -> str:
    """Navigation block linking every heading, indented by heading level."""
    parts = ['<nav class="toc">', '<ul>']
    for h in headings:
        parts.append(
            f'<li class="toc-h{h.level}" style="margin-left: {h.level - 1}em">'
            f'<a href="#{html.escape(h.anchor_id)}">{html.escape(h.text, quote=False)}</a></li>'
        )
    parts += ['</ul>', '</nav>']
    return '\n'.join(parts)


def _with_backref(body: str, backref: str) -> str:
    """Place the back-reference inside the last paragraph when there is one."""
    if body.endswith('</p>'):
        return f'{body[:-4]} {backref}</p>'
    return f'{body}\n{backref}' if body else backref


def render_footnotes(ctx: CompileContext, depth: int = 0) -> str:
    """Ordered footnote section for every cited id that has a definition.

    Footnote bodies are block-parsed, so they may cite further footnotes;
    those are picked up as the citation list grows.
    """
    footnotes = ctx.definitions.footnotes
    items = []
    n = 0
    while n < len(ctx.footnote_order):
        fid = ctx.footnote_order[n]
        n += 1
        if fid not in footnotes:
            continue
        if depth + 1 >= ctx.max_depth:
            body = f'<p>{html.escape(footnotes[fid], quote=False)}</p>'
        else:
            body = parse_blocks(ctx, footnotes[fid], depth + 1)
        ref = html.escape(fid)
        backref = f'<a href="#fnref-{ref}" class="footnote-backref">&#8617;</a>'
        items.append(f'<li id="fn-{ref}" value="{n}">{_with_backref(body, backref)}</li>')

    if not items:
        return ''
    return '\n'.join(['<section class="footnotes">', '<hr>', '<ol>', *items, '</ol>', '</section>'])


def finalize(ctx: CompileContext, body: str) -> str:
    """Fill reserved table-of-contents keys and append footnotes to the block markup."""
    # Footnotes first: their bodies may add headings.
    footnotes = render_footnotes(ctx)
    if ctx.toc_keys:
        toc = render_toc(ctx.headings)
        for key in ctx.toc_keys:
            ctx.vault.fill(key, toc)
        logger.debug("table of contents: %d entries", len(ctx.headings))
    if footnotes:
        body = f'{body}\n{footnotes}' if body else footnotes
    return body
