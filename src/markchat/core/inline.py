"""Inline renderer: an ordered pipeline of rewrite rules over one unit of inline text

Every rule that produces markup hands it to the vault and leaves an opaque key
in the text, so rules further down the list never see (or re-match) finished
markup. Whatever plain text survives all rules is HTML-escaped at the end.
"""

import html
import logging
import re
from typing import Callable, Optional

from markchat.core.context import CompileContext
from markchat.core.definitions import normalize_label
from markchat.core.models import LinkDefinition
from markchat.core.utils.emoji import EMOJI
from markchat.core.vault import KEY_CHARS


logger = logging.getLogger(__name__)

InlineRule = Callable[[CompileContext, str], str]

LINE_BREAK_RE = re.compile(r'[ \t]*\n[ \t]*')
ESCAPE_RE = re.compile(r'\\([!"#$%&\'()*+,\-./:;<=>?@\[\\\]^_`{|}~])')
CODE_SPAN_RE = re.compile(r'`([^`]+)`')

ANGLE_URL_RE = re.compile(rf'<((?:https?|ftp)://[^\s<>{KEY_CHARS}]+)>')
ANGLE_EMAIL_RE = re.compile(r'<(?:mailto:)?([\w.+-]+@[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)+)>')
HTML_COMMENT_RE = re.compile(r'<!--(?:(?!<!--).)*?-->', re.DOTALL)
HTML_TAG_RE = re.compile(r'</?([A-Za-z][A-Za-z0-9]*)(?:\s[^<>]*)?/?>')
PASSTHROUGH_TAGS = frozenset({
    'a', 'abbr', 'b', 'bdi', 'bdo', 'big', 'br', 'cite', 'code', 'data', 'del', 'dfn',
    'em', 'font', 'i', 'img', 'ins', 'kbd', 'mark', 'q', 's', 'samp', 'small', 'span',
    'strong', 'sub', 'sup', 'time', 'u', 'var', 'wbr',
})

_TITLE = r'(?:\s+"([^"]*)")?'
REF_IMAGE_RE = re.compile(r'!\[([^\]]*)\]\[([^\]]*)\]')
INLINE_IMAGE_RE = re.compile(r'!\[([^\]]*)\]\(\s*<?([^\s)>]+)>?' + _TITLE + r'\s*\)')
REF_LINK_RE = re.compile(r'\[(?!\^)([^\]]+)\]\[([^\]]*)\]')
INLINE_LINK_RE = re.compile(r'\[(?!\^)([^\]]+)\]\(\s*<?([^\s)>]+)>?' + _TITLE + r'\s*\)')
FOOTNOTE_REF_RE = re.compile(r'\[\^([^\]\s]+)\]')

# Content never crosses the next opening delimiter, so an unclosed opener
# costs a scan to the next delimiter rather than to the end of the text.
HIGHLIGHT_RE = re.compile(r'==(?=\S)((?:[^=]|=(?!=))+?)(?<=\S)==')
BOLD_ITALIC_RE = re.compile(r'\*\*\*(?=\S)([^*]+?)(?<=\S)\*\*\*')
BOLD_RE = re.compile(
    r'\*\*(?=\S)((?:[^*]|\*(?!\*))+?)(?<=\S)\*\*'
    r'|(?<!\w)__(?=\S)((?:[^_]|_(?!_))+?)(?<=\S)__(?!\w)'
)
ITALIC_RE = re.compile(r'\*(?=\S)([^*]+?)(?<=\S)\*|(?<!\w)_(?=\S)([^_]+?)(?<=\S)_(?!\w)')
STRIKE_RE = re.compile(r'~~(?=\S)((?:[^~]|~(?!~))+?)(?<=\S)~~')

# Innermost span only: the content may not contain another opener.
COLOR_RE = re.compile(
    r'\[color=([^\]\s]+)\]((?:(?!\[color=).)*?)\[/color\]', re.DOTALL | re.IGNORECASE
)
HEX_COLOR_RE = re.compile(r'#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})')
NAMED_COLORS = frozenset({
    'red', 'orange', 'yellow', 'green', 'blue', 'indigo', 'purple', 'violet', 'pink',
    'gray', 'grey', 'black', 'white', 'brown', 'cyan', 'magenta', 'teal', 'lime',
    'navy', 'maroon', 'olive', 'gold', 'silver',
})

EMOJI_RE = re.compile(r':([a-z0-9_+\-]+):')

BARE_URL_RE = re.compile(
    rf'(?<![\w/=])((?:https?://|www\.)[^\s<>"{KEY_CHARS}]*[^\s<>"\'.,;:!?)\]{KEY_CHARS}])'
)
EMAIL_RE = re.compile(r'(?<![\w.+-])([\w.+-]+@[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,})(?![\w-])')
ISSUE_RE = re.compile(r'(?<![\w&#/])#(\d+)\b')
MENTION_RE = re.compile(r'(?<![\w@./])@([A-Za-z0-9_](?:[A-Za-z0-9_-]*[A-Za-z0-9_])?)')
COMMIT_RE = re.compile(r'(?<![\w#])(?=[0-9a-f]*[a-f])[0-9a-f]{7,40}(?!\w)')


def _text(value: str) -> str:
    return html.escape(value, quote=False)


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def _title_attr(title: Optional[str]) -> str:
    return f' title="{_attr(title)}"' if title else ''


def _lookup(ctx: CompileContext, label: str, text: str) -> Optional[LinkDefinition]:
    """Resolve a reference label; an empty label falls back to the link text."""
    return ctx.definitions.links.get(normalize_label(label or text))


# --- rules, in pipeline order ---

def _line_breaks(ctx: CompileContext, text: str) -> str:
    text = text.replace('\r\n', '\n').replace('\r', '\n')
    if '\n' not in text:
        return text
    br = ctx.vault.protect('<br>')
    return LINE_BREAK_RE.sub(lambda _: br, text)


def _backslash_escapes(ctx: CompileContext, text: str) -> str:
    return ESCAPE_RE.sub(lambda m: ctx.vault.protect(_text(m.group(1))), text)


def _code_spans(ctx: CompileContext, text: str) -> str:
    return CODE_SPAN_RE.sub(lambda m: ctx.vault.protect(f'<code>{_text(m.group(1))}</code>'), text)


def _autolinks_and_html(ctx: CompileContext, text: str) -> str:
    def url(m):
        return ctx.vault.protect(f'<a href="{_attr(m.group(1))}">{_text(m.group(1))}</a>')

    def email(m):
        addr = m.group(1)
        return ctx.vault.protect(f'<a href="mailto:{_attr(addr)}">{_text(addr)}</a>')

    def tag(m):
        if m.group(1).lower() not in PASSTHROUGH_TAGS:
            return m.group(0)
        return ctx.vault.protect(m.group(0))

    text = ANGLE_URL_RE.sub(url, text)
    text = ANGLE_EMAIL_RE.sub(email, text)
    text = HTML_COMMENT_RE.sub(lambda m: ctx.vault.protect(m.group(0)), text)
    return HTML_TAG_RE.sub(tag, text)


def _image_markup(url: str, alt: str, title: Optional[str]) -> str:
    return f'<img src="{_attr(url)}" alt="{_attr(alt)}"{_title_attr(title)}>'


def _link_markup(url: str, text: str, title: Optional[str]) -> str:
    return f'<a href="{_attr(url)}"{_title_attr(title)}>{_text(text)}</a>'


def _reference_images(ctx: CompileContext, text: str) -> str:
    def repl(m):
        target = _lookup(ctx, m.group(2), m.group(1))
        if target is None:
            return m.group(0)
        return ctx.vault.protect(_image_markup(target.url, m.group(1), target.title))
    return REF_IMAGE_RE.sub(repl, text)


def _inline_images(ctx: CompileContext, text: str) -> str:
    return INLINE_IMAGE_RE.sub(
        lambda m: ctx.vault.protect(_image_markup(m.group(2), m.group(1), m.group(3))), text
    )


def _reference_links(ctx: CompileContext, text: str) -> str:
    def repl(m):
        target = _lookup(ctx, m.group(2), m.group(1))
        if target is None:
            return m.group(0)
        return ctx.vault.protect(_link_markup(target.url, m.group(1), target.title))
    return REF_LINK_RE.sub(repl, text)


def _inline_links(ctx: CompileContext, text: str) -> str:
    return INLINE_LINK_RE.sub(
        lambda m: ctx.vault.protect(_link_markup(m.group(2), m.group(1), m.group(3))), text
    )


def _footnote_refs(ctx: CompileContext, text: str) -> str:
    # Dangling ids still render; the anchor just points nowhere.
    def repl(m):
        fid = _attr(m.group(1))
        number, first = ctx.cite(m.group(1))
        ref_id = f' id="fnref-{fid}"' if first else ''
        return ctx.vault.protect(
            f'<sup class="footnote-ref"{ref_id}><a href="#fn-{fid}">{number}</a></sup>'
        )
    return FOOTNOTE_REF_RE.sub(repl, text)


def _wrap(pattern: re.Pattern, open_tag: str, close_tag: str) -> InlineRule:
    """Build a symmetric-delimiter rule; the wrapped content is escaped, not re-rendered."""
    def rule(ctx: CompileContext, text: str) -> str:
        def repl(m):
            inner = next(g for g in m.groups() if g is not None)
            return ctx.vault.protect(f'{open_tag}{_text(inner)}{close_tag}')
        return pattern.sub(repl, text)
    return rule


def is_valid_color(color: str) -> bool:
    return color.lower() in NAMED_COLORS or bool(HEX_COLOR_RE.fullmatch(color))


def _colored_spans(ctx: CompileContext, text: str) -> str:
    """Render color spans innermost first, one nesting level per pass.

    An invalid color keeps its tags as literal text but still lets the
    enclosing span close around it.
    """
    def repl(m):
        color, inner = m.group(1), m.group(2)
        if not is_valid_color(color):
            source = m.group(0)
            opener = source[:m.start(2) - m.start()]
            closer = source[m.end(2) - m.start():]
            return ctx.vault.protect(_text(opener)) + inner + ctx.vault.protect(_text(closer))
        rendered = render_inline(ctx, inner)
        return ctx.vault.protect(f'<span style="color: {_attr(color.lower())}">{rendered}</span>')

    for _ in range(ctx.max_depth):
        text, count = COLOR_RE.subn(repl, text)
        if not count:
            return text
    if COLOR_RE.search(text):
        logger.warning("inline nesting limit (%d) reached; colored spans left unrendered", ctx.max_depth)
    return text


def _emoji(ctx: CompileContext, text: str) -> str:
    def repl(m):
        glyph = EMOJI.get(m.group(1))
        if glyph is None:
            return m.group(0)
        return ctx.vault.protect(
            f'<span class="emoji" role="img" aria-label="{_attr(m.group(1))}">{glyph}</span>'
        )
    return EMOJI_RE.sub(repl, text)


def _bare_urls(ctx: CompileContext, text: str) -> str:
    def repl(m):
        url = m.group(1)
        href = url if '://' in url else f'http://{url}'
        return ctx.vault.protect(f'<a href="{_attr(href)}">{_text(url)}</a>')
    return BARE_URL_RE.sub(repl, text)


def _emails(ctx: CompileContext, text: str) -> str:
    return EMAIL_RE.sub(
        lambda m: ctx.vault.protect(f'<a href="mailto:{_attr(m.group(1))}">{_text(m.group(1))}</a>'),
        text,
    )


def _issue_refs(ctx: CompileContext, text: str) -> str:
    return ISSUE_RE.sub(
        lambda m: ctx.vault.protect(f'<span class="issue-ref" data-issue="{m.group(1)}">#{m.group(1)}</span>'),
        text,
    )


def _mentions(ctx: CompileContext, text: str) -> str:
    return MENTION_RE.sub(
        lambda m: ctx.vault.protect(f'<span class="mention" data-user="{m.group(1)}">@{m.group(1)}</span>'),
        text,
    )


def _commit_hashes(ctx: CompileContext, text: str) -> str:
    # Short all-letter runs are ordinary words ("defaced"); require a digit or 12+ chars.
    def repl(m):
        sha = m.group(0)
        if len(sha) < 12 and not any(c.isdigit() for c in sha):
            return sha
        return ctx.vault.protect(f'<code class="commit-ref">{sha}</code>')
    return COMMIT_RE.sub(repl, text)


def _abbreviations(ctx: CompileContext, text: str) -> str:
    abbrs = ctx.definitions.abbreviations
    for term in sorted(abbrs, key=len, reverse=True):
        pattern = re.compile(rf'(?<!\w){re.escape(term)}(?!\w)')
        if not pattern.search(text):
            continue
        key = ctx.vault.protect(f'<abbr title="{_attr(abbrs[term])}">{_text(term)}</abbr>')
        text = pattern.sub(lambda _: key, text)
    return text


INLINE_RULES: list[InlineRule] = [
    _line_breaks,
    _backslash_escapes,
    _code_spans,
    _autolinks_and_html,
    _reference_images,
    _inline_images,
    _reference_links,
    _inline_links,
    _footnote_refs,
    _wrap(HIGHLIGHT_RE, '<mark>', '</mark>'),
    _wrap(BOLD_ITALIC_RE, '<strong><em>', '</em></strong>'),
    _wrap(BOLD_RE, '<strong>', '</strong>'),
    _wrap(ITALIC_RE, '<em>', '</em>'),
    _wrap(STRIKE_RE, '<del>', '</del>'),
    _colored_spans,
    _emoji,
    _bare_urls,
    _emails,
    _issue_refs,
    _mentions,
    _commit_hashes,
    _abbreviations,
]


def render_inline(ctx: CompileContext, text: str) -> str:
    """Run every inline rule over text, in order, and escape what is left.

    The result still contains vault keys; they are resolved once, at the end
    of the compile call.
    """
    for rule in INLINE_RULES:
        text = rule(ctx, text)
    return _text(text)
