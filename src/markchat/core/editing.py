"""Author-side editing transforms over (text, selection) for composing markup

Each operation is pure: it takes the current text and selection offsets and
returns the new text with the selection the editor should show next.
"""

import re
from typing import Callable, NamedTuple, Optional


class Edit(NamedTuple):
    text: str
    start: int
    end: int


LineTransform = Callable[[list[str]], list[str]]

HEADING_PREFIX_RE = re.compile(r'^\s*(#{1,6}\s+)')
BULLET_RE = re.compile(r'^\s*[-*+]\s+')
ORDERED_RE = re.compile(r'^\s*\d+\.\s+')
TASK_RE = re.compile(r'^\s*([-*+])\s+\[( |x|X)\]\s+')
QUOTE_RE = re.compile(r'^\s*> ?')

TABLE_SNIPPET = (
    "\n\n| Column 1 | Column 2 |\n"
    "| -------- | -------- |\n"
    "| Cell 1   | Cell 2   |\n"
    "| Cell 3   | Cell 4   |\n\n"
)


# --- generic helpers ---

def wrap_selection(
    text: str,
    start: int,
    end: int,
    before: str,
    after: Optional[str] = None,
    placeholder: str = "text",
    ) -> Edit:
    """Wrap the selection (or placeholder when empty) and select the inner text."""
    after = before if after is None else after
    inner = text[start:end] or placeholder
    new = text[:start] + before + inner + after + text[end:]
    sel = start + len(before)
    return Edit(new, sel, sel + len(inner))


def insert_at_cursor(
    text: str,
    start: int,
    end: int,
    snippet: str,
    select_start: Optional[int] = None,
    select_end: Optional[int] = None,
    ) -> Edit:
    """Replace the selection with snippet; offsets select within it (default: cursor after)."""
    new = text[:start] + snippet + text[end:]
    s = start + (len(snippet) if select_start is None else select_start)
    e = start + (len(snippet) if select_end is None else select_end)
    return Edit(new, s, e)


def apply_line_transform(text: str, start: int, end: int, transform: LineTransform) -> Edit:
    """Transform the selected lines; an empty selection means the current line."""
    if start == end:
        while start > 0 and text[start - 1] != '\n':
            start -= 1
        while end < len(text) and text[end] != '\n':
            end += 1
    changed = '\n'.join(transform(text[start:end].split('\n')))
    return Edit(text[:start] + changed + text[end:], start, start + len(changed))


def _all_or_blank(lines: list[str], pattern: re.Pattern) -> bool:
    return all(not line.strip() or pattern.match(line) for line in lines)


# --- block type ---

def set_paragraph(text: str, start: int, end: int) -> Edit:
    return apply_line_transform(
        text, start, end, lambda lines: [HEADING_PREFIX_RE.sub('', line) for line in lines]
    )


def set_heading(text: str, start: int, end: int, level: int) -> Edit:
    if not 1 <= level <= 6:
        raise ValueError(f"heading level must be 1-6, got {level}")
    hashes = '#' * level + ' '

    def transform(lines: list[str]) -> list[str]:
        out = []
        for line in lines:
            without = re.sub(r'^\s*(#{1,6}\s+)?', '', line)
            out.append(f'{hashes}{without}' if without.strip() else hashes)
        return out

    return apply_line_transform(text, start, end, transform)


# --- inline styles ---

def make_bold(text: str, start: int, end: int) -> Edit:
    return wrap_selection(text, start, end, "**", "**", "bold")


def make_italic(text: str, start: int, end: int) -> Edit:
    return wrap_selection(text, start, end, "*", "*", "italic")


def make_underline(text: str, start: int, end: int) -> Edit:
    return wrap_selection(text, start, end, "<u>", "</u>", "underlined")


def make_strike(text: str, start: int, end: int) -> Edit:
    return wrap_selection(text, start, end, "~~", "~~", "strikethrough")


def make_inline_code(text: str, start: int, end: int) -> Edit:
    return wrap_selection(text, start, end, "`", "`", "code")


def make_highlight(text: str, start: int, end: int) -> Edit:
    return wrap_selection(text, start, end, "==", "==", "highlight")


def set_color(text: str, start: int, end: int, color: str) -> Edit:
    if not color:
        return Edit(text, start, end)
    return wrap_selection(text, start, end, f"[color={color}]", "[/color]", "colored text")


# --- lists and quotes ---

def toggle_bullet_list(text: str, start: int, end: int) -> Edit:
    def transform(lines: list[str]) -> list[str]:
        if _all_or_blank(lines, BULLET_RE):
            return [BULLET_RE.sub('', line, count=1) for line in lines]
        out = []
        for line in lines:
            if not line.strip():
                out.append(line)
                continue
            cleaned = TASK_RE.sub('', ORDERED_RE.sub('', line, count=1), count=1)
            cleaned = BULLET_RE.sub('', cleaned, count=1)
            out.append(f'- {cleaned.lstrip()}')
        return out

    return apply_line_transform(text, start, end, transform)


def toggle_ordered_list(text: str, start: int, end: int) -> Edit:
    def transform(lines: list[str]) -> list[str]:
        if _all_or_blank(lines, ORDERED_RE):
            return [ORDERED_RE.sub('', line, count=1) for line in lines]
        out = []
        counter = 1
        for line in lines:
            if not line.strip():
                out.append(line)
                continue
            cleaned = ORDERED_RE.sub('', BULLET_RE.sub('', line, count=1), count=1)
            out.append(f'{counter}. {cleaned.lstrip()}')
            counter += 1
        return out

    return apply_line_transform(text, start, end, transform)


def toggle_task_list(text: str, start: int, end: int) -> Edit:
    def transform(lines: list[str]) -> list[str]:
        if _all_or_blank(lines, TASK_RE):
            return [TASK_RE.sub(r'\1 ', line, count=1) for line in lines]
        out = []
        for line in lines:
            if not line.strip():
                out.append(line)
                continue
            bullet = re.match(r'^\s*[-*+]\s+(.*)$', line)
            out.append(f'- [ ] {bullet.group(1) if bullet else line.strip()}')
        return out

    return apply_line_transform(text, start, end, transform)


def toggle_blockquote(text: str, start: int, end: int) -> Edit:
    def transform(lines: list[str]) -> list[str]:
        quoted = _all_or_blank(lines, QUOTE_RE)
        out = []
        for line in lines:
            if not line.strip():
                out.append(line)
            elif quoted:
                out.append(QUOTE_RE.sub('', line, count=1))
            else:
                out.append(f'> {QUOTE_RE.sub("", line, count=1)}')
        return out

    return apply_line_transform(text, start, end, transform)


# --- insertions ---

def insert_code_block(text: str, start: int, end: int, lang: str = "") -> Edit:
    selected = text[start:end] or "code"
    block = f"\n```{lang.strip()}\n{selected}\n```\n"
    return insert_at_cursor(text, start, end, block)


def insert_horizontal_rule(text: str, start: int, end: int) -> Edit:
    before = text[:start]
    prefix = "" if not before or before.endswith("\n") else "\n\n"
    return insert_at_cursor(text, start, end, f"{prefix}---\n\n")


def insert_link(text: str, start: int, end: int, url: str) -> Edit:
    url = url.strip()
    if not url:
        return Edit(text, start, end)
    selected = text[start:end] or "link text"
    return insert_at_cursor(text, start, end, f"[{selected}]({url})", 1, 1 + len(selected))


def insert_image(text: str, start: int, end: int, alt: str, url: str) -> Edit:
    url = url.strip()
    if not url:
        return Edit(text, start, end)
    return insert_at_cursor(text, start, end, f"![{alt}]({url})")


def insert_table(text: str, start: int, end: int) -> Edit:
    return insert_at_cursor(text, start, end, TABLE_SNIPPET)


def insert_toc(text: str, start: int, end: int) -> Edit:
    return insert_at_cursor(text, start, end, "[toc]\n\n")


def insert_footnote(text: str, start: int, end: int, footnote_id: str, body: str = "") -> Edit:
    """Insert a footnote reference at the cursor and append its definition to the document."""
    if not footnote_id:
        return Edit(text, start, end)
    ref = f"[^{footnote_id}]"
    new = text[:start] + ref + text[end:] + f"\n\n[^{footnote_id}]: {body}\n"
    pos = start + len(ref)
    return Edit(new, pos, pos)


def insert_abbreviation(text: str, start: int, end: int, term: str, expansion: str = "") -> Edit:
    """Insert term at the cursor, select it, and append its definition to the document."""
    if not term:
        return Edit(text, start, end)
    new = text[:start] + term + text[end:] + f"\n\n*[{term}]: {expansion}\n"
    return Edit(new, start, start + len(term))


def insert_issue_reference(text: str, start: int, end: int, number: str) -> Edit:
    number = number.strip()
    return insert_at_cursor(text, start, end, f"#{number}") if number else Edit(text, start, end)


def insert_mention(text: str, start: int, end: int, user: str) -> Edit:
    user = user.strip().lstrip('@')
    return insert_at_cursor(text, start, end, f"@{user}") if user else Edit(text, start, end)


def insert_emoji_shortcode(text: str, start: int, end: int, code: str) -> Edit:
    code = code.strip().strip(':')
    return insert_at_cursor(text, start, end, f":{code}:") if code else Edit(text, start, end)
