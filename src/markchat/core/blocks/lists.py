"""List sub-parser: nested bullet, ordered and task lists"""

import logging

from markchat.core.blocks.lines import (
    HR_RE,
    LIST_ITEM_RE,
    TASK_RE,
    indent_width,
    interrupts_paragraph,
    is_list_item,
)
from markchat.core.context import CompileContext
from markchat.core.inline import render_inline
from markchat.core.models import ListItem


logger = logging.getLogger(__name__)


def _new_item(content: str, indent: int, ordered: bool) -> ListItem:
    item = ListItem(indent=indent, ordered=ordered)
    if task := TASK_RE.match(content):
        item.checked = task.group(1) in 'xX'
        content = task.group(2) or ''
    item.body_lines.append(content)
    return item


def _next_non_blank(lines: list[str], i: int) -> int:
    while i < len(lines) and not lines[i].strip():
        i += 1
    return i


def parse_list(ctx: CompileContext, lines: list[str], start: int, depth: int = 0) -> tuple[str, int]:
    """Parse the list starting at lines[start]; return (markup, next line index).

    Ordered vs unordered is fixed by the first marker; a sibling marker of the
    other kind ends the list. A marker indented deeper
    than the list's base indent opens a nested list that belongs to the
    preceding item. Past the depth limit, deeper lines become item text.
    """
    first = LIST_ITEM_RE.match(lines[start])
    base = indent_width(first.group(1))
    marker = first.group(2)
    ordered = marker[0].isdigit()
    start_number = int(marker[:-1]) if ordered else 1
    items: list[ListItem] = []
    i = start

    while i < len(lines):
        line = lines[i]

        if not line.strip():
            j = _next_non_blank(lines, i)
            m = LIST_ITEM_RE.match(lines[j]) if j < len(lines) else None
            if m and not HR_RE.match(lines[j]) and indent_width(m.group(1)) >= base:
                i = j
                continue
            break

        m = LIST_ITEM_RE.match(line)
        if m and is_list_item(line):
            indent = indent_width(m.group(1))
            if indent < base:
                break
            if indent > base:
                if depth + 1 >= ctx.max_depth:
                    logger.warning("list nesting limit (%d) reached; flattening nested item", ctx.max_depth)
                    items[-1].body_lines.append(line.strip())
                    i += 1
                    continue
                nested, i = parse_list(ctx, lines, i, depth + 1)
                items[-1].children.append(nested)
                continue
            if m.group(2)[0].isdigit() != ordered:
                break
            items.append(_new_item(m.group(3) or '', indent, ordered))
            i += 1
            continue

        if interrupts_paragraph(lines, i):
            break
        items[-1].body_lines.append(line.strip())
        i += 1

    return render_list(ctx, items, ordered, start_number), i


def _render_item(ctx: CompileContext, item: ListItem) -> str:
    body = render_inline(ctx, '\n'.join(item.body_lines).strip())
    nested = ''.join(f'\n{child}\n' for child in item.children)
    if item.checked is None:
        return f'<li>{body}{nested}</li>'
    checked = ' checked' if item.checked else ''
    sep = ' ' if body else ''
    return (
        f'<li class="task-list-item"><input type="checkbox" disabled{checked}>'
        f'{sep}{body}{nested}</li>'
    )


def render_list(ctx: CompileContext, items: list[ListItem], ordered: bool, start_number: int = 1) -> str:
    if ordered:
        open_tag = '<ol>' if start_number == 1 else f'<ol start="{start_number}">'
        close_tag = '</ol>'
    else:
        open_tag, close_tag = '<ul>', '</ul>'
    return '\n'.join([open_tag, *(_render_item(ctx, item) for item in items), close_tag])
