"""Line classifiers shared by the block parser and its sub-parsers"""

import re

from markchat.core.blocks.tables import is_table_start


FENCE_RE = re.compile(r'^[ ]{0,3}(`{3,}|~{3,})[ \t]*([^\s`]*)[^`]*$')
INDENTED_CODE_RE = re.compile(r'^(?: {4}|\t)')
HEADING_RE = re.compile(r'^[ ]{0,3}(#{1,6})(?:[ \t]+(.*))?$')
HR_RE = re.compile(r'^[ ]{0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$')
QUOTE_RE = re.compile(r'^[ ]{0,3}>')
QUOTE_STRIP_RE = re.compile(r'^[ ]{0,3}> ?')
TOC_RE = re.compile(r'^[ \t]*\[toc\][ \t]*$', re.IGNORECASE)
LIST_ITEM_RE = re.compile(r'^([ \t]*)([-*+]|\d{1,9}\.)(?:[ \t]+(.*))?$')
TASK_RE = re.compile(r'^\[([ xX])\](?:[ \t]+(.*))?$')
HTML_BLOCK_RE = re.compile(r'^[ ]{0,3}<(?:!--|/?[A-Za-z][A-Za-z0-9-]*(?:[\s/>]|$))')
DEF_LIST_RE = re.compile(r'^([^\s:](?:[^:]*[^\s:])?)[ \t]+:[ \t]+(\S.*)$')


def indent_width(prefix: str) -> int:
    """Width of leading whitespace with tabs counted as four columns."""
    return len(prefix.expandtabs(4))


def is_list_item(line: str) -> bool:
    return bool(LIST_ITEM_RE.match(line)) and not HR_RE.match(line)


def interrupts_paragraph(lines: list[str], i: int) -> bool:
    """True if lines[i] opens a block that ends a running paragraph or list item.

    Indented code is absent: an indented line continues the text.
    """
    line = lines[i]
    return bool(
        FENCE_RE.match(line)
        or HEADING_RE.match(line)
        or HR_RE.match(line)
        or QUOTE_RE.match(line)
        or TOC_RE.match(line)
        or is_table_start(lines, i)
        or is_list_item(line)
        or HTML_BLOCK_RE.match(line)
        or DEF_LIST_RE.match(line)
    )
