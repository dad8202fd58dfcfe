"""Definition pass: pull footnote, abbreviation and reference-link definitions out of raw text"""

import logging
import re

from markchat.core.models import Definitions, LinkDefinition


logger = logging.getLogger(__name__)

FOOTNOTE_DEF_RE = re.compile(r'^\[\^([^\]\s]+)\]:[ \t]?(.*)$')
ABBR_DEF_RE = re.compile(r'^\*\[([^\]]+)\]:[ \t]*(.*)$')
LINK_DEF_RE = re.compile(
    r'''^[ ]{0,3}\[([^\]^][^\]]*)\]:[ \t]*<?([^\s>]+)>?'''
    r'''(?:[ \t]+(?:"([^"]*)"|'([^']*)'|\(([^)]*)\)))?[ \t]*$'''
)
CONTINUATION_RE = re.compile(r'^(?:\t| {1,4})')


def normalize_label(label: str) -> str:
    """Case-insensitive, whitespace-collapsed lookup key for reference labels."""
    return ' '.join(label.split()).lower()


def _is_continuation(line: str) -> bool:
    return not line.strip() or bool(CONTINUATION_RE.match(line))


def extract_definitions(text: str) -> Definitions:
    """Split text into body and definition tables in one forward pass.

    Later definitions with the same key overwrite earlier ones. Lines that are
    not definitions pass through to the body in their original order.
    """
    lines = text.split('\n')
    body: list[str] = []
    defs = Definitions(body='')
    i = 0

    while i < len(lines):
        line = lines[i]

        if m := FOOTNOTE_DEF_RE.match(line):
            parts = [m.group(2)]
            i += 1
            while i < len(lines) and _is_continuation(lines[i]):
                parts.append(CONTINUATION_RE.sub('', lines[i], count=1))
                i += 1
            # Trailing blank lines belong to the body, not the footnote.
            while len(parts) > 1 and not parts[-1].strip():
                parts.pop()
                body.append('')
            defs.footnotes[m.group(1)] = '\n'.join(parts).strip()
            continue

        if m := ABBR_DEF_RE.match(line):
            term = m.group(1).strip()
            if term:
                defs.abbreviations[term] = m.group(2).strip()
        elif m := LINK_DEF_RE.match(line):
            title = next((t for t in m.group(3, 4, 5) if t is not None), None)
            defs.links[normalize_label(m.group(1))] = LinkDefinition(url=m.group(2), title=title)
        else:
            body.append(line)
        i += 1

    defs.body = '\n'.join(body)
    logger.debug(
        "definitions: %d links, %d footnotes, %d abbreviations",
        len(defs.links), len(defs.footnotes), len(defs.abbreviations),
    )
    return defs
