"""Anchor id generation for headings"""

import html
import re


TAG_RE = re.compile(r'<[^>]*>')


def strip_tags(markup: str) -> str:
    """Drop tags from a markup fragment and unescape entities."""
    return html.unescape(TAG_RE.sub('', markup))


def anchor_id(text: str) -> str:
    """Convert heading text to a lowercase, hyphen-separated, URL-safe anchor id."""
    text = strip_tags(text).lower()
    text = re.sub(r'[^\w\s-]|_', '', text)
    text = re.sub(r'\s+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')
