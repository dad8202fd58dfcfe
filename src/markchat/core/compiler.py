"""Public entry point: compile author markdown into render-ready HTML"""

import logging

from pydantic import BaseModel

from markchat.core.blocks.parser import parse_blocks
from markchat.core.context import DEFAULT_MAX_DEPTH, CompileContext
from markchat.core.definitions import extract_definitions
from markchat.core.models import Heading
from markchat.core.postprocess import finalize
from markchat.core.vault import PlaceholderVault


logger = logging.getLogger(__name__)


class CompileResult(BaseModel):
    html: str
    headings: list[Heading] = []


def compile_document(text: str, max_depth: int = DEFAULT_MAX_DEPTH) -> CompileResult:
    """Compile text and return the markup together with the collected headings.

    Each call builds its own vault and context, so nothing is shared between
    calls. No input is rejected: anything that does not match a rule is kept
    as escaped literal text.
    """
    vault = PlaceholderVault()
    text = vault.shield(text.replace('\r\n', '\n').replace('\r', '\n'))
    definitions = extract_definitions(text)
    ctx = CompileContext(vault=vault, definitions=definitions, max_depth=max(1, max_depth))

    body = parse_blocks(ctx, definitions.body)
    markup = vault.restore(finalize(ctx, body))
    logger.debug("compiled %d chars -> %d chars (%d fragments)", len(text), len(markup), len(vault))
    return CompileResult(html=markup, headings=ctx.headings)


def compile_markdown(text: str, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """Compile text to HTML."""
    return compile_document(text, max_depth).html
