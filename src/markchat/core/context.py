"""Call-scoped compile state threaded through every pipeline stage"""

from dataclasses import dataclass, field

from markchat.core.models import Definitions, Heading
from markchat.core.vault import PlaceholderVault


DEFAULT_MAX_DEPTH = 16


@dataclass
class CompileContext:
    vault: PlaceholderVault
    definitions: Definitions
    max_depth: int = DEFAULT_MAX_DEPTH
    headings: list[Heading] = field(default_factory=list)
    footnote_order: list[str] = field(default_factory=list)    # ids in first-citation order
    toc_keys: list[str] = field(default_factory=list)          # reserved vault keys

    def cite(self, footnote_id: str) -> tuple[int, bool]:
        """Record a footnote citation; return (number, is_first_citation)."""
        if footnote_id in self.footnote_order:
            return self.footnote_order.index(footnote_id) + 1, False
        self.footnote_order.append(footnote_id)
        return len(self.footnote_order), True
