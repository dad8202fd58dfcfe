"""Data model for one compile call: definitions, headings, lists and tables"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class LinkDefinition(BaseModel):
    """Target of a reference-style link or image."""
    url: str
    title: Optional[str] = None


class Heading(BaseModel):
    """A heading recorded in document order, used to build the table of contents."""
    level: int = Field(ge=1, le=6)
    text: str                       # plain text, markup stripped
    anchor_id: str


class Alignment(str, Enum):
    left = "left"
    center = "center"
    right = "right"
    none = "none"


@dataclass
class Definitions:
    """Result of the definition pass: remaining body plus three lookup tables."""
    body: str
    links: dict[str, LinkDefinition] = field(default_factory=dict)     # keyed by normalized label
    footnotes: dict[str, str] = field(default_factory=dict)           # id -> block markdown body
    abbreviations: dict[str, str] = field(default_factory=dict)       # term -> expansion


@dataclass
class ListItem:
    indent: int
    ordered: bool
    checked: Optional[bool] = None  # None for a plain item, else the task state
    body_lines: list[str] = field(default_factory=list)
    children: list[str] = field(default_factory=list)   # rendered nested lists


@dataclass
class Table:
    header_cells: list[str]
    alignments: list[Alignment]
    rows: list[list[str]] = field(default_factory=list)
