"""
Output document model for htmlblocks.

A converted document is an ordered list of ContentBlock objects. Each block
has a type name taken from the block render map, an indentation depth, its
plain text and one CharacterMetadata entry per character carrying the
inline styles and the entity key (if any) at that position.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

# Arbitrary max indent
MAX_DEPTH = 4

# Block separator inside the linear character stream
BLOCK_DELIMITER = '\r'
SOFT_NEWLINE = '\n'
SPACE = ' '


class InlineStyle(str, Enum):
    """Character-level formatting tokens"""
    BOLD = "BOLD"
    ITALIC = "ITALIC"
    UNDERLINE = "UNDERLINE"
    STRIKETHROUGH = "STRIKETHROUGH"
    CODE = "CODE"


# Ordered, immutable set of InlineStyle tokens. Insertion order is kept so
# that equality in tests is deterministic.
StyleSet = Tuple[InlineStyle, ...]

EMPTY_STYLE: StyleSet = ()


def add_style(style: StyleSet, token: InlineStyle) -> StyleSet:
    """Return style with token appended, or style itself if already present."""
    if token in style:
        return style
    return style + (token,)


def clamp_depth(depth: int) -> int:
    """Clamp depth into [0, MAX_DEPTH]."""
    return max(0, min(MAX_DEPTH, depth))


@dataclass(frozen=True)
class BlockSpec:
    """Block descriptor paired with one block separator in a Chunk"""
    type: str
    depth: int = 0


@dataclass(frozen=True)
class CharacterMetadata:
    """Style and entity for a single character of block text"""
    style: StyleSet = EMPTY_STYLE
    entity: Optional[str] = None

    def has_style(self, token: InlineStyle) -> bool:
        return token in self.style


@dataclass
class ContentBlock:
    """A single output block"""
    key: str
    type: str
    text: str = ""
    depth: int = 0
    character_list: List[CharacterMetadata] = field(default_factory=list)

