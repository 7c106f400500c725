"""
Chunk accumulator for the HTML tree walk.

A Chunk is a partially converted linear run of the document: the text, one
style set and one entity key per character, and the block descriptors
discovered so far. Every BLOCK_DELIMITER in the text is a block boundary.
The three per-character sequences always have the same length; a Chunk can
only be built through the constructors below, which append matched entries.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .exceptions import invariant
from .model import (
    BLOCK_DELIMITER,
    EMPTY_STYLE,
    SOFT_NEWLINE,
    SPACE,
    BlockSpec,
    StyleSet,
    clamp_depth,
)


@dataclass
class Chunk:
    text: str = ""
    inlines: List[StyleSet] = field(default_factory=list)
    entities: List[Optional[str]] = field(default_factory=list)
    blocks: List[BlockSpec] = field(default_factory=list)

    def __post_init__(self):
        invariant(
            len(self.text) == len(self.inlines) == len(self.entities),
            f"Chunk sequences out of alignment: text={len(self.text)} "
            f"inlines={len(self.inlines)} entities={len(self.entities)}"
        )

    @classmethod
    def empty(cls) -> 'Chunk':
        return cls()

    @classmethod
    def from_text(cls, text: str, style: StyleSet = EMPTY_STYLE,
                  entity: Optional[str] = None) -> 'Chunk':
        """Chunk where every character shares one style and one entity."""
        return cls(
            text=text,
            inlines=[style] * len(text),
            entities=[entity] * len(text),
        )

    @classmethod
    def whitespace(cls, entity: Optional[str] = None) -> 'Chunk':
        return cls(text=SPACE, inlines=[EMPTY_STYLE], entities=[entity or None])

    @classmethod
    def soft_newline(cls) -> 'Chunk':
        return cls(text=SOFT_NEWLINE, inlines=[EMPTY_STYLE], entities=[None])

    @classmethod
    def block_divider(cls, block_type: str, depth: int) -> 'Chunk':
        return cls(
            text=BLOCK_DELIMITER,
            inlines=[EMPTY_STYLE],
            entities=[None],
            blocks=[BlockSpec(type=block_type, depth=clamp_depth(depth))],
        )

    def starts_with_delimiter(self) -> bool:
        return self.text[:1] == BLOCK_DELIMITER

    def ends_with_delimiter(self) -> bool:
        return self.text[-1:] == BLOCK_DELIMITER

    def drop_first(self) -> 'Chunk':
        """Copy without the first character; block descriptors are kept."""
        return Chunk(
            text=self.text[1:],
            inlines=self.inlines[1:],
            entities=self.entities[1:],
            blocks=list(self.blocks),
        )

    def drop_last(self, drop_block: bool = True) -> 'Chunk':
        """Copy without the last character and, optionally, the last block."""
        return Chunk(
            text=self.text[:-1],
            inlines=self.inlines[:-1],
            entities=self.entities[:-1],
            blocks=self.blocks[:-1] if drop_block else list(self.blocks),
        )

    def block_segments(self) -> List[str]:
        return self.text.split(BLOCK_DELIMITER)


class ChunkBuilder:
    """
    Mutable Chunk accumulator.

    append() applies the boundary clean-up described on join_chunks, extending
    the sequences in place, so folding many siblings stays linear.
    """

    def __init__(self, start: Optional[Chunk] = None):
        self._chars: List[str] = []
        self._inlines: List[StyleSet] = []
        self._entities: List[Optional[str]] = []
        self._blocks: List[BlockSpec] = []
        if start is not None:
            self._extend(start, 0)

    def _extend(self, chunk: Chunk, skip: int) -> None:
        self._chars.extend(chunk.text[skip:])
        self._inlines.extend(chunk.inlines[skip:])
        self._entities.extend(chunk.entities[skip:])
        self._blocks.extend(chunk.blocks)

    def append(self, b: Chunk) -> 'ChunkBuilder':
        last_in_a = self._chars[-1] if self._chars else ''
        first_in_b = b.text[:1]

        if last_in_a == BLOCK_DELIMITER and first_in_b == BLOCK_DELIMITER:
            self._chars.pop()
            self._inlines.pop()
            self._entities.pop()
            if self._blocks:
                self._blocks.pop()

        skip = 0
        # Kill whitespace after blocks
        if last_in_a == BLOCK_DELIMITER:
            if b.text in (SPACE, SOFT_NEWLINE):
                return self
            if first_in_b in (SPACE, SOFT_NEWLINE):
                skip = 1

        self._extend(b, skip)
        return self

    def build(self) -> Chunk:
        return Chunk(
            text=''.join(self._chars),
            inlines=list(self._inlines),
            entities=list(self._entities),
            blocks=list(self._blocks),
        )


def join_chunks(a: Chunk, b: Chunk) -> Chunk:
    """
    Concatenate two chunks, cleaning up where block boundaries meet.

    Sometimes two blocks touch in the DOM, so a trailing delimiter in a
    followed by a leading delimiter in b collapses into one. Whitespace
    right after a block boundary is dropped: a lone space or newline chunk
    disappears, a leading space or newline is stripped from b.

    Args:
        a: Chunk accumulated so far
        b: Chunk produced for the next node

    Returns:
        New Chunk; neither argument is modified
    """
    return ChunkBuilder(a).append(b).build()
