"""
htmlblocks: convert HTML into a flat sequence of styled content blocks.

Nested markup (paragraphs, lists, headings, inline formatting, links) is
flattened into blocks carrying a type, an indentation depth, the block text
and per-character style and entity metadata.
"""

from .block_render_map import DEFAULT_BLOCK_RENDER_MAP, BlockRenderConfig
from .converter import convert_from_html, get_chunk_for_html
from .dom import build_safe_body
from .entities import EntityMutability, EntityRegistry, get_registry, reset_registry
from .exceptions import (
    BlockRenderMapError,
    ConfigError,
    HTMLBlocksError,
    InvalidEntityError,
    InvariantViolation,
    UnknownEntityError,
)
from .export import blocks_to_html, convert_to_raw
from .model import CharacterMetadata, ContentBlock, InlineStyle

__version__ = "0.1.0"

__all__ = [
    "convert_from_html",
    "get_chunk_for_html",
    "build_safe_body",
    "blocks_to_html",
    "convert_to_raw",
    "BlockRenderConfig",
    "DEFAULT_BLOCK_RENDER_MAP",
    "EntityMutability",
    "EntityRegistry",
    "get_registry",
    "reset_registry",
    "CharacterMetadata",
    "ContentBlock",
    "InlineStyle",
    "HTMLBlocksError",
    "ConfigError",
    "BlockRenderMapError",
    "InvalidEntityError",
    "InvariantViolation",
    "UnknownEntityError",
]
