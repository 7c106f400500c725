"""
Block render map and block type resolution.

The block render map associates each block type name with the HTML element
used to render it and, for list items, the wrapper element. It is read in
reverse here: given a tag found in the source HTML, which block type does
it start?
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional

from .exceptions import BlockRenderMapError


UNSTYLED = 'unstyled'
UNORDERED_LIST_ITEM = 'unordered-list-item'
ORDERED_LIST_ITEM = 'ordered-list-item'


@dataclass(frozen=True)
class BlockRenderConfig:
    """How one block type renders to HTML"""
    element: str
    wrapper: Optional[str] = None


BlockRenderMap = Mapping[str, BlockRenderConfig]

DEFAULT_BLOCK_RENDER_MAP: Dict[str, BlockRenderConfig] = {
    'header-one': BlockRenderConfig('h1'),
    'header-two': BlockRenderConfig('h2'),
    'header-three': BlockRenderConfig('h3'),
    'header-four': BlockRenderConfig('h4'),
    'header-five': BlockRenderConfig('h5'),
    'header-six': BlockRenderConfig('h6'),
    'blockquote': BlockRenderConfig('blockquote'),
    'code-block': BlockRenderConfig('pre'),
    'atomic': BlockRenderConfig('figure'),
    UNORDERED_LIST_ITEM: BlockRenderConfig('li', wrapper='ul'),
    ORDERED_LIST_ITEM: BlockRenderConfig('li', wrapper='ol'),
    UNSTYLED: BlockRenderConfig('div'),
}


def validate_block_render_map(block_render_map: BlockRenderMap) -> None:
    """Raise BlockRenderMapError unless the map is usable for conversion."""
    if UNSTYLED not in block_render_map:
        raise BlockRenderMapError("Block render map must define an 'unstyled' block type")
    for block_type, config in block_render_map.items():
        if not isinstance(config, BlockRenderConfig):
            raise BlockRenderMapError(
                f"Block type '{block_type}' must map to a BlockRenderConfig, got {type(config).__name__}"
            )
        if not config.element:
            raise BlockRenderMapError(f"Block type '{block_type}' has no element tag")


def get_block_map_supported_tags(block_render_map: BlockRenderMap) -> List[str]:
    """
    Sorted, de-duplicated element tags of the map, excluding the tag used
    for unstyled blocks.
    """
    unstyled_element = block_render_map[UNSTYLED].element
    tags = {
        config.element for config in block_render_map.values()
        if config.element and config.element != unstyled_element
    }
    return sorted(tags)


def get_list_block_type(tag: str, last_list: Optional[str]) -> Optional[str]:
    if tag == 'li':
        return ORDERED_LIST_ITEM if last_list == 'ol' else UNORDERED_LIST_ITEM
    return None


# Disambiguation rules for tags shared by several block types, tried in order
MULTI_MATCH_EXTRACTORS: List[Callable[[str, Optional[str]], Optional[str]]] = [
    get_list_block_type,
]


def get_multi_matched_type(tag: str, last_list: Optional[str],
                           extractors=MULTI_MATCH_EXTRACTORS) -> Optional[str]:
    for extractor in extractors:
        match_type = extractor(tag, last_list)
        if match_type:
            return match_type
    return None


def get_block_type_for_tag(tag: str, last_list: Optional[str],
                           block_render_map: BlockRenderMap) -> str:
    """
    Resolve the block type started by an HTML tag.

    Args:
        tag: Lower-case tag name
        last_list: Enclosing list tag ('ul', 'ol') or None
        block_render_map: Block render map to search

    Returns:
        Block type name; 'unstyled' when nothing (or nothing unambiguous) matches
    """
    matched_types = sorted({
        block_type for block_type, config in block_render_map.items()
        if config.element == tag or config.wrapper == tag
    })

    if not matched_types:
        return UNSTYLED
    if len(matched_types) == 1:
        return matched_types[0]
    return get_multi_matched_type(tag, last_list) or UNSTYLED
