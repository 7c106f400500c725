"""
Serialization of converted content blocks.

- convert_to_raw: JSON-ready dictionary with style and entity ranges
- blocks_to_html: HTML markup (built with lxml) that converts back into
  the same block types, depths and text
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from lxml import etree

from .block_render_map import (
    DEFAULT_BLOCK_RENDER_MAP,
    UNSTYLED,
    BlockRenderMap,
    get_block_map_supported_tags,
)
from .entities import LINK, EntityRegistry, get_registry
from .model import SOFT_NEWLINE, ContentBlock, InlineStyle, StyleSet

STYLE_TAGS: Dict[InlineStyle, str] = {
    InlineStyle.BOLD: 'b',
    InlineStyle.ITALIC: 'i',
    InlineStyle.UNDERLINE: 'u',
    InlineStyle.STRIKETHROUGH: 's',
    InlineStyle.CODE: 'code',
}


def _runs(values: Sequence) -> Iterator[Tuple[int, int, object]]:
    """Yield (offset, length, value) for maximal runs of equal values."""
    start = 0
    for index in range(1, len(values) + 1):
        if index == len(values) or values[index] != values[start]:
            yield start, index - start, values[start]
            start = index


def get_inline_style_ranges(block: ContentBlock) -> List[dict]:
    """Coalesced style ranges of a block, grouped by style token."""
    tokens: List[InlineStyle] = []
    for meta in block.character_list:
        for token in meta.style:
            if token not in tokens:
                tokens.append(token)

    ranges = []
    for token in tokens:
        flags = [meta.has_style(token) for meta in block.character_list]
        for offset, length, present in _runs(flags):
            if present:
                ranges.append({'offset': offset, 'length': length, 'style': token.value})
    return ranges


def get_entity_ranges(block: ContentBlock) -> List[Tuple[int, int, str]]:
    """(offset, length, entity key) for each run of one entity."""
    entities = [meta.entity for meta in block.character_list]
    return [
        (offset, length, entity)
        for offset, length, entity in _runs(entities)
        if entity is not None
    ]


def convert_to_raw(blocks: List[ContentBlock],
                   registry: Optional[EntityRegistry] = None) -> dict:
    """
    Convert blocks into the raw (JSON-ready) document structure.

    Entity keys are renumbered from 0 in order of first use.

    Args:
        blocks: Converted content blocks
        registry: Registry the entity keys belong to (default: process-wide registry)

    Returns:
        {'blocks': [...], 'entityMap': {...}}
    """
    registry = registry if registry is not None else get_registry()
    entity_map: Dict[str, dict] = {}
    key_map: Dict[str, int] = {}

    raw_blocks = []
    for block in blocks:
        entity_ranges = []
        for offset, length, entity_key in get_entity_ranges(block):
            if entity_key not in key_map:
                key_map[entity_key] = len(key_map)
                entity_map[str(key_map[entity_key])] = registry.get(entity_key).to_dict()
            entity_ranges.append({'offset': offset, 'length': length, 'key': key_map[entity_key]})

        raw_blocks.append({
            'key': block.key,
            'text': block.text,
            'type': block.type,
            'depth': block.depth,
            'inlineStyleRanges': get_inline_style_ranges(block),
            'entityRanges': entity_ranges,
            'data': {},
        })

    return {'blocks': raw_blocks, 'entityMap': entity_map}


def _append_text(parent: etree._Element, text: str) -> None:
    """Append text after the last child of parent (or as its text)."""
    if not text:
        return
    if len(parent) == 0:
        parent.text = (parent.text or '') + text
    else:
        parent[-1].tail = (parent[-1].tail or '') + text


def _append_inline(parent: etree._Element, text: str) -> None:
    """Append text, turning soft newlines into <br> elements."""
    lines = text.split(SOFT_NEWLINE)
    for index, line in enumerate(lines):
        if index > 0:
            etree.SubElement(parent, 'br')
        _append_text(parent, line)


def _write_block_content(elem: etree._Element, block: ContentBlock,
                         registry: EntityRegistry) -> None:
    """Write the text of a block into elem with inline markup."""
    keys: List[Tuple[StyleSet, Optional[str]]] = [
        (meta.style, meta.entity) for meta in block.character_list
    ]
    for offset, length, (style, entity_key) in _runs(keys):
        target = elem
        if entity_key is not None:
            entity = registry.get(entity_key)
            if entity.type == LINK and entity.data.get('url'):
                target = etree.SubElement(target, 'a', href=entity.data['url'])
        for token in style:
            target = etree.SubElement(target, STYLE_TAGS[token])
        _append_inline(target, block.text[offset:offset + length])


@dataclass
class _OpenWrapper:
    tag: str
    depth: int
    element: etree._Element


def blocks_to_html(blocks: List[ContentBlock],
                   registry: Optional[EntityRegistry] = None,
                   block_render_map: BlockRenderMap = DEFAULT_BLOCK_RENDER_MAP) -> str:
    """
    Serialize blocks to HTML.

    Blocks with a wrapper (list items) are grouped into wrapper elements,
    one nesting level per depth. When the output contains semantic block
    elements, unstyled blocks would otherwise run together on the way back
    in, so consecutive unstyled blocks are separated by an empty block
    element.

    Args:
        blocks: Converted content blocks
        registry: Registry holding the blocks' entities (default: process-wide registry)
        block_render_map: Block type -> BlockRenderConfig mapping

    Returns:
        HTML markup
    """
    registry = registry if registry is not None else get_registry()
    unstyled_config = block_render_map[UNSTYLED]
    supported_tags = get_block_map_supported_tags(block_render_map)

    configs = [block_render_map.get(block.type, unstyled_config) for block in blocks]
    semantic = any(config.element in supported_tags for config in configs)

    container = etree.Element('body')
    stack: List[_OpenWrapper] = []
    previous_unstyled = False

    for block, config in zip(blocks, configs):
        is_unstyled = config.element == unstyled_config.element

        if config.wrapper:
            depth = block.depth
            while stack and (stack[-1].depth > depth or
                             (stack[-1].depth == depth and stack[-1].tag != config.wrapper)):
                stack.pop()
            level = stack[-1].depth + 1 if stack else 0
            while level <= depth:
                if stack:
                    parent = stack[-1].element
                    if len(parent):
                        parent = parent[-1]
                else:
                    parent = container
                stack.append(_OpenWrapper(config.wrapper, level, etree.SubElement(parent, config.wrapper)))
                level += 1
            elem = etree.SubElement(stack[-1].element, config.element)
        else:
            stack = []
            if semantic and is_unstyled and previous_unstyled:
                etree.SubElement(container, supported_tags[0])
            elem = etree.SubElement(container, config.element)

        _write_block_content(elem, block, registry)
        previous_unstyled = is_unstyled and not config.wrapper

    return ''.join(
        etree.tostring(child, method='html', encoding='unicode', with_tail=True)
        for child in container
    )
