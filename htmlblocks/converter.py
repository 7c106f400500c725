"""
HTML to content block conversion.

The DOM tree is walked depth first with an explicit stack of open elements.
Each node yields a Chunk and the chunks of siblings are folded together
left to right, so nested markup collapses into one linear character stream
in which BLOCK_DELIMITER marks block boundaries. Text nodes never contribute
a BLOCK_DELIMITER of their own. The final stream is then cut into
ContentBlock objects.

Context handed down the tree:
- inline style set of the enclosing formatting elements
- enclosing list tag ('ul' / 'ol'); the walk starts inside a fake 'ul' at
  depth -1 so that top-level list items land at depth 0
- enclosing block tag, if a block has been opened
- active entity key (links)

The tag of the previously visited node lives on the TraversalContext,
which is created fresh for every conversion.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Set, Union
from urllib.parse import urlsplit, urlunsplit

from .block_render_map import (
    DEFAULT_BLOCK_RENDER_MAP,
    ORDERED_LIST_ITEM,
    UNORDERED_LIST_ITEM,
    UNSTYLED,
    BlockRenderMap,
    get_block_map_supported_tags,
    get_block_type_for_tag,
    validate_block_render_map,
)
from .chunk import Chunk, ChunkBuilder
from .dom import ElementNode, Node, OtherNode, TextNode, build_safe_body
from .entities import LINK, EntityMutability, EntityRegistry, get_registry
from .exceptions import invariant
from .inline_styles import process_inline_tag
from .model import (
    EMPTY_STYLE,
    SOFT_NEWLINE,
    SPACE,
    BlockSpec,
    CharacterMetadata,
    ContentBlock,
    StyleSet,
)
from .text_utils import generate_random_key, sanitize_draft_text

logger = logging.getLogger(__name__)

NBSP = '&nbsp;'

LINK_SCHEMES = ('http', 'https')

# Block tags used when the markup has no semantic block elements at all
FALLBACK_BLOCK_TAGS = ['div']

DOMBuilder = Callable[[str], Optional[ElementNode]]


@dataclass
class TraversalContext:
    """Per-conversion state shared by every gen_fragment call"""
    block_tags: List[str]
    block_render_map: BlockRenderMap
    entity_registry: EntityRegistry
    last_tag: Optional[str] = None


def normalize_html(html: str) -> str:
    """Trim, drop carriage returns and turn &nbsp; entities into spaces."""
    return html.strip().replace('\r', '').replace(NBSP, SPACE)


def contains_semantic_block_markup(html: str, block_tags: List[str]) -> bool:
    """
    Check to see if we have anything like <p> <blockquote> <h1>... to create
    block tags from. If we do, we can use those and ignore <div> tags. If we
    don't, we can treat <div> tags as meaningful (unstyled) blocks.
    """
    return any(f'<{tag}' in html for tag in block_tags)


def canonicalize_link(href: str) -> Optional[str]:
    """
    Canonical form of an absolute http(s) URL, or None for anything else.

    Scheme and host are lower-cased (user info is kept as written) and a
    bare host gets a '/' path.
    """
    try:
        parts = urlsplit(href.strip())
    except ValueError:
        return None

    scheme = parts.scheme.lower()
    if scheme not in LINK_SCHEMES or not parts.netloc:
        return None

    userinfo, at, hostport = parts.netloc.rpartition('@')
    netloc = userinfo + at + hostport.lower()
    path = parts.path or '/'
    return urlunsplit((scheme, netloc, path, parts.query, parts.fragment))


def has_valid_link_text(link: Node) -> bool:
    invariant(
        isinstance(link, ElementNode) and link.tag == 'a',
        'Link must be an anchor element.'
    )
    return canonicalize_link(link.href or '') is not None


def get_link_entity(node: Node, registry: EntityRegistry) -> Optional[str]:
    """Create a LINK entity for an <a> node with an http(s) href."""
    if node.name != 'a' or not getattr(node, 'href', None):
        return None

    if not has_valid_link_text(node):
        logger.debug(f"Ignoring link with unsupported href: {node.href!r}")
        return None

    url = canonicalize_link(node.href)
    return registry.create(LINK, EntityMutability.MUTABLE, {'url': url})


@dataclass
class _Frame:
    """An element whose children are still being folded"""
    node: ElementNode
    inline_style: StyleSet
    last_list: Optional[str]
    in_block: Optional[str]
    depth: int
    in_entity: Optional[str]
    builder: ChunkBuilder
    new_block: bool = False
    next_block_type: str = UNSTYLED
    index: int = 0


def _enter(node: Node,
           inline_style: StyleSet,
           last_list: Optional[str],
           in_block: Optional[str],
           depth: int,
           context: TraversalContext,
           in_entity: Optional[str]) -> Union[Chunk, _Frame]:
    """Chunk for a leaf node, or an open frame for an element with children."""
    node_name = node.name
    last_last_tag = context.last_tag

    # Base case
    if isinstance(node, TextNode):
        text = sanitize_draft_text(node.text)
        if text.strip() == '' and in_block != 'pre':
            return Chunk.whitespace(in_entity)
        if in_block != 'pre':
            # Can't use empty string because MSWord
            text = text.replace(SOFT_NEWLINE, SPACE)

        context.last_tag = node_name
        return Chunk.from_text(text, inline_style, in_entity)

    context.last_tag = node_name

    if isinstance(node, OtherNode):
        return Chunk.empty()

    # Two <br> in a row outside a styled block start a new paragraph
    if node_name == 'br':
        if last_last_tag == 'br' and (
            not in_block or
            get_block_type_for_tag(in_block, last_list, context.block_render_map) == UNSTYLED
        ):
            return Chunk.block_divider(UNSTYLED, depth)
        return Chunk.soft_newline()

    chunk = Chunk.empty()
    new_block = False
    next_block_type = UNSTYLED
    inline_style = process_inline_tag(node_name, node.style, inline_style)

    if node_name in ('ul', 'ol'):
        if last_list:
            depth += 1
        last_list = node_name

    if not in_block and node_name in context.block_tags:
        chunk = Chunk.block_divider(
            get_block_type_for_tag(node_name, last_list, context.block_render_map),
            depth
        )
        in_block = node_name
        new_block = True
    elif last_list and in_block == 'li' and node_name == 'li':
        chunk = Chunk.block_divider(
            get_block_type_for_tag(node_name, last_list, context.block_render_map),
            depth
        )
        in_block = node_name
        new_block = True
        next_block_type = UNORDERED_LIST_ITEM if last_list == 'ul' else ORDERED_LIST_ITEM

    return _Frame(
        node=node,
        inline_style=inline_style,
        last_list=last_list,
        in_block=in_block,
        depth=depth,
        in_entity=in_entity,
        builder=ChunkBuilder(chunk),
        new_block=new_block,
        next_block_type=next_block_type,
    )


def _fold_child(frame: _Frame, child_chunk: Chunk, context: TraversalContext) -> None:
    children = frame.node.children
    child = children[frame.index]
    frame.builder.append(child_chunk)

    # Put in a newline to break up blocks inside blocks
    has_sibling = frame.index + 1 < len(children)
    if has_sibling and frame.in_block and child.name in context.block_tags:
        frame.builder.append(Chunk.soft_newline())
    frame.index += 1


def gen_fragment(node: Node,
                 inline_style: StyleSet,
                 last_list: Optional[str],
                 in_block: Optional[str],
                 depth: int,
                 context: TraversalContext,
                 in_entity: Optional[str] = None) -> Chunk:
    """
    Convert a node and its subtree into a Chunk.

    The walk keeps its own stack of open elements, so nesting depth is not
    bounded by the interpreter's recursion limit. Children are visited left
    to right and each finished subtree is folded into its parent's chunk.

    Args:
        node: Node to convert
        inline_style: Style set inherited from enclosing elements
        last_list: Enclosing list tag ('ul' / 'ol')
        in_block: Tag of the enclosing block element, if any
        depth: Current list depth (clamped when a block divider is emitted)
        context: Per-conversion traversal context
        in_entity: Entity key of the enclosing link, if any

    Returns:
        Chunk for the subtree
    """
    entered = _enter(node, inline_style, last_list, in_block, depth, context, in_entity)
    if isinstance(entered, Chunk):
        return entered

    stack = [entered]
    while True:
        frame = stack[-1]
        if frame.index < len(frame.node.children):
            child = frame.node.children[frame.index]
            entity_id = get_link_entity(child, context.entity_registry)
            entered = _enter(
                child,
                frame.inline_style,
                frame.last_list,
                frame.in_block,
                frame.depth,
                context,
                entity_id or frame.in_entity,
            )
            if isinstance(entered, Chunk):
                _fold_child(frame, entered, context)
            else:
                stack.append(entered)
            continue

        if frame.new_block:
            frame.builder.append(Chunk.block_divider(frame.next_block_type, frame.depth))
        chunk = frame.builder.build()
        stack.pop()
        if not stack:
            return chunk
        _fold_child(stack[-1], chunk, context)


def get_chunk_for_html(html: str,
                       dom_builder: DOMBuilder = build_safe_body,
                       block_render_map: BlockRenderMap = DEFAULT_BLOCK_RENDER_MAP,
                       entity_registry: Optional[EntityRegistry] = None) -> Optional[Chunk]:
    """
    Convert HTML markup into a single Chunk with one BlockSpec per block.

    Returns:
        The assembled Chunk, or None when the DOM builder produced no root
    """
    if not isinstance(html, str):
        raise TypeError(f"html must be a string, got {type(html).__name__}")

    validate_block_render_map(block_render_map)
    html = normalize_html(html)
    supported_block_tags = get_block_map_supported_tags(block_render_map)

    safe_body = dom_builder(html)
    if safe_body is None:
        logger.warning("DOM builder returned no root node; nothing to convert")
        return None

    # Sometimes we aren't dealing with content that contains nice semantic
    # tags. In this case, use divs to separate everything out into paragraphs
    # and hope for the best.
    if contains_semantic_block_markup(html, supported_block_tags):
        working_blocks = supported_block_tags
    else:
        working_blocks = FALLBACK_BLOCK_TAGS
        logger.debug("No semantic block markup found, treating <div> as block boundary")
    logger.debug(f"Working block tags: {working_blocks}")

    context = TraversalContext(
        block_tags=working_blocks,
        block_render_map=block_render_map,
        entity_registry=entity_registry if entity_registry is not None else get_registry(),
    )

    # Start with -1 depth to offset the fake 'ul' passed in as enclosing list
    chunk = gen_fragment(safe_body, EMPTY_STYLE, 'ul', None, -1, context)

    # Join with previous block to prevent weirdness on paste
    if chunk.starts_with_delimiter():
        chunk = chunk.drop_first()

    # Kill block delimiter at the end
    if chunk.ends_with_delimiter():
        chunk = chunk.drop_last(drop_block=True)

    blocks = list(chunk.blocks)

    # If we saw no block tags, put an unstyled one in
    if not blocks:
        blocks.append(BlockSpec(type=UNSTYLED, depth=0))

    # Text before the first block tag needs an unstyled block of its own
    if len(chunk.block_segments()) == len(blocks) + 1:
        blocks.insert(0, BlockSpec(type=UNSTYLED, depth=0))

    return Chunk(
        text=chunk.text,
        inlines=chunk.inlines,
        entities=chunk.entities,
        blocks=blocks,
    )


def convert_from_html(html: str,
                      dom_builder: DOMBuilder = build_safe_body,
                      block_render_map: BlockRenderMap = DEFAULT_BLOCK_RENDER_MAP,
                      entity_registry: Optional[EntityRegistry] = None) -> Optional[List[ContentBlock]]:
    """
    Convert HTML markup into content blocks.

    Be sure the DOM builder passed here never executes code found in the
    markup; the default one only reads the BeautifulSoup parse tree.

    Args:
        html: HTML markup
        dom_builder: Callable returning the root node for a string, or None
        block_render_map: Block type -> BlockRenderConfig mapping
        entity_registry: Registry for link entities (default: process-wide registry)

    Returns:
        Ordered list of ContentBlock, or None when no DOM could be built
    """
    chunk = get_chunk_for_html(html, dom_builder, block_render_map, entity_registry)
    if chunk is None:
        return None

    content_blocks = []
    seen_keys: Set[str] = set()
    start = 0
    for index, text_block in enumerate(chunk.block_segments()):
        # Make absolutely certain that our text is acceptable
        text_block = sanitize_draft_text(text_block)
        end = start + len(text_block)
        character_list = [
            CharacterMetadata(style=style, entity=entity or None)
            for style, entity in zip(chunk.inlines[start:end], chunk.entities[start:end])
        ]
        start = end + 1

        block_spec = chunk.blocks[index]
        content_blocks.append(ContentBlock(
            key=generate_random_key(seen_keys),
            type=block_spec.type,
            depth=block_spec.depth,
            text=text_block,
            character_list=character_list,
        ))

    return content_blocks
