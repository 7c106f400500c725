"""
Safe DOM construction.

Parses an HTML string with BeautifulSoup and resolves the parse tree, once,
into plain node records the converter can walk without inspecting
BeautifulSoup objects:

- TextNode: character data
- ElementNode: tag name, children, parsed inline CSS and (for <a>) the href
- OtherNode: comments, doctypes, CDATA, processing instructions

Nothing is ever executed: the tree is only read, and elements that carry
scripts or other non-visual content are left out entirely.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from bs4 import BeautifulSoup, FeatureNotFound, NavigableString, Tag
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction

from .inline_styles import parse_style_attribute

logger = logging.getLogger(__name__)

DEFAULT_PARSER = 'html.parser'

DROPPED_TAGS = frozenset([
    'script', 'style', 'noscript', 'template', 'iframe', 'object', 'embed',
    'head', 'title', 'meta', 'link',
])

_OTHER_NODE_NAMES = [
    (Comment, '#comment'),
    (CData, '#cdata-section'),
    (ProcessingInstruction, '#processing-instruction'),
    (Doctype, '#doctype'),
    (Declaration, '#declaration'),
]


@dataclass
class TextNode:
    text: str

    @property
    def name(self) -> str:
        return '#text'


@dataclass
class ElementNode:
    tag: str
    children: List['Node'] = field(default_factory=list)
    style: Dict[str, str] = field(default_factory=dict)
    href: Optional[str] = None

    @property
    def name(self) -> str:
        return self.tag


@dataclass
class OtherNode:
    name: str


Node = Union[TextNode, ElementNode, OtherNode]


def _convert_node(node) -> Optional[Node]:
    """Resolve one BeautifulSoup node into a Node; elements get no children yet."""
    if isinstance(node, NavigableString):
        for string_cls, name in _OTHER_NODE_NAMES:
            if isinstance(node, string_cls):
                return OtherNode(name)
        return TextNode(str(node))

    if isinstance(node, Tag):
        tag_name = node.name.lower()
        if tag_name in DROPPED_TAGS:
            logger.debug(f"Dropping <{tag_name}> element")
            return None

        href = None
        if tag_name == 'a':
            href = node.get('href')
            if isinstance(href, list):
                href = ' '.join(href)

        style = node.get('style')
        if isinstance(style, list):
            style = ' '.join(style)

        return ElementNode(
            tag=tag_name,
            style=parse_style_attribute(style),
            href=href,
        )

    return None


def _convert_tree(source, root: ElementNode) -> ElementNode:
    """Fill root with the converted subtree of source, without recursion."""
    pending = [(source, root)]
    while pending:
        source_node, target = pending.pop()
        for child in source_node.children:
            converted = _convert_node(child)
            if converted is None:
                continue
            target.children.append(converted)
            if isinstance(converted, ElementNode):
                pending.append((child, converted))
    return root


def build_safe_body(html, parser: str = DEFAULT_PARSER) -> Optional[ElementNode]:
    """
    Build the root node for an HTML string.

    Args:
        html: HTML markup
        parser: BeautifulSoup tree builder name (default: html.parser)

    Returns:
        ElementNode for <body> (synthesized when the markup has none), or
        None when html is not a string or the tree builder is unavailable
    """
    if not isinstance(html, str):
        logger.warning(f"Cannot build DOM from {type(html).__name__}")
        return None

    try:
        soup = BeautifulSoup(html, parser)
    except FeatureNotFound:
        logger.warning(f"HTML tree builder not available: {parser}")
        return None

    body = soup.find('body')
    if body is not None:
        return _convert_tree(body, _convert_node(body))

    return _convert_tree(soup, ElementNode(tag='body'))
