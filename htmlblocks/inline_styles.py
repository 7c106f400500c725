"""
Inline style extraction.

Maps formatting tags (<b>, <em>, <u>, ...) and a few inline CSS
declarations to InlineStyle tokens. Styles only accumulate on the way down
the tree; the caller keeps the parent's style set for the next sibling.
"""

from typing import Dict, Mapping, Optional

from .model import InlineStyle, StyleSet, add_style

INLINE_TAGS: Dict[str, InlineStyle] = {
    'b': InlineStyle.BOLD,
    'code': InlineStyle.CODE,
    'del': InlineStyle.STRIKETHROUGH,
    'em': InlineStyle.ITALIC,
    'i': InlineStyle.ITALIC,
    's': InlineStyle.STRIKETHROUGH,
    'strike': InlineStyle.STRIKETHROUGH,
    'strong': InlineStyle.BOLD,
    'u': InlineStyle.UNDERLINE,
}

# (css property, exact value, token)
CSS_STYLE_RULES = [
    ('font-weight', 'bold', InlineStyle.BOLD),
    ('font-style', 'italic', InlineStyle.ITALIC),
    ('text-decoration', 'underline', InlineStyle.UNDERLINE),
    ('text-decoration', 'line-through', InlineStyle.STRIKETHROUGH),
]

_IMPORTANT = '!important'


def parse_style_attribute(style_str: Optional[str]) -> Dict[str, str]:
    """
    Parse a CSS style attribute into a dictionary.

    Property names and values are lower-cased and a trailing !important is
    dropped. Later declarations win, as in the browser.

    Args:
        style_str: CSS style string (e.g., "font-weight: bold; color: red")

    Returns:
        Dictionary of CSS properties and values
    """
    styles = {}
    if not style_str:
        return styles

    for prop in style_str.split(';'):
        prop = prop.strip()
        if ':' not in prop:
            continue
        key, value = prop.split(':', 1)
        key = key.strip().lower()
        value = value.strip().lower()
        if value.endswith(_IMPORTANT):
            value = value[:-len(_IMPORTANT)].strip()
        if key and value:
            styles[key] = value

    return styles


def process_inline_tag(tag: str, css: Optional[Mapping[str, str]],
                       current_style: StyleSet) -> StyleSet:
    """
    Add the style tokens implied by an element to the current style set.

    A tag listed in INLINE_TAGS contributes exactly its token. Any other
    element is checked against CSS_STYLE_RULES using its inline CSS.

    Args:
        tag: Lower-case tag name
        css: Parsed inline style declarations of the element, if any
        current_style: Style set inherited from the parent

    Returns:
        The (possibly extended) style set
    """
    token = INLINE_TAGS.get(tag)
    if token is not None:
        return add_style(current_style, token)

    if css:
        for prop, value, rule_token in CSS_STYLE_RULES:
            if css.get(prop) == value:
                current_style = add_style(current_style, rule_token)

    return current_style
