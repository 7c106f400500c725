"""
Tests for inline style extraction from tags and inline CSS.
"""

from htmlblocks.inline_styles import INLINE_TAGS, parse_style_attribute, process_inline_tag
from htmlblocks.model import InlineStyle


def test_parse_style_attribute():
    styles = parse_style_attribute("Font-Weight: BOLD; color: red;; bogus; text-decoration:underline !important")
    assert styles == {
        'font-weight': 'bold',
        'color': 'red',
        'text-decoration': 'underline',
    }
    assert parse_style_attribute(None) == {}
    assert parse_style_attribute("") == {}


def test_tag_table():
    assert INLINE_TAGS['strong'] is InlineStyle.BOLD
    assert INLINE_TAGS['em'] is InlineStyle.ITALIC
    assert INLINE_TAGS['u'] is InlineStyle.UNDERLINE
    assert INLINE_TAGS['strike'] is InlineStyle.STRIKETHROUGH
    # <code> keeps its own token
    assert INLINE_TAGS['code'] is InlineStyle.CODE


def test_tag_adds_token_and_ignores_css():
    style = process_inline_tag('b', {'font-style': 'italic'}, ())
    assert style == (InlineStyle.BOLD,)


def test_tag_does_not_duplicate_existing_token():
    style = (InlineStyle.BOLD,)
    assert process_inline_tag('strong', {}, style) == style


def test_css_on_generic_element():
    css = parse_style_attribute("font-weight: bold; font-style: italic; text-decoration: line-through")
    style = process_inline_tag('span', css, ())
    assert style == (InlineStyle.BOLD, InlineStyle.ITALIC, InlineStyle.STRIKETHROUGH)


def test_css_values_must_match_exactly():
    css = parse_style_attribute("font-weight: 700; text-decoration: underline overline")
    assert process_inline_tag('span', css, ()) == ()


def test_styles_only_accumulate():
    parent = (InlineStyle.ITALIC,)
    child = process_inline_tag('span', {'font-weight': 'normal'}, parent)
    assert child == parent
    child = process_inline_tag('u', None, parent)
    assert child == (InlineStyle.ITALIC, InlineStyle.UNDERLINE)
    assert parent == (InlineStyle.ITALIC,)
