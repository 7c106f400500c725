"""
Tests for raw and HTML serialization of content blocks.
"""

import json

import pytest

from htmlblocks.converter import convert_from_html
from htmlblocks.entities import EntityRegistry
from htmlblocks.export import blocks_to_html, convert_to_raw, get_inline_style_ranges
from htmlblocks.model import CharacterMetadata, ContentBlock, InlineStyle


def convert(html):
    registry = EntityRegistry()
    return convert_from_html(html, entity_registry=registry), registry


def summary(blocks):
    return [(block.type, block.depth, block.text) for block in blocks]


def test_inline_style_ranges_coalesce_runs():
    bold, italic = InlineStyle.BOLD, InlineStyle.ITALIC
    block = ContentBlock(key='k', type='unstyled', text='abcde', character_list=[
        CharacterMetadata((bold,)),
        CharacterMetadata((bold, italic)),
        CharacterMetadata((italic,)),
        CharacterMetadata(()),
        CharacterMetadata((bold,)),
    ])
    assert get_inline_style_ranges(block) == [
        {'offset': 0, 'length': 2, 'style': 'BOLD'},
        {'offset': 4, 'length': 1, 'style': 'BOLD'},
        {'offset': 1, 'length': 2, 'style': 'ITALIC'},
    ]


def test_convert_to_raw():
    blocks, registry = convert('<h1>Title</h1><ul><li>see <a href="https://a.example/">this</a></li></ul>')
    raw = convert_to_raw(blocks, registry)

    assert [block['type'] for block in raw['blocks']] == ['header-one', 'unordered-list-item']
    item = raw['blocks'][1]
    assert item['text'] == 'see this'
    assert item['entityRanges'] == [{'offset': 4, 'length': 4, 'key': 0}]
    assert item['inlineStyleRanges'] == []
    assert raw['entityMap'] == {
        '0': {'type': 'LINK', 'mutability': 'MUTABLE', 'data': {'url': 'https://a.example/'}},
    }
    # JSON serializable as-is
    assert json.loads(json.dumps(raw)) == raw


def test_blocks_to_html_groups_list_items():
    blocks, registry = convert("<ul><li>a</li><li>b<ol><li>c</li></ol></li></ul><h2>t</h2>")
    html = blocks_to_html(blocks, registry)
    assert html == "<ul><li>a</li><li>b<ol><li>c</li></ol></li></ul><h2>t</h2>"


def test_blocks_to_html_inline_markup():
    blocks, registry = convert('<div><b>bold</b> <a href="https://a.example/">link</a> x<br>y</div>')
    html = blocks_to_html(blocks, registry)
    assert html == '<div><b>bold</b> <a href="https://a.example/">link</a> x<br>y</div>'


ROUND_TRIP_CASES = [
    "plain text",
    "<div>one</div><div>two</div><div>three</div>",
    "<h1>Title</h1><div>a</div><div>b</div><ul><li>c</li></ul>",
    "<h1>T</h1>x<br><br>y",
    "<ol><li>a<ul><li>b<ul><li>c</li></ul></li></ul></li><li>d</li></ol><blockquote>q</blockquote>",
    "intro<h3>head</h3><pre>x = 1\ny = 2</pre>",
    '<p>Hello <b>bold <i>both</i></b> <u>u</u> <s>s</s> <code>c</code></p>',
    '<h2>see <a href="https://example.com/docs">docs</a></h2>',
]


@pytest.mark.parametrize("html", ROUND_TRIP_CASES)
def test_round_trip_preserves_blocks(html):
    blocks, registry = convert(html)
    again, registry_again = convert(blocks_to_html(blocks, registry))

    assert summary(again) == summary(blocks)
    assert [[meta.style for meta in block.character_list] for block in again] == \
        [[meta.style for meta in block.character_list] for block in blocks]

    urls = [registry.get(meta.entity).data['url'] if meta.entity else None
            for block in blocks for meta in block.character_list]
    urls_again = [registry_again.get(meta.entity).data['url'] if meta.entity else None
                  for block in again for meta in block.character_list]
    assert urls_again == urls
