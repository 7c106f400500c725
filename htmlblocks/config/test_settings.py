"""
Tests for YAML configuration loading.
"""

import tempfile
from pathlib import Path

import pytest

from htmlblocks.block_render_map import DEFAULT_BLOCK_RENDER_MAP, BlockRenderConfig
from htmlblocks.config.settings import AppConfig, load_config
from htmlblocks.exceptions import BlockRenderMapError, ConfigError


def write_config(tmpdir: str, text: str) -> Path:
    path = Path(tmpdir) / "htmlblocks.yaml"
    path.write_text(text, encoding='utf-8')
    return path


def test_missing_file_gives_defaults():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = load_config(Path(tmpdir) / "absent.yaml")
    assert config == AppConfig()
    assert config.converter.block_render_map == DEFAULT_BLOCK_RENDER_MAP
    assert config.converter.dom_parser == 'html.parser'
    assert config.output_format == 'json'


def test_full_config():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_config(tmpdir, """
converter:
  dom_parser: lxml
  block_render_map:
    unstyled: {element: div}
    paragraph: {element: P}
    bullet: {element: li, wrapper: ul}
logging:
  level: debug
  file: logs/htmlblocks.log
output_format: html
indent: 4
""")
        config = load_config(path)

    assert config.converter.dom_parser == 'lxml'
    assert config.converter.block_render_map == {
        'unstyled': BlockRenderConfig('div'),
        'paragraph': BlockRenderConfig('p'),
        'bullet': BlockRenderConfig('li', wrapper='ul'),
    }
    assert config.logging.level == 'DEBUG'
    assert config.logging.file == 'logs/htmlblocks.log'
    assert config.output_format == 'html'
    assert config.indent == 4


def test_extend_block_render_map():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_config(tmpdir, """
converter:
  extend_block_render_map: true
  block_render_map:
    paragraph: {element: p}
""")
        config = load_config(path)

    block_render_map = config.converter.block_render_map
    assert block_render_map['paragraph'] == BlockRenderConfig('p')
    assert block_render_map['header-one'] == BlockRenderConfig('h1')
    assert len(block_render_map) == len(DEFAULT_BLOCK_RENDER_MAP) + 1


@pytest.mark.parametrize("text, error", [
    ("converter:\n  block_render_map:\n    header-one: {element: h1}\n", BlockRenderMapError),
    ("converter:\n  block_render_map:\n    unstyled: div\n", ConfigError),
    ("converter:\n  block_render_map:\n    unstyled: {wrapper: ul}\n", ConfigError),
    ("output_format: xml\n", ConfigError),
    ("indent: -1\n", ConfigError),
    ("logging:\n  level: chatty\n", ConfigError),
    ("- just\n- a list\n", ConfigError),
    ("key: [unclosed\n", ConfigError),
])
def test_invalid_config(text, error):
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_config(tmpdir, text)
        with pytest.raises(error):
            load_config(path)
