"""
Tests for the htmlblocks command-line entry point.
"""

import io
import json
import logging

import pytest

from htmlblocks.cli import main


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    """Run each test in an empty directory and restore the package logger."""
    monkeypatch.chdir(tmp_path)
    logger = logging.getLogger('htmlblocks')
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield tmp_path
    for handler in logger.handlers:
        if handler not in saved[0]:
            handler.close()
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def test_json_output_to_stdout(tmp_path, capsys):
    source = tmp_path / "in.html"
    source.write_text('<h1>Title</h1><ul><li><a href="https://a.example/">x</a></li></ul>', encoding='utf-8')

    assert main([str(source)]) == 0

    raw = json.loads(capsys.readouterr().out)
    assert [(b['type'], b['text']) for b in raw['blocks']] == [
        ('header-one', 'Title'),
        ('unordered-list-item', 'x'),
    ]
    assert raw['entityMap']['0']['data'] == {'url': 'https://a.example/'}


def test_html_output_to_file(tmp_path):
    source = tmp_path / "in.html"
    source.write_text("<div>a</div><div><b>b</b></div>", encoding='utf-8')
    target = tmp_path / "out" / "result.html"

    assert main([str(source), '-f', 'html', '-o', str(target)]) == 0
    assert target.read_text(encoding='utf-8') == "<div>a</div><div><b>b</b></div>\n"


def test_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr('sys.stdin', io.StringIO("a<br><br>b"))

    assert main(['-']) == 0

    raw = json.loads(capsys.readouterr().out)
    assert [b['text'] for b in raw['blocks']] == ['a\n', 'b']


def test_missing_input_file(capsys):
    assert main(['nope.html']) == 1
    assert "input file not found" in capsys.readouterr().err


def test_config_error(tmp_path, capsys):
    (tmp_path / "bad.yaml").write_text("output_format: xml\n", encoding='utf-8')
    source = tmp_path / "in.html"
    source.write_text("x", encoding='utf-8')

    assert main([str(source), '-c', 'bad.yaml']) == 1
    assert "output_format" in capsys.readouterr().err


def test_dom_builder_failure_exit_code(tmp_path, capsys):
    (tmp_path / "htmlblocks.yaml").write_text("converter:\n  dom_parser: no-such-parser\n", encoding='utf-8')
    source = tmp_path / "in.html"
    source.write_text("x", encoding='utf-8')

    assert main([str(source)]) == 2
    assert "could not build a document" in capsys.readouterr().err


def test_config_indent_and_verbose(tmp_path, capsys):
    (tmp_path / "htmlblocks.yaml").write_text("indent: 0\n", encoding='utf-8')
    source = tmp_path / "in.html"
    source.write_text("x", encoding='utf-8')

    assert main([str(source), '-v']) == 0

    captured = capsys.readouterr()
    assert json.loads(captured.out)['blocks'][0]['text'] == 'x'
    assert captured.out.startswith('{\n"blocks"')
    assert logging.getLogger('htmlblocks').level == logging.DEBUG
    assert "Converted 1 block(s)" in captured.err
