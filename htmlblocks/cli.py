#!/usr/bin/env python3
"""
Command-line entry point: convert an HTML file into content blocks.

Writes the raw JSON document (blocks + entity map) or the blocks
serialized back to HTML.
"""

import argparse
import json
import logging
import sys
from functools import partial
from pathlib import Path
from typing import List, Optional

from .config.settings import OUTPUT_FORMATS, load_config
from .converter import convert_from_html
from .dom import build_safe_body
from .entities import EntityRegistry
from .exceptions import ConfigError
from .export import blocks_to_html, convert_to_raw
from .utils.logger import setup_logger

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = 'htmlblocks.yaml'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Convert HTML into flat content blocks')
    parser.add_argument('input', nargs='?', default='-',
                        help='Input HTML file (default: stdin)')
    parser.add_argument('-o', '--output', help='Output file (default: stdout)')
    parser.add_argument('-c', '--config', default=DEFAULT_CONFIG,
                        help=f'YAML configuration file (default: {DEFAULT_CONFIG})')
    parser.add_argument('-f', '--format', choices=OUTPUT_FORMATS,
                        help='Output format (overrides config)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point"""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(Path(args.config))
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logger(config.logging, verbose=args.verbose)

    if args.input == '-':
        html = sys.stdin.read()
    else:
        input_path = Path(args.input)
        if not input_path.exists():
            print(f"Error: input file not found: {input_path}", file=sys.stderr)
            return 1
        html = input_path.read_text(encoding='utf-8')

    registry = EntityRegistry()
    block_render_map = config.converter.block_render_map
    blocks = convert_from_html(
        html,
        dom_builder=partial(build_safe_body, parser=config.converter.dom_parser),
        block_render_map=block_render_map,
        entity_registry=registry,
    )
    if blocks is None:
        print("Error: could not build a document from the input", file=sys.stderr)
        return 2
    logger.info(f"Converted {len(blocks)} block(s), {len(registry)} entit(y/ies)")

    output_format = args.format or config.output_format
    if output_format == 'html':
        result = blocks_to_html(blocks, registry, block_render_map) + '\n'
    else:
        result = json.dumps(convert_to_raw(blocks, registry),
                            indent=config.indent, ensure_ascii=False) + '\n'

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(result, encoding='utf-8')
        logger.info(f"Wrote {output_format} output to {output_path}")
    else:
        sys.stdout.write(result)

    return 0


if __name__ == '__main__':
    sys.exit(main())
