"""
Configuration management for htmlblocks.
"""

import logging

import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from ..block_render_map import (
    DEFAULT_BLOCK_RENDER_MAP,
    BlockRenderConfig,
    validate_block_render_map,
)
from ..dom import DEFAULT_PARSER
from ..exceptions import ConfigError

OUTPUT_FORMATS = ("json", "html")


@dataclass
class ConverterConfig:
    """Conversion configuration."""
    block_render_map: Dict[str, BlockRenderConfig] = field(
        default_factory=lambda: dict(DEFAULT_BLOCK_RENDER_MAP)
    )
    dom_parser: str = DEFAULT_PARSER  # BeautifulSoup tree builder


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class AppConfig:
    """Main application configuration."""
    converter: ConverterConfig = field(default_factory=ConverterConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output_format: str = "json"  # "json" or "html"
    indent: int = 2


def parse_block_render_map(data: dict) -> Dict[str, BlockRenderConfig]:
    """
    Parse block render map entries of the form {type: {element, wrapper}}.

    Args:
        data: Mapping loaded from YAML

    Returns:
        Dictionary of block type -> BlockRenderConfig
    """
    if not isinstance(data, dict):
        raise ConfigError("block_render_map must be a mapping")

    block_render_map = {}
    for block_type, entry in data.items():
        if not isinstance(entry, dict):
            raise ConfigError(f"block_render_map entry '{block_type}' must be a mapping")
        element = entry.get('element')
        if not element:
            raise ConfigError(f"block_render_map entry '{block_type}' has no element")
        block_render_map[str(block_type)] = BlockRenderConfig(
            element=str(element).lower(),
            wrapper=str(entry['wrapper']).lower() if entry.get('wrapper') else None,
        )
    return block_render_map


def load_config(config_path: Path) -> AppConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config.yaml file

    Returns:
        AppConfig instance
    """
    if not config_path.exists():
        # Return default configuration
        return AppConfig()

    with open(config_path, 'r') as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Top level of {config_path} must be a mapping")

    # Parse converter config
    conv_data = data.get('converter', {}) or {}
    block_render_map = dict(DEFAULT_BLOCK_RENDER_MAP)
    if 'block_render_map' in conv_data:
        configured = parse_block_render_map(conv_data['block_render_map'])
        if conv_data.get('extend_block_render_map', False):
            block_render_map.update(configured)
        else:
            block_render_map = configured
    validate_block_render_map(block_render_map)

    converter_config = ConverterConfig(
        block_render_map=block_render_map,
        dom_parser=conv_data.get('dom_parser', DEFAULT_PARSER),
    )

    # Parse logging config
    log_data = data.get('logging', {}) or {}
    logging_config = LoggingConfig(
        level=str(log_data.get('level', 'INFO')).upper(),
        file=log_data.get('file'),
    )
    if not isinstance(logging.getLevelName(logging_config.level), int):
        raise ConfigError(f"Unknown logging level: {logging_config.level!r}")

    output_format = data.get('output_format', 'json')
    if output_format not in OUTPUT_FORMATS:
        raise ConfigError(f"Unknown output_format: {output_format!r}")

    indent = data.get('indent', 2)
    if not isinstance(indent, int) or isinstance(indent, bool) or indent < 0:
        raise ConfigError(f"indent must be a non-negative integer, got {indent!r}")

    return AppConfig(
        converter=converter_config,
        logging=logging_config,
        output_format=output_format,
        indent=indent,
    )
