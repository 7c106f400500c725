"""
Configuration for htmlblocks.
"""

from .settings import AppConfig, ConverterConfig, LoggingConfig, load_config

__all__ = ["AppConfig", "ConverterConfig", "LoggingConfig", "load_config"]
