"""
Configuration management.

Configuration file parsing, environment overlays and placeholder resolution.
"""

from sqldeploy.config.loader import Config, load_config
from sqldeploy.config.resolver import resolve_config

__all__ = [
    "load_config",
    "Config",
    "resolve_config",
]
