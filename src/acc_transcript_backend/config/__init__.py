"""
Configuration management module.

Provides YAML-based configuration for the API-key table and transcript fixture.
"""

from .config_parser import ConfigParser
from .config_schema import ApiKeyEntry, AuthConfig, TranscriptServerConfig

__all__ = [
    "ApiKeyEntry",
    "AuthConfig",
    "ConfigParser",
    "TranscriptServerConfig",
]
