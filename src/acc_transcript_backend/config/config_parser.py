"""
Config Parser - Simple YAML-based configuration management.
"""

import logging
from pathlib import Path

from ruamel.yaml import YAML

from .config_schema import TranscriptServerConfig

logger = logging.getLogger(__name__)

yaml = YAML(typ="safe")


class ConfigParser:
    """Simple configuration parser for config.yaml using ruamel.yaml."""

    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = Path(config_path)

    def load(self) -> TranscriptServerConfig:
        """Load and validate configuration from YAML file."""
        if not self.config_path.exists():
            logger.warning(
                f"Config file {self.config_path} not found - using built-in demo API keys"
            )
            return TranscriptServerConfig()

        with open(self.config_path) as f:
            data = yaml.load(f) or {}

        config = TranscriptServerConfig(**data)

        # Relative fixture paths are resolved against the config file's directory
        if config.transcripts_file and not Path(config.transcripts_file).is_absolute():
            resolved = self.config_path.parent / config.transcripts_file
            config = config.model_copy(update={"transcripts_file": str(resolved)})

        logger.info(
            f"Loaded config from {self.config_path} ({len(config.auth.api_keys)} API keys)"
        )
        return config
