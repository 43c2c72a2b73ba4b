"""
Application configuration for the ACC transcript backend.

Process-level settings come from environment variables (optionally a .env
file). The API-key table and transcript fixture live in config.yaml, see
``acc_transcript_backend.config``.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class AppConfig:
    """Process-level settings read from the environment."""

    def __init__(self):
        # Network
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = int(os.getenv("PORT", "3400"))
        self.base_url = os.getenv("BASE_URL", f"https://localhost:{self.port}")

        # config.yaml location (API keys, transcript fixture)
        self.config_path = os.getenv("TRANSCRIPT_CONFIG_PATH", "config.yaml")

        # CORS Configuration
        self.cors_origins = os.getenv("CORS_ORIGINS", "*")
        self.allowed_origins = [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # Credential used when serving MCP over stdio
        self.stdio_api_key: Optional[str] = os.getenv("TRANSCRIPT_API_KEY") or None


def load_app_config() -> AppConfig:
    """Load .env (if present) and build the process settings."""
    if load_dotenv():
        logger.info("Loaded environment overrides from .env")
    return AppConfig()
