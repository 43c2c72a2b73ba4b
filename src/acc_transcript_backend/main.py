"""
Application entry point for the ACC transcript backend.

``create_app`` wires configuration, the transcript store, access control, the
query engine and both transports into a FastAPI application. ``main`` serves it
with uvicorn, or serves MCP over stdio with ``--stdio``.
"""

import argparse
import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI

from acc_transcript_backend import __version__
from acc_transcript_backend.app_config import AppConfig, load_app_config
from acc_transcript_backend.auth import AccessControl, ApiKeyTable
from acc_transcript_backend.config import ConfigParser, TranscriptServerConfig
from acc_transcript_backend.errors import Unauthenticated
from acc_transcript_backend.middleware.app_middleware import setup_middleware
from acc_transcript_backend.routers import api_router
from acc_transcript_backend.services.mcp_server import (
    create_mcp_router,
    create_mcp_server,
    run_stdio,
)
from acc_transcript_backend.services.query_engine import QueryEngine
from acc_transcript_backend.transcript_store import TranscriptStore, load_transcript_store

logger = logging.getLogger(__name__)


def create_app(
    app_config: Optional[AppConfig] = None,
    server_config: Optional[TranscriptServerConfig] = None,
    store: Optional[TranscriptStore] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_config: Process settings; read from the environment when omitted
        server_config: API keys and fixture location; read from config.yaml when omitted
        store: Transcript store; loaded from ``server_config.transcripts_file`` when omitted

    Returns:
        Configured FastAPI application
    """
    app_config = app_config or load_app_config()
    server_config = server_config or ConfigParser(app_config.config_path).load()
    if store is None:
        store = load_transcript_store(server_config.transcripts_file)

    access_control = AccessControl(ApiKeyTable.from_config(server_config.auth.api_keys))
    engine = QueryEngine(store)
    mcp = create_mcp_server(engine, server_config.server_name, server_config.server_version)

    app = FastAPI(
        title="ACC Transcript MCP",
        version=__version__,
        description="Search and retrieve call transcripts scoped to the caller's clients.",
    )
    app.state.app_config = app_config
    app.state.server_config = server_config
    app.state.access_control = access_control
    app.state.query_engine = engine
    app.state.mcp = mcp

    setup_middleware(app, app_config)
    app.include_router(api_router)
    app.include_router(create_mcp_router(mcp, access_control))

    logger.info(
        f"🚀 Transcript backend ready: {len(store)} transcripts, "
        f"{len(access_control.api_keys)} API keys"
    )
    return app


def configure_logging(level: str) -> None:
    # Logs go to stderr so stdio MCP traffic on stdout stays clean
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(
        description="ACC transcript MCP server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  acc-transcript-server                   Serve HTTP + MCP over SSE
  acc-transcript-server --port 8080       Serve on another port
  TRANSCRIPT_API_KEY=... acc-transcript-server --stdio
                                          Serve MCP over stdio
        """
    )
    parser.add_argument('--stdio', action='store_true', help='Serve MCP over stdio instead of HTTP')
    parser.add_argument('--config', help='Path to config.yaml (overrides TRANSCRIPT_CONFIG_PATH)')
    parser.add_argument('--host', help='Bind address (overrides HOST)')
    parser.add_argument('--port', type=int, help='Listen port (overrides PORT)')
    args = parser.parse_args(argv)

    app_config = load_app_config()
    if args.config:
        app_config.config_path = args.config
    if args.host is not None:
        app_config.host = args.host
    if args.port is not None:
        app_config.port = args.port

    configure_logging(app_config.log_level)

    if args.stdio:
        server_config = ConfigParser(app_config.config_path).load()
        store = load_transcript_store(server_config.transcripts_file)
        access_control = AccessControl(ApiKeyTable.from_config(server_config.auth.api_keys))
        mcp = create_mcp_server(
            QueryEngine(store), server_config.server_name, server_config.server_version
        )
        try:
            run_stdio(mcp, access_control, app_config.stdio_api_key)
        except Unauthenticated as e:
            logger.error(f"Cannot serve MCP over stdio: {e.message} (set TRANSCRIPT_API_KEY)")
            return 1
        return 0

    app = create_app(app_config)
    logger.info(f"📍 Health check: http://{app_config.host}:{app_config.port}/health")
    logger.info("🔐 Auth required for /mcp/tools/* endpoints")
    uvicorn.run(app, host=app_config.host, port=app_config.port, log_level=app_config.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
