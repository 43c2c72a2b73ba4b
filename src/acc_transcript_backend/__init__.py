"""ACC transcript backend: scoped access to call transcripts over MCP and HTTP."""

__version__ = "1.0.0"
