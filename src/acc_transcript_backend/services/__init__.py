"""Transcript query services and the MCP server built on them."""
