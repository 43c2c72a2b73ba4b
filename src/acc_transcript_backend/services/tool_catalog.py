"""
Tool catalogue served to discovery requests.

Discovery never needs a credential; only execution does.
"""

from typing import Any, Dict, List

from acc_transcript_backend.services.query_engine import (
    DEFAULT_RECENT_LIMIT,
    GET_TRANSCRIPT_DETAILS,
    LIST_RECENT_CALLS,
    MAX_RECENT_LIMIT,
    SEARCH_TRANSCRIPTS,
)

SEARCH_TRANSCRIPTS_DESCRIPTION = (
    "Search call transcripts for specific topics or keywords. Matches a "
    "case-insensitive substring of the transcript content. dateFrom/dateTo are "
    "accepted but not applied yet."
)
GET_TRANSCRIPT_DETAILS_DESCRIPTION = "Get full details of a specific transcript"
LIST_RECENT_CALLS_DESCRIPTION = (
    "List recent client calls, most recent first "
    f"(default: {DEFAULT_RECENT_LIMIT}, max: {MAX_RECENT_LIMIT})"
)

TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "name": SEARCH_TRANSCRIPTS,
        "description": SEARCH_TRANSCRIPTS_DESCRIPTION,
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search query for transcript content",
                },
                "clientFilter": {
                    "type": "string",
                    "description": "Optional: Filter by client name",
                },
                "dateFrom": {
                    "type": "string",
                    "description": "Optional: Start date (YYYY-MM-DD). Currently ignored.",
                },
                "dateTo": {
                    "type": "string",
                    "description": "Optional: End date (YYYY-MM-DD). Currently ignored.",
                },
            },
            "required": ["query"],
        },
    },
    {
        "name": GET_TRANSCRIPT_DETAILS,
        "description": GET_TRANSCRIPT_DETAILS_DESCRIPTION,
        "inputSchema": {
            "type": "object",
            "properties": {
                "transcriptId": {
                    "type": "string",
                    "description": "ID of the transcript to retrieve",
                },
            },
            "required": ["transcriptId"],
        },
    },
    {
        "name": LIST_RECENT_CALLS,
        "description": LIST_RECENT_CALLS_DESCRIPTION,
        "inputSchema": {
            "type": "object",
            "properties": {
                "limit": {
                    "type": "number",
                    "description": f"Number of recent calls to return (default: {DEFAULT_RECENT_LIMIT})",
                    "default": DEFAULT_RECENT_LIMIT,
                },
            },
        },
    },
]


def list_tool_definitions() -> List[Dict[str, Any]]:
    """Copy of the catalogue, safe for callers to mutate."""
    return [
        {**tool, "inputSchema": {**tool["inputSchema"]}}
        for tool in TOOL_DEFINITIONS
    ]

