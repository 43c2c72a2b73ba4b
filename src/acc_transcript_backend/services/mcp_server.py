"""
MCP Server for ACC call transcripts.

This module implements an MCP (Model Context Protocol) server that exposes the
transcript query operations as tools for LLM clients.

Key features:
- Three tools: searchTranscripts, getTranscriptDetails, listRecentCalls
- SSE transport mounted on the FastAPI app, stdio transport for local clients
- Tool listing works without a credential; tool calls need a valid API key
- Results are scoped to the clients the caller's API key may see
"""

import contextvars
import json
import logging
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse, Response
from fastapi.routing import APIRouter
from mcp.server.fastmcp import FastMCP
from mcp.server.sse import SseServerTransport

from acc_transcript_backend.auth import AccessControl, mask_credential, parse_bearer_token
from acc_transcript_backend.errors import Unauthenticated
from acc_transcript_backend.models.user import CallerIdentity
from acc_transcript_backend.services.query_engine import (
    GET_TRANSCRIPT_DETAILS,
    LIST_RECENT_CALLS,
    SEARCH_TRANSCRIPTS,
    OperationResponse,
    QueryEngine,
)
from acc_transcript_backend.services.tool_catalog import (
    GET_TRANSCRIPT_DETAILS_DESCRIPTION,
    LIST_RECENT_CALLS_DESCRIPTION,
    SEARCH_TRANSCRIPTS_DESCRIPTION,
    list_tool_definitions,
)

logger = logging.getLogger(__name__)

# Identity of the caller on the current MCP connection (None = not authenticated)
identity_var: contextvars.ContextVar[Optional[CallerIdentity]] = contextvars.ContextVar(
    "caller_identity", default=None
)

MESSAGES_PATH = "/mcp/messages/"


def render_tool_result(response: OperationResponse) -> str:
    """Render an operation outcome as the JSON text returned to MCP clients."""
    if not response.ok:
        return json.dumps(
            {"error": response.message, "kind": response.kind.value, "message": response.message},
            indent=2,
        )
    return json.dumps(response.payload(), indent=2)


def run_tool(engine: QueryEngine, name: str, arguments: Dict[str, Any]) -> str:
    """Execute a tool for the identity bound to the current connection."""
    # Drop unset optionals so the engine applies its own defaults
    arguments = {key: value for key, value in arguments.items() if value is not None}
    response = engine.execute(name, arguments, identity_var.get())
    return render_tool_result(response)


def create_mcp_server(
    engine: QueryEngine,
    server_name: str = "acc-transcript-server",
    server_version: str = "1.0.0",
) -> FastMCP:
    """Build a FastMCP server with the transcript tools registered."""
    mcp = FastMCP(server_name)
    mcp._mcp_server.version = server_version

    # Untyped parameters: QueryEngine.execute validates and clamps the raw values
    @mcp.tool(name=SEARCH_TRANSCRIPTS, description=SEARCH_TRANSCRIPTS_DESCRIPTION)
    async def search_transcripts(
        query: Any = None,
        clientFilter: Any = None,
        dateFrom: Any = None,
        dateTo: Any = None,
    ) -> str:
        return run_tool(engine, SEARCH_TRANSCRIPTS, {
            "query": query,
            "clientFilter": clientFilter,
            "dateFrom": dateFrom,
            "dateTo": dateTo,
        })

    @mcp.tool(name=GET_TRANSCRIPT_DETAILS, description=GET_TRANSCRIPT_DETAILS_DESCRIPTION)
    async def get_transcript_details(transcriptId: Any = None) -> str:
        return run_tool(engine, GET_TRANSCRIPT_DETAILS, {"transcriptId": transcriptId})

    @mcp.tool(name=LIST_RECENT_CALLS, description=LIST_RECENT_CALLS_DESCRIPTION)
    async def list_recent_calls(limit: Any = None) -> str:
        return run_tool(engine, LIST_RECENT_CALLS, {"limit": limit})

    # Advertise the catalogue schemas rather than the ones inferred from the signatures
    for definition in list_tool_definitions():
        mcp._tool_manager.get_tool(definition["name"]).parameters = definition["inputSchema"]

    logger.info(f"MCP server '{server_name}' initialized with transcript tools")
    return mcp


def create_mcp_router(mcp: FastMCP, access_control: AccessControl) -> APIRouter:
    """Router exposing the MCP server over SSE."""
    mcp_router = APIRouter(prefix="/mcp")
    sse = SseServerTransport(MESSAGES_PATH)

    @mcp_router.get("/sse")
    async def handle_sse(request: Request):
        """
        Handle SSE connections.

        The API key may be provided in the Authorization header:
            Authorization: Bearer <token>

        Connections without a header can list tools but every tool call fails
        with Unauthenticated. A header that is present but invalid is rejected.
        """
        auth_header = request.headers.get("authorization")
        identity: Optional[CallerIdentity] = None

        if auth_header:
            try:
                identity = access_control.authenticate_header(auth_header)
            except Unauthenticated as e:
                return JSONResponse(
                    status_code=401,
                    content={"error": "Unauthorized", "message": e.message},
                )
            token = parse_bearer_token(auth_header)
            logger.info(f"MCP connection established for {identity.email} ({mask_credential(token)})")
        else:
            logger.info("MCP connection established without credentials (discovery only)")

        identity_token = identity_var.set(identity)
        try:
            async with sse.connect_sse(
                request.scope,
                request.receive,
                request._send,
            ) as (read_stream, write_stream):
                await mcp._mcp_server.run(
                    read_stream,
                    write_stream,
                    mcp._mcp_server.create_initialization_options(),
                )
        finally:
            identity_var.reset(identity_token)
        return Response()

    @mcp_router.post("/messages/")
    async def handle_post_message(request: Request):
        """Forward a client message to the SSE session it belongs to."""
        body = await request.body()

        async def receive():
            return {"type": "http.request", "body": body, "more_body": False}

        sent: Dict[str, Any] = {"status": 202, "body": b""}

        async def send(message):
            if message["type"] == "http.response.start":
                sent["status"] = message["status"]
            elif message["type"] == "http.response.body":
                sent["body"] += message.get("body", b"")

        await sse.handle_post_message(request.scope, receive, send)
        if sent["status"] != 202:
            logger.info(f"MCP message rejected with {sent['status']}: {sent['body'].decode(errors='replace')}")
            return Response(content=sent["body"], status_code=sent["status"])
        return JSONResponse(status_code=202, content={"status": "accepted"})

    return mcp_router


def run_stdio(mcp: FastMCP, access_control: AccessControl, api_key: Optional[str]) -> None:
    """
    Serve MCP over stdio for a single, pre-authenticated caller.

    Raises:
        Unauthenticated: the API key is missing or unknown
    """
    identity = access_control.authenticate(api_key)
    identity_var.set(identity)
    logger.info(f"Serving MCP over stdio for {identity.email}")
    mcp.run(transport="stdio")
