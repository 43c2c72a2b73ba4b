"""
Tool routes for the ACC transcript API.

Handles plain HTTP tool calls and the JSON-RPC MCP endpoint.
"""

from fastapi import APIRouter, Depends, Request

from acc_transcript_backend.auth import AccessControl
from acc_transcript_backend.controllers import tool_controller
from acc_transcript_backend.dependencies import (
    current_identity,
    get_access_control,
    get_query_engine,
)
from acc_transcript_backend.models.user import CallerIdentity
from acc_transcript_backend.services.query_engine import QueryEngine

router = APIRouter(prefix="/mcp", tags=["tools"])


@router.get("/me")
async def get_me(identity: CallerIdentity = Depends(current_identity)):
    """Echo the identity behind the presented API key."""
    return {"authenticated": True, "user": identity.to_wire()}


@router.post("/tools/{tool_name}")
async def call_tool(
    tool_name: str,
    request: Request,
    identity: CallerIdentity = Depends(current_identity),
    engine: QueryEngine = Depends(get_query_engine),
):
    """Run a tool. The JSON body holds the tool arguments."""
    body = await request.body()
    return tool_controller.call_tool(engine, tool_name, body, identity)


@router.post("")
async def handle_jsonrpc(
    request: Request,
    engine: QueryEngine = Depends(get_query_engine),
    access_control: AccessControl = Depends(get_access_control),
):
    """JSON-RPC MCP endpoint. tools/list is open; tools/call needs an API key."""
    body = await request.body()
    return tool_controller.handle_jsonrpc(
        engine, access_control, body, request.headers.get("authorization")
    )
