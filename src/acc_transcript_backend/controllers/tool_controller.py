"""
Tool controller for the HTTP and JSON-RPC surfaces.

Both surfaces funnel into ``QueryEngine.execute`` and only differ in how the
structured outcome is written back to the caller.
"""

import json
import logging
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

from acc_transcript_backend.auth import AccessControl
from acc_transcript_backend.errors import (
    HTTP_STATUS_BY_KIND,
    ErrorKind,
    InvalidArgument,
    QueryError,
    Unauthenticated,
)
from acc_transcript_backend.models.user import CallerIdentity
from acc_transcript_backend.services.mcp_server import render_tool_result
from acc_transcript_backend.services.query_engine import OperationResponse, QueryEngine
from acc_transcript_backend.services.tool_catalog import list_tool_definitions

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
UNAUTHENTICATED = -32001


def parse_json_body(body: bytes) -> Any:
    """Decode a request body; an empty body is an empty argument object."""
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidArgument(f"Request body is not valid JSON: {e}") from e


def error_response(error: QueryError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content={"error": error.kind.value, "message": error.message},
    )


def operation_response(tool_name: str, response: OperationResponse) -> JSONResponse:
    """Map an engine outcome to the HTTP tool-call response shape."""
    if not response.ok:
        return JSONResponse(
            status_code=HTTP_STATUS_BY_KIND[response.kind],
            content={"error": response.kind.value, "message": response.message},
        )

    if response.results is not None:
        return JSONResponse(content={
            "success": True,
            "tool": tool_name,
            "resultCount": len(response.results),
            "results": response.payload(),
        })

    return JSONResponse(content={
        "success": True,
        "tool": tool_name,
        "result": response.payload(),
    })


def call_tool(
    engine: QueryEngine,
    tool_name: str,
    body: bytes,
    identity: CallerIdentity,
) -> JSONResponse:
    """Run a tool for an authenticated HTTP caller."""
    try:
        arguments = parse_json_body(body)
    except InvalidArgument as e:
        logger.warning(f"Rejected body for {tool_name}: {e.message}")
        return error_response(e)

    return operation_response(tool_name, engine.execute(tool_name, arguments, identity))


def _jsonrpc_result(request_id: Any, result: Dict[str, Any]) -> JSONResponse:
    return JSONResponse(content={"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result})


def _jsonrpc_error(
    request_id: Any, code: int, message: str, status_code: int = 200
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "jsonrpc": JSONRPC_VERSION,
            "id": request_id,
            "error": {"code": code, "message": message},
        },
    )


def handle_jsonrpc(
    engine: QueryEngine,
    access_control: AccessControl,
    body: bytes,
    authorization: Optional[str],
) -> JSONResponse:
    """
    Handle a single JSON-RPC 2.0 MCP request.

    ``tools/list`` is answered without a credential. ``tools/call`` requires a
    valid bearer key and returns the tool output as text content, with
    ``isError`` set for structured failures.
    """
    try:
        message = parse_json_body(body)
    except InvalidArgument as e:
        logger.warning(f"JSON-RPC parse error: {e.message}")
        return _jsonrpc_error(None, PARSE_ERROR, e.message)

    if not isinstance(message, dict) or not isinstance(message.get("method"), str):
        return _jsonrpc_error(None, INVALID_REQUEST, "Invalid JSON-RPC request")

    request_id = message.get("id")
    method = message["method"]
    params = message.get("params") or {}

    if method == "tools/list":
        return _jsonrpc_result(request_id, {"tools": list_tool_definitions()})

    if method != "tools/call":
        logger.info(f"Unsupported JSON-RPC method: {method}")
        return _jsonrpc_error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")

    try:
        identity = access_control.authenticate_header(authorization)
    except Unauthenticated as e:
        return _jsonrpc_error(
            request_id,
            UNAUTHENTICATED,
            f"Authentication required for tool execution: {e.message}",
            status_code=401,
        )

    if not isinstance(params, dict) or not isinstance(params.get("name"), str):
        return _jsonrpc_error(request_id, INVALID_PARAMS, "tools/call requires a tool name")

    response = engine.execute(params["name"], params.get("arguments"), identity)
    if not response.ok and response.kind == ErrorKind.UNKNOWN_OPERATION:
        return _jsonrpc_error(request_id, INVALID_PARAMS, response.message)

    return _jsonrpc_result(request_id, {
        "content": [{"type": "text", "text": render_tool_result(response)}],
        "isError": not response.ok,
    })
