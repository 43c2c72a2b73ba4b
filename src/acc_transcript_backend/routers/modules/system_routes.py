"""
System and discovery routes.

None of these require authentication.
"""

from fastapi import APIRouter, Request

router = APIRouter(tags=["system"])


@router.get("/health")
async def health_check():
    return {"status": "ok", "service": "ACC Transcript MCP"}


@router.get("/.well-known/openapi.json", include_in_schema=False)
async def well_known_openapi(request: Request):
    """Alias of /openapi.json at the conventional discovery location."""
    return request.app.openapi()


@router.get("/mcp")
async def get_mcp_server_info(request: Request):
    """Describe the MCP server so clients can discover its tools."""
    config = request.app.state.server_config
    return {
        "name": config.server_name,
        "version": config.server_version,
        "capabilities": {"tools": {}},
    }


@router.get("/mcp/.well-known/oauth-authorization-server")
async def get_auth_descriptor(request: Request):
    """Describe the authentication scheme. Static API keys stand in for OAuth."""
    return {
        "issuer": request.app.state.app_config.base_url,
        "token_endpoint": "Use Bearer token with API key",
        "authentication": "Bearer token",
        "note": "Using API key authentication",
    }
