from .system_routes import router as system_router
from .tool_routes import router as tool_router

__all__ = ["system_router", "tool_router"]
