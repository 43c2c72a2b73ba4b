"""
FastAPI dependencies shared by the routers.

Components are created once in ``create_app`` and stored on ``app.state``.
"""

from fastapi import Depends, HTTPException, Request

from acc_transcript_backend.auth import AccessControl
from acc_transcript_backend.errors import Unauthenticated
from acc_transcript_backend.models.user import CallerIdentity
from acc_transcript_backend.services.query_engine import QueryEngine


def get_access_control(request: Request) -> AccessControl:
    return request.app.state.access_control


def get_query_engine(request: Request) -> QueryEngine:
    return request.app.state.query_engine


async def current_identity(
    request: Request,
    access_control: AccessControl = Depends(get_access_control),
) -> CallerIdentity:
    """Resolve the caller from the ``Authorization: Bearer <key>`` header, or fail with 401."""
    try:
        return access_control.authenticate_header(request.headers.get("authorization"))
    except Unauthenticated as e:
        raise HTTPException(status_code=401, detail=e.message)
