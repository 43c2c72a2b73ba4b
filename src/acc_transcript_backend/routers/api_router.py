"""
Main API router combining the modular route groups.
"""

from fastapi import APIRouter

from .modules import system_router, tool_router

api_router = APIRouter()
api_router.include_router(system_router)
api_router.include_router(tool_router)
