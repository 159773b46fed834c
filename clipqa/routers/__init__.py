"""Routers package initialization"""
from .auth import router as auth_router
from .clips import router as clips_router
from .questions import router as questions_router
from .videos import router as videos_router
from .analytics import router as analytics_router

__all__ = ["auth_router", "clips_router", "questions_router", "videos_router", "analytics_router"]
