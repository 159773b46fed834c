"""Services package initialization"""
from .database import Database, get_database
from .auth import AuthService
from .clip_generator import ClipGenerator, generate_clip_windows
from .clip_selector import ClipSelector
from .clip_tracker import ClipStateTracker
from .question_ledger import QuestionLedger
from .video_registry import VideoRegistry
from .analytics import AnalyticsService

__all__ = [
    "Database",
    "get_database",
    "AuthService",
    "ClipGenerator",
    "generate_clip_windows",
    "ClipSelector",
    "ClipStateTracker",
    "QuestionLedger",
    "VideoRegistry",
    "AnalyticsService"
]
