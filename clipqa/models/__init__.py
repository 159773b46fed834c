"""Models package initialization"""
from .user import User, UserCredentials, AuthResult
from .video import Video, VideoCreate, VideoCreated, VideoSummary, VideoStats
from .question import Question, QuestionCreate, QuestionUpdate, QuestionEntry
from .clip import Clip, ServedClip, ClipDetail, CLIP_LENGTH_SECONDS

__all__ = [
    "User", "UserCredentials", "AuthResult",
    "Video", "VideoCreate", "VideoCreated", "VideoSummary", "VideoStats",
    "Question", "QuestionCreate", "QuestionUpdate", "QuestionEntry",
    "Clip", "ServedClip", "ClipDetail", "CLIP_LENGTH_SECONDS",
]
