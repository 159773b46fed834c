"""
Video Data Models
Source videos that clips are cut from
"""

from pydantic import BaseModel, Field
from datetime import datetime


class VideoCreate(BaseModel):
    """Request model for registering a video"""
    title: str
    url: str
    duration_seconds: int = Field(description="Total video length in whole seconds")


class Video(BaseModel):
    """Complete video model"""
    id: str
    title: str
    url: str
    duration_seconds: int
    total_clips_generated: int = 0
    uploaded_at: datetime


class VideoSummary(Video):
    """Video with the number of clips currently stored for it"""
    clip_count: int = 0


class VideoCreated(BaseModel):
    """Result of registering a video and generating its clips"""
    video: Video
    clips_generated: int


class VideoStats(Video):
    """Per-video usage statistics"""
    total_clips: int = 0
    dry_clips: int = 0
    total_questions: int = 0
    unique_viewers: int = 0
    total_views: int = 0
