"""
Clip Data Models
Fixed-length windows of a source video
"""

from pydantic import BaseModel
from typing import List
from datetime import datetime

from .question import QuestionEntry

CLIP_LENGTH_SECONDS = 10


class Clip(BaseModel):
    """Complete clip model"""
    id: str
    video_id: str
    start_time: int
    end_time: int
    is_dry: bool = False
    served_count: int = 0
    created_at: datetime


class ServedClip(Clip):
    """Clip joined with its parent video, as handed to a viewer"""
    url: str
    video_title: str


class ClipDetail(ServedClip):
    """Served clip plus every question attached to it"""
    questions: List[QuestionEntry] = []

