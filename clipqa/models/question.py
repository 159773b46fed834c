"""
Question Data Models
Question/answer pairs attached to clips
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class QuestionCreate(BaseModel):
    """Request model for attaching a question to a clip"""
    clip_id: str
    question_text: str
    answer_text: str


class QuestionUpdate(BaseModel):
    """Partial update; absent fields are left untouched"""
    question_text: Optional[str] = None
    answer_text: Optional[str] = None


class QuestionText(BaseModel):
    """Length bounds shared by create and update"""
    question_text: Optional[str] = Field(default=None, min_length=5, max_length=500)
    answer_text: Optional[str] = Field(default=None, min_length=2, max_length=1000)


class Question(BaseModel):
    """Complete question model"""
    id: str
    clip_id: str
    user_id: str
    question_text: str
    answer_text: str
    created_at: datetime
    quality_score: int = 0


class QuestionEntry(Question):
    """Question as listed for a clip or a user"""
    username: Optional[str] = None
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    video_title: Optional[str] = None
