"""
Videos Router
Video upload with clip generation, catalogue lookups and statistics.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..models.clip import Clip
from ..models.video import Video, VideoCreate, VideoCreated, VideoStats, VideoSummary
from ..services.clip_generator import ClipGenerator
from ..services.database import Database, get_database
from ..services.video_registry import VideoRegistry
from .deps import get_current_user_id

router = APIRouter(prefix="/api/videos", tags=["videos"], dependencies=[Depends(get_current_user_id)])


@router.get("", response_model=List[VideoSummary])
async def list_videos(db: Database = Depends(get_database)):
    return await VideoRegistry(db).list_videos()


@router.post("", response_model=VideoCreated, status_code=status.HTTP_201_CREATED)
async def create_video(request: VideoCreate, db: Database = Depends(get_database)):
    """Register a video and generate every 10-second clip of it."""
    return await ClipGenerator(db).create_video(request.title, request.url, request.duration_seconds)


@router.get("/{video_id}", response_model=Video)
async def get_video(video_id: str, db: Database = Depends(get_database)):
    return await VideoRegistry(db).get_video(video_id)


@router.get("/{video_id}/stats", response_model=VideoStats)
async def get_video_stats(video_id: str, db: Database = Depends(get_database)):
    """Clip, question and viewer totals for a video."""
    return await VideoRegistry(db).video_stats(video_id)


@router.get("/{video_id}/clips", response_model=List[Clip])
async def list_video_clips(
    video_id: str,
    start: int = Query(0, ge=0),
    end: Optional[int] = Query(None, gt=0),
    overlapping: bool = Query(False, description="Include clips that only partly overlap the range"),
    db: Database = Depends(get_database),
):
    """Clips of a video inside (or overlapping) a time range."""
    registry = VideoRegistry(db)
    if end is None:
        end = (await registry.get_video(video_id)).duration_seconds
    if overlapping:
        return await registry.overlapping_clips(video_id, start, end)
    return await registry.clips_in_range(video_id, start, end)


@router.delete("/{video_id}")
async def delete_video(video_id: str, db: Database = Depends(get_database)):
    """Delete a video with all of its clips, views and questions."""
    await VideoRegistry(db).delete_video(video_id)
    return {"status": "deleted"}
