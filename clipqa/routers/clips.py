"""
Clips Router
Serves clips to viewers and records dry flags.
"""

from fastapi import APIRouter, Depends

from ..models.clip import ClipDetail, ServedClip
from ..services.clip_selector import ClipSelector
from ..services.clip_tracker import ClipStateTracker
from ..services.database import Database, get_database
from .deps import get_current_user_id

router = APIRouter(prefix="/api/clips", tags=["clips"])


@router.get("/random", response_model=ServedClip)
async def get_next_clip(user_id: str = Depends(get_current_user_id), db: Database = Depends(get_database)):
    """Serve the least-served non-dry clip (random among ties)."""
    return await ClipSelector(db).select_next(user_id)


@router.post("/{clip_id}/mark-dry")
async def mark_clip_dry(
    clip_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
):
    """Flag a clip as unable to support a question."""
    clip = await ClipStateTracker(db).mark_dry(clip_id, user_id)
    return {"message": "Clip marked as dry", "clip": clip}


@router.get("/{clip_id}", response_model=ClipDetail)
async def get_clip(
    clip_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
):
    """Get clip details with its questions."""
    return await ClipStateTracker(db).get_clip(clip_id)
