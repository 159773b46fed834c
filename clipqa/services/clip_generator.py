"""
Clip Generator Service
Cuts a video into every fixed-length sliding window and stores video and
clips together.
"""

from typing import List, Tuple

from ..config import get_settings
from ..models.clip import CLIP_LENGTH_SECONDS
from ..models.video import Video, VideoCreated
from ..utils.exceptions import ValidationError
from ..utils.logger import get_logger
from .database import Database, new_id, utcnow

logger = get_logger()


def generate_clip_windows(duration: int, clip_length: int = CLIP_LENGTH_SECONDS) -> List[Tuple[int, int]]:
    """
    Compute every clip window for a video

    One window per whole-second start offset, stride 1, so a video of
    ``duration`` seconds yields ``duration - clip_length + 1`` windows and
    none when it is shorter than a single clip.

    Args:
        duration: Video length in seconds
        clip_length: Window length in seconds

    Returns:
        List of (start_time, end_time) pairs ordered by start
    """
    return [(start, start + clip_length) for start in range(0, duration - clip_length + 1)]


class ClipGenerator:
    """Registers videos and generates their clip inventory"""

    def __init__(self, db: Database):
        self.db = db
        self.settings = get_settings()

    def validate(self, title: str, url: str, duration_seconds) -> int:
        """Check a video record before anything is written"""
        if not title or not title.strip():
            raise ValidationError("Title, URL, and duration are required", field="title")
        if not url or not url.strip():
            raise ValidationError("Title, URL, and duration are required", field="url")
        if isinstance(duration_seconds, bool) or not isinstance(duration_seconds, int):
            raise ValidationError("Duration must be a whole number of seconds", field="duration_seconds")
        if len(title) > 255:
            raise ValidationError("Title cannot be longer than 255 characters", field="title")
        if len(url) > 500:
            raise ValidationError("URL cannot be longer than 500 characters", field="url")

        if duration_seconds < self.settings.min_video_duration:
            raise ValidationError(
                f"Video must be at least {self.settings.min_video_duration} seconds long",
                field="duration_seconds",
                value=duration_seconds,
            )
        if duration_seconds > self.settings.max_video_duration:
            raise ValidationError(
                f"Video cannot be longer than {self.settings.max_video_duration} seconds",
                field="duration_seconds",
                value=duration_seconds,
            )
        return duration_seconds

    async def create_video(self, title: str, url: str, duration_seconds: int) -> VideoCreated:
        """
        Register a video and insert all of its clips in one transaction

        Either the video row, every clip row and the clip counter are all
        stored, or nothing is.
        """
        duration = self.validate(title, url, duration_seconds)
        windows = generate_clip_windows(duration)

        video_id = new_id()
        now = utcnow()

        async with self.db.transaction("create_video") as conn:
            await conn.execute(
                "INSERT INTO videos (id, title, url, duration_seconds, uploaded_at) VALUES (?, ?, ?, ?, ?)",
                (video_id, title, url, duration, now),
            )
            await conn.executemany(
                "INSERT INTO clips (id, video_id, start_time, end_time, created_at) VALUES (?, ?, ?, ?, ?)",
                [(new_id(), video_id, start, end, now) for start, end in windows],
            )
            await conn.execute(
                "UPDATE videos SET total_clips_generated = ? WHERE id = ?",
                (len(windows), video_id),
            )

        video = Video(
            id=video_id,
            title=title,
            url=url,
            duration_seconds=duration,
            total_clips_generated=len(windows),
            uploaded_at=now,
        )
        logger.info(f"Created video '{title}' ({duration}s) with {len(windows)} clips")
        return VideoCreated(video=video, clips_generated=len(windows))
