"""
Video Registry Service
Lookups, statistics and deletion for uploaded videos and their clips.
"""

from typing import List

from ..models.clip import Clip
from ..models.video import Video, VideoStats, VideoSummary
from ..utils.exceptions import NotFoundError, ValidationError
from ..utils.logger import get_logger
from .database import Database

logger = get_logger()


class VideoRegistry:
    """Read and delete access to the video catalogue"""

    def __init__(self, db: Database):
        self.db = db

    async def list_videos(self) -> List[VideoSummary]:
        """All videos, newest first, with their stored clip count."""
        async with self.db.connect() as conn:
            cursor = await conn.execute(
                """
                SELECT v.*, COUNT(c.id) AS clip_count
                FROM videos v
                LEFT JOIN clips c ON v.id = c.video_id
                GROUP BY v.id
                ORDER BY v.uploaded_at DESC, v.rowid DESC
                """
            )
            rows = await cursor.fetchall()
            await cursor.close()
        return [VideoSummary(**dict(row)) for row in rows]

    async def get_video(self, video_id: str) -> Video:
        async with self.db.connect() as conn:
            cursor = await conn.execute("SELECT * FROM videos WHERE id = ?", (video_id,))
            row = await cursor.fetchone()
            await cursor.close()
        if row is None:
            raise NotFoundError("Video", video_id)
        return Video(**dict(row))

    async def video_stats(self, video_id: str) -> VideoStats:
        """Clip, question and viewer totals for one video."""
        async with self.db.connect() as conn:
            cursor = await conn.execute(
                """
                SELECT
                    v.*,
                    (SELECT COUNT(*) FROM clips c WHERE c.video_id = v.id) AS total_clips,
                    (SELECT COUNT(*) FROM clips c WHERE c.video_id = v.id AND c.is_dry = 1) AS dry_clips,
                    (SELECT COUNT(*) FROM questions q JOIN clips c ON q.clip_id = c.id
                        WHERE c.video_id = v.id) AS total_questions,
                    (SELECT COUNT(DISTINCT cv.user_id) FROM clip_views cv JOIN clips c ON cv.clip_id = c.id
                        WHERE c.video_id = v.id) AS unique_viewers,
                    (SELECT COALESCE(SUM(c.served_count), 0) FROM clips c WHERE c.video_id = v.id) AS total_views
                FROM videos v
                WHERE v.id = ?
                """,
                (video_id,),
            )
            row = await cursor.fetchone()
            await cursor.close()
        if row is None:
            raise NotFoundError("Video", video_id)
        return VideoStats(**dict(row))

    async def clips_in_range(self, video_id: str, start_time: int, end_time: int) -> List[Clip]:
        """Clips lying entirely within [start_time, end_time]."""
        self._check_range(start_time, end_time)
        return await self._fetch_clips(
            """
            SELECT * FROM clips
            WHERE video_id = ? AND start_time >= ? AND end_time <= ?
            ORDER BY start_time
            """,
            (video_id, start_time, end_time),
        )

    async def overlapping_clips(self, video_id: str, start_time: int, end_time: int) -> List[Clip]:
        """Clips sharing any part of (start_time, end_time)."""
        self._check_range(start_time, end_time)
        return await self._fetch_clips(
            """
            SELECT * FROM clips
            WHERE video_id = ? AND start_time < ? AND end_time > ?
            ORDER BY start_time
            """,
            (video_id, end_time, start_time),
        )

    async def delete_video(self, video_id: str):
        """Remove a video; its clips, views and questions go with it."""
        async with self.db.transaction("delete_video") as conn:
            cursor = await conn.execute("DELETE FROM videos WHERE id = ?", (video_id,))
            deleted = cursor.rowcount
            await cursor.close()
            if not deleted:
                raise NotFoundError("Video", video_id)
        logger.info(f"Deleted video {video_id}")

    @staticmethod
    def _check_range(start_time: int, end_time: int):
        if start_time < 0 or end_time <= start_time:
            raise ValidationError(
                "Time range must satisfy 0 <= start < end",
                field="start_time",
                start_time=start_time,
                end_time=end_time,
            )

    async def _fetch_clips(self, query: str, params: tuple) -> List[Clip]:
        async with self.db.connect() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            await cursor.close()
        return [Clip(**dict(row)) for row in rows]
