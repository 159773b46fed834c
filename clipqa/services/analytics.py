"""
Analytics Service
Read-only usage reports over clips, views, questions and users.
"""

import statistics
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from ..utils.exceptions import ValidationError
from ..utils.logger import get_logger
from .database import Database

logger = get_logger()

TIME_RANGES = {
    "24h": timedelta(hours=24),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
}


def time_filter(time_range: str = "7d", now: Optional[datetime] = None) -> str:
    """Cut-off timestamp for a named range, in the stored ISO form."""
    if time_range not in TIME_RANGES:
        raise ValidationError(
            f"Unknown time range '{time_range}'",
            field="range",
            allowed=sorted(TIME_RANGES),
        )
    current = now or datetime.now(timezone.utc)
    return (current - TIME_RANGES[time_range]).isoformat()


class AnalyticsService:
    """Aggregate reporting queries"""

    def __init__(self, db: Database):
        self.db = db

    async def _fetch_all(self, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
        async with self.db.connect() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            await cursor.close()
        return [dict(row) for row in rows]

    async def _fetch_one(self, query: str, params: tuple = ()) -> Dict[str, Any]:
        rows = await self._fetch_all(query, params)
        return rows[0] if rows else {}

    async def clip_analytics(self, time_range: str = "7d") -> Dict[str, Any]:
        """Clip totals for clips created inside the range."""
        since = time_filter(time_range)
        return await self._fetch_one(
            """
            SELECT
                COUNT(*) AS total_clips,
                COALESCE(SUM(c.is_dry), 0) AS dry_clips,
                COALESCE(AVG(
                    (SELECT COUNT(*) FROM questions q WHERE q.clip_id = c.id AND q.created_at >= ?)
                ), 0) AS avg_questions_per_clip,
                COALESCE(SUM(c.served_count), 0) AS total_views,
                (SELECT COUNT(DISTINCT cv.user_id)
                    FROM clip_views cv JOIN clips c2 ON cv.clip_id = c2.id
                    WHERE cv.viewed_at >= ? AND c2.created_at >= ?) AS unique_viewers
            FROM clips c
            WHERE c.created_at >= ?
            """,
            (since, since, since, since),
        )

    async def user_engagement(self, time_range: str = "7d") -> Dict[str, Any]:
        """Per-user activity averaged across every account."""
        since = time_filter(time_range)
        day_ago = time_filter("24h")
        return await self._fetch_one(
            """
            SELECT
                COUNT(*) AS total_users,
                COALESCE(SUM(CASE WHEN u.last_login >= ? THEN 1 ELSE 0 END), 0) AS active_today,
                COALESCE(AVG(
                    (SELECT COUNT(*) FROM questions q WHERE q.user_id = u.id AND q.created_at >= ?)
                ), 0) AS avg_questions_per_user,
                COALESCE(AVG(
                    (SELECT COUNT(DISTINCT substr(cv.viewed_at, 1, 10)) FROM clip_views cv
                        WHERE cv.user_id = u.id AND cv.viewed_at >= ?)
                ), 0) AS avg_sessions_per_user
            FROM users u
            """,
            (day_ago, since, since),
        )

    async def question_quality(self) -> Dict[str, Any]:
        """Length distribution of question and answer text."""
        rows = await self._fetch_all(
            "SELECT LENGTH(question_text) AS q_len, LENGTH(answer_text) AS a_len FROM questions"
        )
        question_lengths = [row["q_len"] for row in rows]
        answer_lengths = [row["a_len"] for row in rows]
        return {
            "total_questions": len(rows),
            "avg_question_length": statistics.fmean(question_lengths) if rows else 0,
            "avg_answer_length": statistics.fmean(answer_lengths) if rows else 0,
            "median_question_length": statistics.median(question_lengths) if rows else 0,
            "median_answer_length": statistics.median(answer_lengths) if rows else 0,
        }

    async def video_performance(self) -> List[Dict[str, Any]]:
        """Per-video totals, best questions-per-clip ratio first."""
        return await self._fetch_all(
            """
            SELECT
                stats.*,
                CASE WHEN stats.total_clips > 0
                    THEN CAST(stats.total_questions AS REAL) / stats.total_clips
                    ELSE 0 END AS questions_per_clip_ratio
            FROM (
                SELECT
                    v.id,
                    v.title,
                    v.duration_seconds,
                    v.uploaded_at,
                    (SELECT COUNT(*) FROM clips c WHERE c.video_id = v.id) AS total_clips,
                    (SELECT COUNT(*) FROM clips c WHERE c.video_id = v.id AND c.is_dry = 1) AS dry_clips,
                    (SELECT COUNT(*) FROM questions q JOIN clips c ON q.clip_id = c.id
                        WHERE c.video_id = v.id) AS total_questions,
                    (SELECT COALESCE(AVG(c.served_count), 0) FROM clips c WHERE c.video_id = v.id) AS avg_clip_views,
                    (SELECT COUNT(DISTINCT cv.user_id) FROM clip_views cv JOIN clips c ON cv.clip_id = c.id
                        WHERE c.video_id = v.id) AS unique_viewers
                FROM videos v
            ) stats
            ORDER BY questions_per_clip_ratio DESC, stats.uploaded_at DESC
            """
        )

    async def hourly_activity(self) -> List[Dict[str, Any]]:
        """Views and distinct viewers per UTC hour over the last week."""
        since = time_filter("7d")
        return await self._fetch_all(
            """
            SELECT
                CAST(substr(viewed_at, 12, 2) AS INTEGER) AS hour,
                COUNT(*) AS view_count,
                COUNT(DISTINCT user_id) AS unique_users
            FROM clip_views
            WHERE viewed_at >= ?
            GROUP BY hour
            ORDER BY hour
            """,
            (since,),
        )

    async def popular_clips(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Selectable clips that have questions, most-asked first."""
        if limit < 1:
            raise ValidationError("Limit must be positive", field="limit")
        return await self._fetch_all(
            """
            SELECT
                c.*,
                v.title AS video_title,
                (SELECT COUNT(*) FROM questions q WHERE q.clip_id = c.id) AS question_count,
                (SELECT COUNT(DISTINCT cv.user_id) FROM clip_views cv WHERE cv.clip_id = c.id) AS unique_viewers
            FROM clips c
            JOIN videos v ON c.video_id = v.id
            WHERE c.is_dry = 0 AND EXISTS (SELECT 1 FROM questions q WHERE q.clip_id = c.id)
            ORDER BY question_count DESC, c.served_count DESC
            LIMIT ?
            """,
            (limit,),
        )
