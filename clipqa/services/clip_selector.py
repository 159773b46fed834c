"""
Clip Selector Service
Hands out the next clip, favouring the least-served ones.
"""

from ..models.clip import ServedClip
from ..utils.exceptions import ClipsUnavailableError
from ..utils.logger import get_logger
from .database import Database, new_id, utcnow

logger = get_logger()

# Lowest served_count first, uniform random among ties.
SELECT_NEXT_CLIP = """
    SELECT c.*, v.url, v.title AS video_title
    FROM clips c
    JOIN videos v ON c.video_id = v.id
    WHERE c.is_dry = 0
    ORDER BY c.served_count ASC, RANDOM()
    LIMIT 1
"""


class ClipSelector:
    """Greedy load balancer over the non-dry clip inventory"""

    def __init__(self, db: Database):
        self.db = db

    async def select_next(self, user_id: str) -> ServedClip:
        """
        Pick a clip for a user and record that it was served

        The pick, the served_count increment and the view log entry share a
        single transaction, so each returned clip is counted exactly once.

        Raises:
            ClipsUnavailableError: No non-dry clip exists
        """
        async with self.db.transaction("select_next") as conn:
            cursor = await conn.execute(SELECT_NEXT_CLIP)
            row = await cursor.fetchone()
            await cursor.close()

            if row is None:
                logger.warning(f"No clips available for user {user_id}")
                raise ClipsUnavailableError()

            clip = ServedClip(**dict(row))

            await conn.execute(
                "UPDATE clips SET served_count = served_count + 1 WHERE id = ?",
                (clip.id,),
            )
            await conn.execute(
                "INSERT INTO clip_views (id, clip_id, user_id, viewed_at) VALUES (?, ?, ?, ?)",
                (new_id(), clip.id, user_id, utcnow()),
            )

        clip.served_count += 1
        return clip
