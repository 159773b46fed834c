"""
Clip State Tracker Service
Dry-flag changes and per-clip detail lookups.
"""

from ..models.clip import Clip, ClipDetail
from ..utils.exceptions import NotFoundError
from ..utils.logger import get_logger
from .database import Database, new_id, utcnow
from .question_ledger import QuestionLedger

logger = get_logger()


class ClipStateTracker:
    """Tracks which clips are unusable and who flagged them"""

    def __init__(self, db: Database):
        self.db = db
        self.questions = QuestionLedger(db)

    async def mark_dry(self, clip_id: str, user_id: str) -> Clip:
        """
        Flag a clip as unable to support a question

        The flag and a zero-duration view entry crediting the user are
        written together. Only attaching a question clears the flag again.

        Raises:
            NotFoundError: The clip does not exist
        """
        async with self.db.transaction("mark_dry") as conn:
            cursor = await conn.execute("SELECT id FROM clips WHERE id = ?", (clip_id,))
            exists = await cursor.fetchone()
            await cursor.close()
            if exists is None:
                raise NotFoundError("Clip", clip_id)

            await conn.execute("UPDATE clips SET is_dry = 1 WHERE id = ?", (clip_id,))
            await conn.execute(
                """
                INSERT INTO clip_views (id, clip_id, user_id, viewed_at, session_duration)
                VALUES (?, ?, ?, ?, 0)
                """,
                (new_id(), clip_id, user_id, utcnow()),
            )
            cursor = await conn.execute("SELECT * FROM clips WHERE id = ?", (clip_id,))
            row = await cursor.fetchone()
            await cursor.close()

        logger.info(f"Clip {clip_id} marked dry by user {user_id}")
        return Clip(**dict(row))

    async def get_clip(self, clip_id: str) -> ClipDetail:
        """Clip with its video title, url and every attached question."""
        async with self.db.connect() as conn:
            cursor = await conn.execute(
                """
                SELECT c.*, v.url, v.title AS video_title
                FROM clips c
                JOIN videos v ON c.video_id = v.id
                WHERE c.id = ?
                """,
                (clip_id,),
            )
            row = await cursor.fetchone()
            await cursor.close()

        if row is None:
            raise NotFoundError("Clip", clip_id)

        questions = await self.questions.list_for_clip(clip_id)
        return ClipDetail(**dict(row), questions=questions)
