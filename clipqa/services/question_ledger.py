"""
Question Ledger Service
Stores question/answer pairs against clips and enforces author-only edits.
"""

from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..config import get_settings
from ..models.question import Question, QuestionEntry, QuestionText
from ..utils.exceptions import ForbiddenError, NotFoundError, ValidationError
from ..utils.logger import get_logger
from .database import Database, new_id, utcnow

logger = get_logger()

_FIELD_MESSAGES = {
    "question_text": "Question must be between 5 and 500 characters",
    "answer_text": "Answer must be between 2 and 1000 characters",
}


def validate_question_text(question_text: Optional[str], answer_text: Optional[str]) -> QuestionText:
    """Apply the length bounds to whichever fields are present."""
    try:
        return QuestionText(question_text=question_text, answer_text=answer_text)
    except PydanticValidationError as exc:
        field = str(exc.errors()[0]["loc"][0])
        raise ValidationError(_FIELD_MESSAGES.get(field, "Invalid question"), field=field) from exc


class QuestionLedger:
    """Question/answer storage keyed by clip and author"""

    def __init__(self, db: Database):
        self.db = db
        self.settings = get_settings()

    async def create(self, clip_id: str, user_id: str, question_text: str, answer_text: str) -> Question:
        """
        Attach a question to a clip

        Inserting the question and clearing the clip's dry flag happen in the
        same transaction: a clip that has a question is always selectable.
        """
        if not clip_id or question_text is None or answer_text is None:
            raise ValidationError("Clip ID, question, and answer are required")
        validate_question_text(question_text, answer_text)

        question_id = new_id()
        now = utcnow()

        async with self.db.transaction("create_question") as conn:
            cursor = await conn.execute("SELECT is_dry FROM clips WHERE id = ?", (clip_id,))
            clip_row = await cursor.fetchone()
            await cursor.close()
            if clip_row is None:
                raise NotFoundError("Clip", clip_id)

            await conn.execute(
                """
                INSERT INTO questions (id, clip_id, user_id, question_text, answer_text, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (question_id, clip_id, user_id, question_text, answer_text, now),
            )
            if clip_row["is_dry"]:
                await conn.execute(
                    "UPDATE clips SET is_dry = 0 WHERE id = ? AND is_dry = 1",
                    (clip_id,),
                )
                logger.info(f"Clip {clip_id} is selectable again after question {question_id}")

        return Question(
            id=question_id,
            clip_id=clip_id,
            user_id=user_id,
            question_text=question_text,
            answer_text=answer_text,
            created_at=now,
        )

    async def update(
        self,
        question_id: str,
        user_id: str,
        question_text: Optional[str] = None,
        answer_text: Optional[str] = None,
    ) -> Question:
        """Edit the caller's own question; absent fields stay as they are."""
        if question_text is None and answer_text is None:
            raise ValidationError("No updates provided")
        validate_question_text(question_text, answer_text)

        updates = []
        values = []
        if question_text is not None:
            updates.append("question_text = ?")
            values.append(question_text)
        if answer_text is not None:
            updates.append("answer_text = ?")
            values.append(answer_text)

        async with self.db.transaction("update_question") as conn:
            cursor = await conn.execute("SELECT user_id FROM questions WHERE id = ?", (question_id,))
            owner = await cursor.fetchone()
            await cursor.close()
            if owner is None:
                raise NotFoundError("Question", question_id)
            if owner["user_id"] != user_id:
                logger.warning(f"User {user_id} tried to edit question {question_id} owned by {owner['user_id']}")
                raise ForbiddenError("You can only edit your own questions", question_id=question_id)

            await conn.execute(
                f"UPDATE questions SET {', '.join(updates)} WHERE id = ?",
                (*values, question_id),
            )
            cursor = await conn.execute("SELECT * FROM questions WHERE id = ?", (question_id,))
            row = await cursor.fetchone()
            await cursor.close()

        return Question(**dict(row))

    async def get(self, question_id: str) -> Question:
        async with self.db.connect() as conn:
            cursor = await conn.execute("SELECT * FROM questions WHERE id = ?", (question_id,))
            row = await cursor.fetchone()
            await cursor.close()
        if row is None:
            raise NotFoundError("Question", question_id)
        return Question(**dict(row))

    async def list_for_clip(self, clip_id: str) -> List[QuestionEntry]:
        """Questions on a clip with their authors, newest first."""
        async with self.db.connect() as conn:
            cursor = await conn.execute(
                """
                SELECT q.*, u.username
                FROM questions q
                JOIN users u ON q.user_id = u.id
                WHERE q.clip_id = ?
                ORDER BY q.created_at DESC, q.rowid DESC
                """,
                (clip_id,),
            )
            rows = await cursor.fetchall()
            await cursor.close()
        return [QuestionEntry(**dict(row)) for row in rows]

    async def list_for_user(self, user_id: str) -> List[QuestionEntry]:
        """A user's most recent questions with their clip window and video title."""
        async with self.db.connect() as conn:
            cursor = await conn.execute(
                """
                SELECT q.*, c.start_time, c.end_time, v.title AS video_title
                FROM questions q
                JOIN clips c ON q.clip_id = c.id
                JOIN videos v ON c.video_id = v.id
                WHERE q.user_id = ?
                ORDER BY q.created_at DESC, q.rowid DESC
                LIMIT ?
                """,
                (user_id, self.settings.user_questions_limit),
            )
            rows = await cursor.fetchall()
            await cursor.close()
        return [QuestionEntry(**dict(row)) for row in rows]
