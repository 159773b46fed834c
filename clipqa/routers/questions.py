"""
Questions Router
Attach, list and edit question/answer pairs.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from ..models.question import Question, QuestionCreate, QuestionEntry, QuestionUpdate
from ..services.database import Database, get_database
from ..services.question_ledger import QuestionLedger
from .deps import get_current_user_id

router = APIRouter(prefix="/api/questions", tags=["questions"])


@router.post("", response_model=Question, status_code=status.HTTP_201_CREATED)
async def create_question(
    request: QuestionCreate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
):
    """Attach a question to a clip; a dry clip becomes selectable again."""
    return await QuestionLedger(db).create(
        request.clip_id, user_id, request.question_text, request.answer_text
    )


@router.get("/clip/{clip_id}", response_model=List[QuestionEntry])
async def list_clip_questions(
    clip_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
):
    return await QuestionLedger(db).list_for_clip(clip_id)


@router.get("/user", response_model=List[QuestionEntry])
async def list_my_questions(user_id: str = Depends(get_current_user_id), db: Database = Depends(get_database)):
    """The caller's most recent questions."""
    return await QuestionLedger(db).list_for_user(user_id)


@router.put("/{question_id}", response_model=Question)
async def update_question(
    question_id: str,
    request: QuestionUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
):
    """Edit one of the caller's own questions."""
    return await QuestionLedger(db).update(
        question_id, user_id, request.question_text, request.answer_text
    )


@router.get("/{question_id}", response_model=Question)
async def get_question(
    question_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
):
    return await QuestionLedger(db).get(question_id)
