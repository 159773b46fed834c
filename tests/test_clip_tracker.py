import pytest

from clipqa.services.clip_selector import ClipSelector
from clipqa.services.clip_tracker import ClipStateTracker
from clipqa.services.question_ledger import QuestionLedger
from clipqa.utils.exceptions import ClipsUnavailableError, NotFoundError


async def _selectable_count(query):
    rows = await query("SELECT COUNT(*) AS n FROM clips WHERE is_dry = 0")
    return rows[0]["n"]


async def test_mark_dry_unknown_clip(db, alice, query):
    with pytest.raises(NotFoundError):
        await ClipStateTracker(db).mark_dry("no-such-clip", alice)
    assert await query("SELECT * FROM clip_views") == []


async def test_mark_dry_sets_flag_and_logs_zero_duration_view(db, alice, make_video, query):
    await make_video(duration=10)
    clip_id = (await query("SELECT id FROM clips"))[0]["id"]

    clip = await ClipStateTracker(db).mark_dry(clip_id, alice)

    assert clip.is_dry is True
    views = await query("SELECT * FROM clip_views")
    assert len(views) == 1
    assert views[0]["clip_id"] == clip_id
    assert views[0]["user_id"] == alice
    assert views[0]["session_duration"] == 0
    # Dry marking is an audit entry, not a serve.
    assert clip.served_count == 0


async def test_question_makes_dry_clip_selectable_again(db, alice, bob, make_video, query):
    await make_video(duration=10)
    clip_id = (await query("SELECT id FROM clips"))[0]["id"]
    selector = ClipSelector(db)

    await ClipStateTracker(db).mark_dry(clip_id, alice)
    with pytest.raises(ClipsUnavailableError):
        await selector.select_next(alice)

    await QuestionLedger(db).create(clip_id, bob, "What falls first?", "Both together")

    assert (await selector.select_next(alice)).id == clip_id


async def test_thirty_second_video_walkthrough(db, alice, make_video, query):
    await make_video(duration=30)
    assert await _selectable_count(query) == 21

    served = await ClipSelector(db).select_next(alice)
    assert served.served_count == 1
    assert len(await query("SELECT * FROM clip_views WHERE clip_id = ?", (served.id,))) == 1

    await ClipStateTracker(db).mark_dry(served.id, alice)
    assert await _selectable_count(query) == 20

    await QuestionLedger(db).create(served.id, alice, "Which way is it moving?", "Left")
    assert await _selectable_count(query) == 21


async def test_get_clip_includes_questions_newest_first(db, alice, bob, make_video, query):
    video = await make_video(duration=10, title="Biology")
    clip_id = (await query("SELECT id FROM clips"))[0]["id"]
    ledger = QuestionLedger(db)
    await ledger.create(clip_id, alice, "First question?", "Yes")
    await ledger.create(clip_id, bob, "Second question?", "No")

    detail = await ClipStateTracker(db).get_clip(clip_id)

    assert detail.video_title == "Biology"
    assert detail.url == video.url
    assert [q.question_text for q in detail.questions] == ["Second question?", "First question?"]
    assert [q.username for q in detail.questions] == ["bob", "alice"]


async def test_get_clip_unknown(db):
    with pytest.raises(NotFoundError):
        await ClipStateTracker(db).get_clip("missing")
