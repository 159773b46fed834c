import pytest

from clipqa.services.clip_selector import ClipSelector
from clipqa.services.clip_tracker import ClipStateTracker
from clipqa.services.question_ledger import QuestionLedger
from clipqa.services.video_registry import VideoRegistry
from clipqa.utils.exceptions import NotFoundError, ValidationError


async def test_list_videos_newest_first_with_clip_counts(db, make_video):
    await make_video(duration=10, title="Old")
    await make_video(duration=25, title="New")

    videos = await VideoRegistry(db).list_videos()

    assert [v.title for v in videos] == ["New", "Old"]
    assert [v.clip_count for v in videos] == [16, 1]


async def test_get_video_unknown(db):
    with pytest.raises(NotFoundError):
        await VideoRegistry(db).get_video("missing")


async def test_video_stats(db, alice, bob, make_video, query):
    video = await make_video(duration=12)
    selector = ClipSelector(db)
    first = await selector.select_next(alice)
    await selector.select_next(bob)
    await ClipStateTracker(db).mark_dry(first.id, alice)
    await QuestionLedger(db).create(first.id, bob, "A question here", "Answer")

    stats = await VideoRegistry(db).video_stats(video.id)

    assert stats.total_clips == 3
    assert stats.dry_clips == 0
    assert stats.total_questions == 1
    assert stats.unique_viewers == 2
    assert stats.total_views == 2


async def test_clips_in_range_and_overlapping(db, make_video):
    video = await make_video(duration=30)
    registry = VideoRegistry(db)

    inside = await registry.clips_in_range(video.id, 5, 17)
    assert [(c.start_time, c.end_time) for c in inside] == [(5, 15), (6, 16), (7, 17)]

    overlapping = await registry.overlapping_clips(video.id, 25, 28)
    assert [c.start_time for c in overlapping] == list(range(16, 21))


async def test_range_must_be_ordered(db, make_video):
    video = await make_video(duration=30)
    with pytest.raises(ValidationError):
        await VideoRegistry(db).clips_in_range(video.id, 10, 10)


async def test_delete_video_cascades(db, alice, make_video, query):
    video = await make_video(duration=12)
    clip = await ClipSelector(db).select_next(alice)
    await QuestionLedger(db).create(clip.id, alice, "Cascading question", "Gone")

    await VideoRegistry(db).delete_video(video.id)

    for table in ("videos", "clips", "clip_views", "questions"):
        assert await query(f"SELECT * FROM {table}") == []

    with pytest.raises(NotFoundError):
        await VideoRegistry(db).delete_video(video.id)
