import asyncio

import pytest

from clipqa.services.clip_selector import ClipSelector
from clipqa.services.clip_tracker import ClipStateTracker
from clipqa.utils.exceptions import ClipsUnavailableError


async def test_empty_pool_is_unavailable(db, alice):
    with pytest.raises(ClipsUnavailableError):
        await ClipSelector(db).select_next(alice)


async def test_pool_of_only_dry_clips_is_unavailable(db, alice, make_video, query):
    await make_video(duration=11)
    tracker = ClipStateTracker(db)
    for row in await query("SELECT id FROM clips"):
        await tracker.mark_dry(row["id"], alice)

    with pytest.raises(ClipsUnavailableError):
        await ClipSelector(db).select_next(alice)

    # The failed selection wrote nothing.
    views = await query("SELECT * FROM clip_views WHERE session_duration IS NULL")
    assert views == []


async def test_served_clip_carries_video_and_new_count(db, alice, make_video):
    video = await make_video(duration=30, title="Chemistry")

    clip = await ClipSelector(db).select_next(alice)

    assert clip.video_id == video.id
    assert clip.video_title == "Chemistry"
    assert clip.url == video.url
    assert clip.served_count == 1
    assert clip.end_time - clip.start_time == 10


async def test_repeated_selection_counts_every_serve(db, alice, make_video, query):
    await make_video(duration=10)
    selector = ClipSelector(db)

    for _ in range(5):
        await selector.select_next(alice)

    clips = await query("SELECT id, served_count FROM clips")
    assert len(clips) == 1
    assert clips[0]["served_count"] == 5
    views = await query("SELECT * FROM clip_views WHERE clip_id = ?", (clips[0]["id"],))
    assert len(views) == 5
    assert all(view["user_id"] == alice for view in views)


async def test_least_served_clip_is_chosen_first(db, alice, make_video, query):
    await make_video(duration=14)
    clips = await query("SELECT id FROM clips ORDER BY start_time")
    async with db.transaction() as conn:
        await conn.execute("UPDATE clips SET served_count = 3 WHERE id != ?", (clips[2]["id"],))

    clip = await ClipSelector(db).select_next(alice)

    assert clip.id == clips[2]["id"]


async def test_each_round_serves_every_clip_once(db, alice, bob, make_video):
    await make_video(duration=12)
    selector = ClipSelector(db)

    first_round = {(await selector.select_next(alice)).id for _ in range(3)}
    second_round = {(await selector.select_next(bob)).id for _ in range(3)}

    assert len(first_round) == 3
    assert second_round == first_round


async def test_ties_are_broken_randomly(db, alice, make_video, query):
    await make_video(duration=14)
    selector = ClipSelector(db)
    all_ids = {row["id"] for row in await query("SELECT id FROM clips")}

    seen = set()
    for _ in range(200):
        async with db.transaction() as conn:
            await conn.execute("UPDATE clips SET served_count = 0")
        seen.add((await selector.select_next(alice)).id)

    assert seen == all_ids


async def test_dry_clips_are_never_served(db, alice, make_video, query):
    await make_video(duration=12)
    clips = await query("SELECT id FROM clips ORDER BY start_time")
    await ClipStateTracker(db).mark_dry(clips[0]["id"], alice)
    selector = ClipSelector(db)

    served = {(await selector.select_next(alice)).id for _ in range(10)}

    assert clips[0]["id"] not in served


async def test_concurrent_selections_lose_no_updates(db, alice, bob, make_video, query):
    await make_video(duration=10)
    selector = ClipSelector(db)

    served = await asyncio.gather(
        *(selector.select_next(alice if i % 2 else bob) for i in range(20))
    )

    clips = await query("SELECT id, served_count FROM clips")
    assert clips[0]["served_count"] == 20
    assert sorted(clip.served_count for clip in served) == list(range(1, 21))
    views = await query("SELECT * FROM clip_views WHERE clip_id = ?", (clips[0]["id"],))
    assert len(views) == 20
