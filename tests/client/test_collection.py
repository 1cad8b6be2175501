import pytest

from vidshelf.client import CollectionState
from vidshelf.models import Snapshot, FullReplace, PartialMerge
from tests.factories import make_video, make_playlist


def collection_with(sync, video_ids, playlists=()) -> CollectionState:
    return CollectionState(sync, Snapshot(
        videos=[make_video(vid) for vid in video_ids], playlists=list(playlists)))


@pytest.mark.asyncio
async def test_open_loads_from_sync(fake_remote, sync):
    fake_remote.snapshot = Snapshot(videos=[make_video("A")])
    collection = await CollectionState.open(sync)
    assert list(collection.videos) == ["A"]


@pytest.mark.asyncio
async def test_adopt_drops_references_to_unknown_videos(sync):
    collection = collection_with(sync, ["A"], [make_playlist("P", ["A", "ghost"])])
    assert collection.playlists["P"].video_ids == ["A"]


@pytest.mark.asyncio
async def test_add_video_is_deduplicated(fake_remote, sync):
    collection = collection_with(sync, [])
    assert collection.add_video(make_video("A"))
    assert not collection.add_video(make_video("A", title="other"))
    assert collection.videos["A"].title == "Title A"
    await sync.flush()
    assert isinstance(fake_remote.writes[-1], FullReplace)


@pytest.mark.asyncio
async def test_selection_is_idempotent(sync):
    collection = collection_with(sync, ["A", "B"])
    collection.select("A")
    collection.select("A")
    collection.select("unknown")
    assert collection.selection == ["A"]
    collection.deselect("B")
    assert collection.selection == ["A"]
    collection.deselect("A")
    assert collection.selection == []


@pytest.mark.asyncio
async def test_create_from_selection_keeps_order_and_clears_it(sync):
    collection = collection_with(sync, ["v1", "v2"])
    collection.select("v2")
    collection.select("v1")
    playlist = collection.create_playlist("Mix", "desc")
    assert playlist is not None
    assert collection.playlists[playlist.id].video_ids == ["v2", "v1"]
    assert playlist.thumbnail == collection.videos["v2"].thumbnail_url
    assert collection.selection == []


@pytest.mark.asyncio
async def test_create_with_explicit_ids(sync):
    collection = collection_with(sync, ["v1", "v2"])
    playlist = collection.create_playlist("Mix", "", ["v1", "v2"])
    assert collection.playlists[playlist.id].video_ids == ["v1", "v2"]


@pytest.mark.asyncio
async def test_create_refusals_make_no_network_call(fake_remote, sync):
    collection = collection_with(sync, ["v1"], [make_playlist("P", ["v1"], name="Mix")])
    assert collection.create_playlist("  ", "", ["v1"]) is None
    assert collection.create_playlist("New", "", []) is None
    assert collection.create_playlist("New") is None
    assert collection.create_playlist("mix", "", ["v1"]) is None
    await sync.flush()
    assert fake_remote.writes == []
    assert list(collection.playlists) == ["P"]


@pytest.mark.asyncio
async def test_delete_video_cascades(sync):
    collection = collection_with(sync, ["A", "B"], [make_playlist("P", ["A", "B"])])
    collection.select("A")
    assert collection.delete_video("A")
    assert "A" not in collection.videos
    assert collection.playlists["P"].video_ids == ["B"]
    assert collection.selection == []
    assert not collection.delete_video("A")


@pytest.mark.asyncio
async def test_delete_playing_video_advances(sync):
    collection = collection_with(sync, ["A", "B"], [make_playlist("P", ["A", "B"])])
    collection.play_playlist("P")
    collection.delete_video("A")
    assert collection.playback.current_video_id == "B"
    collection.delete_video("B")
    assert not collection.playback.is_open
    assert collection.playback.index is None


@pytest.mark.asyncio
async def test_reorder_resyncs_playback(fake_remote, sync):
    collection = collection_with(sync, ["W", "X", "Y"], [make_playlist("P", ["W", "X", "Y"])])
    collection.play_playlist("P")
    collection.playback.next()
    assert collection.playback.current_video_id == "X"
    collection.reorder_playlist("P", ["X", "W", "Y"])
    assert collection.playback.index == 0
    assert collection.playback.current_video_id == "X"
    await sync.flush()
    write = fake_remote.writes[-1]
    assert isinstance(write, PartialMerge)
    assert write.playlists[0].videos == ["X", "W", "Y"]


@pytest.mark.asyncio
async def test_append_persists_only_that_playlist(fake_remote, sync):
    collection = collection_with(sync, ["A", "B", "C"], [
        make_playlist("P1", ["A"]), make_playlist("P2", ["B"])])
    updated = collection.append_to_playlist("P1", ["A", "C", "B"])
    assert updated.video_ids == ["A", "C", "B"]
    await sync.flush()
    assert len(fake_remote.writes) == 1
    write = fake_remote.writes[0]
    assert isinstance(write, PartialMerge)
    assert [p.id for p in write.playlists] == ["P1"]
    assert write.videos == []


@pytest.mark.asyncio
async def test_append_uses_selection_by_default(sync):
    collection = collection_with(sync, ["A", "B"], [make_playlist("P1", ["A"])])
    collection.select("B")
    assert collection.append_to_playlist("P1").video_ids == ["A", "B"]


@pytest.mark.asyncio
async def test_remove_from_playlist(fake_remote, sync):
    collection = collection_with(sync, ["A", "B", "C"], [make_playlist("P", ["A", "B", "C"])])
    assert collection.remove_from_playlist("P", "B").video_ids == ["A", "C"]
    before = collection.playlists["P"]
    assert collection.remove_from_playlist("P", "B") is before
    await sync.flush()
    assert len(fake_remote.writes) == 1


@pytest.mark.asyncio
async def test_delete_playlist_waits_for_remote(fake_remote, sync):
    collection = collection_with(sync, ["A"], [make_playlist("P", ["A"])])
    collection.play_playlist("P")
    assert await collection.delete_playlist("P")
    assert "P" not in collection.playlists
    assert fake_remote.deleted == ["P"]
    assert not collection.playback.is_open


@pytest.mark.asyncio
async def test_delete_playlist_aborts_when_remote_fails(fake_remote, sync):
    collection = collection_with(sync, ["A"], [make_playlist("P", ["A"])])
    fake_remote.fail = True
    assert not await collection.delete_playlist("P")
    assert "P" in collection.playlists


@pytest.mark.asyncio
async def test_play_single_video(sync):
    collection = collection_with(sync, ["A"])
    assert collection.play_video("A")
    assert collection.playback.current_video_id == "A"
    assert not collection.play_video("missing")


@pytest.mark.asyncio
async def test_restore_replaces_state(fake_remote, sync):
    collection = collection_with(sync, ["A"])
    collection.play_video("A")
    collection.restore(Snapshot(videos=[make_video("Z")]))
    assert list(collection.videos) == ["Z"]
    assert not collection.playback.is_open
    await sync.flush()
    assert [v.id for v in fake_remote.writes[-1].videos] == ["Z"]


@pytest.mark.asyncio
async def test_append_to_playing_playlist_extends_playback(sync):
    collection = collection_with(sync, ["A", "B", "C"], [make_playlist("P", ["A"])])
    collection.play_playlist("P")
    collection.append_to_playlist("P", ["B", "C"])
    assert collection.playback.video_ids == ["A", "B", "C"]
    assert collection.playback.current_video_id == "A"
    collection.playback.on_ended()
    assert collection.playback.is_open
    assert collection.playback.current_video_id == "B"
