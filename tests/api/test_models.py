import pytest
from pydantic import ValidationError

from vidshelf.models import (
    Playlist, Snapshot, Video, FullReplace, PartialMerge, PlaylistPatch,
    parse_write_request, dump_write_request,
)


class TestWriteRequests:
    def test_explicit_replace(self):
        write = parse_write_request({"mode": "replace", "videos": [{"id": "A"}]})
        assert isinstance(write, FullReplace)
        assert [v.id for v in write.videos] == ["A"]

    @pytest.mark.parametrize("mode", [None, "merge", "something-else"])
    def test_anything_else_is_merge(self, mode):
        body = {"videos": []} if mode is None else {"mode": mode}
        assert isinstance(parse_write_request(body), PartialMerge)

    def test_non_object_body(self):
        with pytest.raises(ValueError):
            parse_write_request([1, 2, 3])

    def test_patch_without_videos_keeps_none(self):
        write = parse_write_request({"playlists": [{"id": "P1", "name": "x"}]})
        assert write.playlists[0].videos is None

    def test_patch_video_refs_are_normalized(self):
        write = parse_write_request({"playlists": [{"id": "P1", "videos": ["A", {"id": "B"}, {}, 7]}]})
        assert write.playlists[0].videos == ["A", "B"]

    def test_entries_without_id_are_dropped(self):
        write = parse_write_request({"videos": [{"title": "x"}, {"id": "A"}], "playlists": [{"name": "x"}]})
        assert [v.id for v in write.videos] == ["A"]
        assert write.playlists == []

    def test_merge_dump_omits_unset_fields(self):
        body = dump_write_request(PartialMerge(playlists=[PlaylistPatch(id="P1", description="d")]))
        assert body["mode"] == "merge"
        assert body["playlists"] == [{"id": "P1", "description": "d"}]

    def test_replace_from_snapshot_carries_ordering(self):
        snapshot = Snapshot(videos=[Video(id="A"), Video(id="B")],
                            playlists=[Playlist(id="P1", name="n", video_ids=["B", "A"])])
        body = dump_write_request(FullReplace.from_snapshot(snapshot))
        assert body["mode"] == "replace"
        assert body["playlists"][0]["videos"] == ["B", "A"]
        assert body["videos"][0]["thumbnailUrl"] == ""

    def test_built_models_survive_validation(self):
        snapshot = Snapshot(videos=[Video(id="A")],
                            playlists=[Playlist(id="P1", name="n", video_ids=["A"])])
        replace = FullReplace.from_snapshot(snapshot)
        assert [v.id for v in replace.videos] == ["A"]
        assert [(p.id, p.videos) for p in replace.playlists] == [("P1", ["A"])]
        merge = PartialMerge(videos=[Video(id="A")],
                             playlists=[PlaylistPatch(id="P1", videos=["A"])])
        assert not merge.is_empty()
        assert [p.id for p in merge.playlists] == ["P1"]


class TestPlaylist:
    def test_legacy_resolved_videos_become_ids(self):
        playlist = Playlist.model_validate({
            "id": "P1", "name": "Old", "description": "",
            "videos": [{"id": "A", "title": "a"}, {"id": "B"}],
            "createdAt": "2024-05-01T10:00:00Z",
        })
        assert playlist.video_ids == ["A", "B"]
        assert playlist.updated_at == playlist.created_at

    def test_camel_case_round_trip_keys(self):
        playlist = Playlist(id="P1", name="n", video_ids=["A"])
        dumped = playlist.model_dump(mode="json", by_alias=True)
        assert dumped["videoIds"] == ["A"]
        assert "createdAt" in dumped

    def test_blank_id_is_rejected(self):
        with pytest.raises(ValidationError):
            Playlist(id="", name="n")


def test_video_none_fields_become_empty():
    video = Video.model_validate({"id": "A", "title": None, "channelTitle": None})
    assert video.title == ""
    assert video.channel_title == ""


def test_snapshot_is_empty():
    assert Snapshot().is_empty()
    assert not Snapshot(videos=[Video(id="A")]).is_empty()
