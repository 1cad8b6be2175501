from vidshelf.client import ordering
from tests.factories import make_playlist


def test_create_keeps_selection_order():
    playlist = ordering.create("  Mix ", " desc ", ["v2", "v1", "v2"])
    assert playlist is not None
    assert playlist.name == "Mix"
    assert playlist.description == "desc"
    assert playlist.video_ids == ["v2", "v1"]
    assert playlist.created_at == playlist.updated_at


def test_create_refuses_blank_name_or_no_videos():
    assert ordering.create("   ", "", ["v1"]) is None
    assert ordering.create("Mix", "", []) is None


def test_create_assigns_unique_ids():
    first = ordering.create("a", "", ["v1"])
    second = ordering.create("b", "", ["v1"])
    assert first.id != second.id


def test_reorder_is_a_full_replacement():
    playlist = make_playlist("P", ["a", "b", "c"])
    assert ordering.reorder(playlist, ["c", "a"]).video_ids == ["c", "a"]
    assert playlist.video_ids == ["a", "b", "c"]


def test_append_distinct_only_adds_new_ids():
    playlist = make_playlist("P", ["a", "b"])
    updated = ordering.append_distinct(playlist, ["b", "d", "c", "d"])
    assert updated.video_ids == ["a", "b", "d", "c"]


def test_append_distinct_without_new_ids_is_unchanged():
    playlist = make_playlist("P", ["a", "b"])
    assert ordering.append_distinct(playlist, ["a"]) is playlist


def test_remove_video_preserves_order():
    playlist = make_playlist("P", ["a", "b", "c"])
    assert ordering.remove_video(playlist, "b").video_ids == ["a", "c"]


def test_remove_missing_video_is_unchanged():
    playlist = make_playlist("P", ["a", "b"])
    assert ordering.remove_video(playlist, "zzz") is playlist
