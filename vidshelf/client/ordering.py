"""Operations over a playlist's ordered video ids.

Each function returns a new Playlist; inputs are never mutated.
"""
from collections.abc import Iterable
from uuid import uuid4

from vidshelf.models import Playlist
from vidshelf.models.playlist import utcnow


def unique_ids(video_ids: Iterable[str]) -> list[str]:
    """Drop repeated ids, keeping the first occurrence."""
    return list(dict.fromkeys(video_ids))


def create(name: str, description: str, video_ids: Iterable[str],
           thumbnail: str | None = None) -> Playlist | None:
    """A new playlist in the given order, or None for a blank name or no videos."""
    name = name.strip()
    ordered = unique_ids(video_ids)
    if not name or not ordered:
        return None
    now = utcnow()
    return Playlist(
        id=uuid4().hex,
        name=name,
        description=description.strip(),
        video_ids=ordered,
        created_at=now,
        updated_at=now,
        thumbnail=thumbnail,
    )


def _with_ids(playlist: Playlist, video_ids: list[str]) -> Playlist:
    return playlist.model_copy(update={"video_ids": video_ids, "updated_at": utcnow()})


def reorder(playlist: Playlist, new_order: Iterable[str]) -> Playlist:
    """Replace the whole ordering with ``new_order``."""
    return _with_ids(playlist, unique_ids(new_order))


def append_distinct(playlist: Playlist, video_ids: Iterable[str]) -> Playlist:
    """Append the ids not already present, in the order given."""
    existing = set(playlist.video_ids)
    additions = [vid for vid in unique_ids(video_ids) if vid not in existing]
    if not additions:
        return playlist
    return _with_ids(playlist, [*playlist.video_ids, *additions])


def remove_video(playlist: Playlist, video_id: str) -> Playlist:
    """Drop one id, keeping the order of the rest."""
    if video_id not in playlist.video_ids:
        return playlist
    return _with_ids(playlist, [vid for vid in playlist.video_ids if vid != video_id])
