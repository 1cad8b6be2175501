from datetime import datetime
from typing import Annotated, Any, Literal, Union
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from pydantic.alias_generators import to_camel
from .video import Video
from .playlist import Playlist, video_refs


class Snapshot(BaseModel):
    """The full collection state exchanged with the remote store and the mirror."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    videos: list[Video] = Field(default_factory=list)
    playlists: list[Playlist] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.videos and not self.playlists


def _has_id(entry: Any) -> bool:
    if isinstance(entry, dict):
        return bool(entry.get("id"))
    if isinstance(entry, BaseModel):
        return bool(getattr(entry, "id", None))
    return False


def _with_ids(entries: Any) -> list[Any]:
    """Keep raw dicts and built models that carry an id."""
    if not isinstance(entries, list):
        return []
    return [entry for entry in entries if _has_id(entry)]


class _WriteEntry(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., min_length=1)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    thumbnail: str | None = None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def blank_as_none(cls, value):
        return value or None


class PlaylistRecord(_WriteEntry):
    """A playlist row as inserted by a replace write."""
    name: str = ""
    description: str = ""
    videos: list[str] = Field(default_factory=list)

    @field_validator("videos", mode="before")
    @classmethod
    def normalize_videos(cls, value):
        return video_refs(value)

    @field_validator("name", "description", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return "" if value is None else value


class PlaylistPatch(_WriteEntry):
    """A playlist upsert for a merge write.

    Omitted fields keep their stored value. ``videos`` set to a list replaces
    the playlist's ordering, ``None`` leaves it untouched.
    """
    name: str | None = None
    description: str | None = None
    videos: list[str] | None = None

    @field_validator("videos", mode="before")
    @classmethod
    def normalize_videos(cls, value):
        if value is None:
            return None
        return video_refs(value)

    @classmethod
    def from_playlist(cls, playlist: Playlist) -> "PlaylistPatch":
        return cls(
            id=playlist.id,
            name=playlist.name,
            description=playlist.description,
            created_at=playlist.created_at,
            updated_at=playlist.updated_at,
            thumbnail=playlist.thumbnail,
            videos=list(playlist.video_ids),
        )


class FullReplace(BaseModel):
    """Wipe every row, then insert exactly this payload."""
    mode: Literal["replace"] = "replace"
    videos: list[Video] = Field(default_factory=list)
    playlists: list[PlaylistRecord] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def drop_entries_without_id(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            for key in ("videos", "playlists"):
                if key in data:
                    data[key] = _with_ids(data[key])
        return data

    @field_validator("videos")
    @classmethod
    def unique_videos(cls, videos: list[Video]) -> list[Video]:
        seen: dict[str, Video] = {}
        for video in videos:
            seen.setdefault(video.id, video)
        return list(seen.values())

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "FullReplace":
        return cls(
            videos=list(snapshot.videos),
            playlists=[
                PlaylistRecord(
                    id=p.id,
                    name=p.name,
                    description=p.description,
                    created_at=p.created_at,
                    updated_at=p.updated_at,
                    thumbnail=p.thumbnail,
                    videos=list(p.video_ids),
                )
                for p in snapshot.playlists
            ],
        )


class PartialMerge(BaseModel):
    """Upsert videos and playlists by id without touching anything else."""
    mode: Literal["merge"] = "merge"
    videos: list[Video] = Field(default_factory=list)
    playlists: list[PlaylistPatch] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def drop_entries_without_id(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            for key in ("videos", "playlists"):
                if key in data:
                    data[key] = _with_ids(data[key])
        return data

    @field_validator("videos")
    @classmethod
    def last_video_wins(cls, videos: list[Video]) -> list[Video]:
        latest: dict[str, Video] = {}
        for video in videos:
            latest[video.id] = video
        return list(latest.values())

    def is_empty(self) -> bool:
        return not self.videos and not self.playlists


WriteRequest = Annotated[Union[FullReplace, PartialMerge], Field(discriminator="mode")]
write_request_adapter: TypeAdapter[FullReplace | PartialMerge] = TypeAdapter(WriteRequest)


def parse_write_request(body: Any) -> FullReplace | PartialMerge:
    """Build a write request from a decoded JSON body.

    Anything but an explicit ``"replace"`` mode is a merge.
    """
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    data = dict(body)
    data["mode"] = "replace" if body.get("mode") == "replace" else "merge"
    return write_request_adapter.validate_python(data)


def dump_write_request(write: FullReplace | PartialMerge) -> dict[str, Any]:
    """JSON-ready body for a write request.

    Merge patches omit unset fields so the store keeps what it has.
    """
    body = write.model_dump(mode="json", by_alias=True)
    if isinstance(write, PartialMerge):
        body["playlists"] = [
            patch.model_dump(mode="json", by_alias=True, exclude_none=True)
            for patch in write.playlists
        ]
    return body


class WriteAck(BaseModel):
    """Reply to a write request."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ok: bool
    mode: str | None = None
    updated_at: datetime | None = None
    ignored: bool = False
    nochange: bool = False
    reason: str | None = None
