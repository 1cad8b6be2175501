from datetime import datetime, timezone
from typing import Any
from sqlalchemy import String, Text, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from .base import Base
from .video import Video


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def video_refs(entries: Any) -> list[str]:
    """Normalize a list of ``id`` strings or ``{"id": ...}`` objects to ids.

    Entries without a usable id are skipped.
    """
    if not isinstance(entries, list):
        return []
    ids: list[str] = []
    for entry in entries:
        ref = entry if isinstance(entry, str) else (
            entry.get("id") if isinstance(entry, dict) else None)
        if isinstance(ref, str) and ref:
            ids.append(ref)
    return ids


class Playlist(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1)
    name: str = ""
    description: str = ""
    video_ids: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    thumbnail: str | None = None

    @model_validator(mode="before")
    @classmethod
    def accept_resolved_videos(cls, data: Any) -> Any:
        # Older snapshots store the resolved video objects instead of ids
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "videoIds" not in data and "video_ids" not in data and "videos" in data:
            data["video_ids"] = video_refs(data.pop("videos"))
        for key in ("createdAt", "updatedAt", "created_at", "updated_at"):
            if not data.get(key):
                data.pop(key, None)
        if "updatedAt" not in data and "updated_at" not in data:
            created = data.get("createdAt", data.get("created_at"))
            if created is not None:
                data["updated_at"] = created
        for key in ("name", "description"):
            if data.get(key) is None:
                data.pop(key, None)
        return data


class PlaylistDetails(Playlist):
    """Playlist with its ordering resolved to full video records."""
    videos: list[Video] = Field(default_factory=list)


class PlaylistVideos(Base):
    __tablename__: str = "playlist_videos"
    playlist_id: Mapped[str] = mapped_column(
        ForeignKey("playlists.id", ondelete="CASCADE"), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    video_id: Mapped[str] = mapped_column(String(64), index=True)


class Playlists(Base):
    __tablename__: str = "playlists"
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(Text, default="")
    description: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True)
    thumbnail: Mapped[str | None] = mapped_column(Text, nullable=True)
