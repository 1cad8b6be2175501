from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column
from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator
from pydantic.alias_generators import to_camel
from .base import Base


class Video(BaseModel):
    """A collected video. Immutable once fetched, identified by ``id``."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1)
    title: str = ""
    thumbnail_url: str = Field(
        "",
        validation_alias=AliasChoices(
            "thumbnailUrl", "thumbnail_url", "thumbnail"),
        serialization_alias="thumbnailUrl",
    )
    duration: str = ""
    channel_title: str = ""
    published_at: str = ""
    source_url: str = Field(
        "",
        validation_alias=AliasChoices("sourceUrl", "source_url", "url"),
        serialization_alias="sourceUrl",
    )

    @field_validator(
        "title", "thumbnail_url", "duration", "channel_title", "published_at", "source_url",
        mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return "" if value is None else value


class Videos(Base):
    __tablename__: str = "videos"
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(Text, default="")
    thumbnail: Mapped[str] = mapped_column(Text, default="")
    duration: Mapped[str] = mapped_column(String(64), default="")
    channel_title: Mapped[str] = mapped_column(Text, default="")
    published_at: Mapped[str] = mapped_column(String(64), default="")
    source_url: Mapped[str] = mapped_column(Text, default="")

    def to_model(self) -> Video:
        return Video(
            id=self.id,
            title=self.title,
            thumbnail_url=self.thumbnail,
            duration=self.duration,
            channel_title=self.channel_title,
            published_at=self.published_at,
            source_url=self.source_url,
        )

    def update_from(self, video: Video) -> None:
        self.title = video.title
        self.thumbnail = video.thumbnail_url
        self.duration = video.duration
        self.channel_title = video.channel_title
        self.published_at = video.published_at
        self.source_url = video.source_url

    @classmethod
    def from_model(cls, video: Video) -> "Videos":
        row = cls(id=video.id)
        row.update_from(video)
        return row
