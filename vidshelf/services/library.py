"""
Library service: the tabular store behind the collection API.
"""
from collections.abc import Sequence

from sqlalchemy import select, delete, func, inspect

from vidshelf.logger import logger
from vidshelf.models import db
from vidshelf.models import (
    Videos, Playlists, PlaylistVideos, Video, PlaylistDetails,
    FullReplace, PartialMerge, PlaylistPatch, WriteAck, utcnow,
)

EMPTY_WRITE_REASON = (
    'Empty payload ignored to protect existing data. Send mode:"replace" '
    "to wipe intentionally or include data to merge."
)


class LibraryService:
    """Service class for reading and writing the stored collection."""

    @staticmethod
    def counts() -> tuple[int, int]:
        """Number of stored videos and playlists."""
        videos = db.session.query(func.count(Videos.id)).scalar() or 0
        playlists = db.session.query(func.count(Playlists.id)).scalar() or 0
        return videos, playlists

    @staticmethod
    def get_videos() -> Sequence[Videos]:
        return db.session.execute(select(Videos)).scalars().all()

    @staticmethod
    def get_playlists() -> Sequence[Playlists]:
        return db.session.execute(select(Playlists)).scalars().all()

    @staticmethod
    def get_ordered_videos(playlist_id: str) -> list[Video]:
        """A playlist's videos in position order.

        Ordering rows pointing at videos that no longer exist are skipped.
        """
        rows = db.session.execute(
            select(Videos)
            .join(PlaylistVideos, PlaylistVideos.video_id == Videos.id)
            .where(PlaylistVideos.playlist_id == playlist_id)
            .order_by(PlaylistVideos.position.asc())
        ).scalars().all()
        return [row.to_model() for row in rows]

    @staticmethod
    def get_snapshot() -> dict:
        """The whole collection with each playlist's ordering resolved."""
        videos = [row.to_model() for row in LibraryService.get_videos()]
        playlists: list[PlaylistDetails] = []
        for row in LibraryService.get_playlists():
            ordered = LibraryService.get_ordered_videos(row.id)
            playlists.append(PlaylistDetails(
                id=row.id,
                name=row.name or "",
                description=row.description or "",
                created_at=row.created_at or utcnow(),
                updated_at=row.updated_at or row.created_at or utcnow(),
                thumbnail=row.thumbnail,
                video_ids=[video.id for video in ordered],
                videos=ordered,
            ))
        return {
            "version": 1,
            "updatedAt": utcnow().isoformat(),
            "videos": [v.model_dump(mode="json", by_alias=True) for v in videos],
            "playlists": [p.model_dump(mode="json", by_alias=True) for p in playlists],
        }

    @staticmethod
    def _write_ordering(playlist_id: str, video_ids: list[str]) -> None:
        db.session.execute(
            delete(PlaylistVideos).where(PlaylistVideos.playlist_id == playlist_id))
        for position, video_id in enumerate(video_ids):
            db.session.add(PlaylistVideos(
                playlist_id=playlist_id, video_id=video_id, position=position))

    @staticmethod
    def apply(write: FullReplace | PartialMerge) -> WriteAck:
        """Apply a write request in a single transaction."""
        if isinstance(write, PartialMerge) and write.is_empty():
            videos, playlists = LibraryService.counts()
            if videos + playlists > 0:
                logger.warning("Ignoring empty merge write against non-empty store", extra={
                    "videos": videos, "playlists": playlists})
                return WriteAck(ok=False, ignored=True, reason=EMPTY_WRITE_REASON)
            return WriteAck(ok=True, nochange=True)

        try:
            if isinstance(write, FullReplace):
                LibraryService._replace(write)
            else:
                LibraryService._merge(write)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        logger.info("Applied %s write", write.mode, extra={
            "videos": len(write.videos), "playlists": len(write.playlists)})
        return WriteAck(ok=True, mode=write.mode, updated_at=utcnow())

    @staticmethod
    def _replace(write: FullReplace) -> None:
        db.session.execute(delete(PlaylistVideos))
        db.session.execute(delete(Playlists))
        db.session.execute(delete(Videos))
        for video in write.videos:
            db.session.add(Videos.from_model(video))
        seen: set[str] = set()
        for record in write.playlists:
            if record.id in seen:
                continue
            seen.add(record.id)
            db.session.add(Playlists(
                id=record.id,
                name=record.name,
                description=record.description,
                created_at=record.created_at,
                updated_at=record.updated_at,
                thumbnail=record.thumbnail,
            ))
            for position, video_id in enumerate(record.videos):
                db.session.add(PlaylistVideos(
                    playlist_id=record.id, video_id=video_id, position=position))

    @staticmethod
    def _merge(write: PartialMerge) -> None:
        for video in write.videos:
            row = db.session.get(Videos, video.id)
            if row is None:
                db.session.add(Videos.from_model(video))
            else:
                row.update_from(video)
        for patch in write.playlists:
            LibraryService._upsert_playlist(patch)
            db.session.flush()
            if patch.videos is not None:
                LibraryService._write_ordering(patch.id, patch.videos)

    @staticmethod
    def _upsert_playlist(patch: PlaylistPatch) -> Playlists:
        row = db.session.get(Playlists, patch.id)
        if row is None:
            row = Playlists(id=patch.id, name="", description="")
            db.session.add(row)
        if patch.name is not None:
            row.name = patch.name
        if patch.description is not None:
            row.description = patch.description
        if patch.created_at is not None:
            row.created_at = patch.created_at
        if patch.thumbnail is not None:
            row.thumbnail = patch.thumbnail
        row.updated_at = patch.updated_at or utcnow()
        return row

    @staticmethod
    def delete_playlist(playlist_id: str) -> None:
        """Delete a playlist and its ordering rows."""
        try:
            db.session.execute(
                delete(PlaylistVideos).where(PlaylistVideos.playlist_id == playlist_id))
            db.session.execute(delete(Playlists).where(Playlists.id == playlist_id))
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        logger.info("Deleted playlist %s", playlist_id)

    @staticmethod
    def get_tables() -> list[str]:
        return sorted(inspect(db.engine).get_table_names())
