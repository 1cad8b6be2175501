"""
In-memory collection state: videos, playlists, the selection used to build
playlists, and playback. Every mutation is handed to the SyncPolicy.
"""
import asyncio
from collections.abc import Iterable

from vidshelf.logger import logger
from vidshelf.models import Snapshot, Video, Playlist
from . import ordering
from .metadata import BulkResult, video_from_url, videos_from_text
from .playback import PlaybackSequencer
from .sync import SyncPolicy


class CollectionState:
    def __init__(self, sync: SyncPolicy, snapshot: Snapshot | None = None,
                 playback: PlaybackSequencer | None = None):
        self.sync = sync
        self.playback = playback or PlaybackSequencer()
        self.videos: dict[str, Video] = {}
        self.playlists: dict[str, Playlist] = {}
        self._selection: dict[str, None] = {}
        if snapshot is not None:
            self._adopt(snapshot)

    @classmethod
    async def open(cls, sync: SyncPolicy,
                   playback: PlaybackSequencer | None = None) -> "CollectionState":
        """Load the stored collection and wrap it."""
        return cls(sync, await sync.load(), playback)

    def _adopt(self, snapshot: Snapshot) -> None:
        self.videos = {}
        for video in snapshot.videos:
            self.videos.setdefault(video.id, video)
        self.playlists = {}
        for playlist in snapshot.playlists:
            known = self._known(playlist.video_ids)
            if known != playlist.video_ids:
                playlist = playlist.model_copy(update={"video_ids": known})
            self.playlists[playlist.id] = playlist
        self._selection = {vid: None for vid in self._selection if vid in self.videos}

    def _known(self, video_ids: Iterable[str]) -> list[str]:
        return [vid for vid in ordering.unique_ids(video_ids) if vid in self.videos]

    def snapshot(self) -> Snapshot:
        return Snapshot(videos=list(self.videos.values()),
                        playlists=list(self.playlists.values()))

    def _changed(self) -> None:
        self.sync.schedule(self.snapshot())

    def _playlist_changed(self, playlist: Playlist) -> None:
        self.playlists[playlist.id] = playlist
        self.sync.persist_playlist(self.snapshot(), playlist)

    def restore(self, snapshot: Snapshot) -> None:
        """Replace the whole collection, e.g. from a backup file."""
        self.playback.stop()
        self._adopt(snapshot)
        self._changed()

    # Videos

    def add_video(self, video: Video) -> bool:
        if video.id in self.videos:
            return False
        self.videos[video.id] = video
        self._changed()
        return True

    async def add_from_url(self, url: str) -> Video:
        """Fetch metadata for a link and add the video.

        Raises:
            ValueError: If the link is not a usable YouTube URL
        """
        video = await asyncio.to_thread(video_from_url, url)
        self.add_video(video)
        return self.videos[video.id]

    async def add_from_text(self, text: str) -> BulkResult:
        result = await videos_from_text(text, known_ids=set(self.videos))
        if result.videos:
            for video in result.videos:
                self.videos.setdefault(video.id, video)
            self._changed()
        logger.info("Bulk add finished", extra={
            "success": result.success, "failed": result.failed,
            "duplicates": result.duplicates})
        return result

    def delete_video(self, video_id: str) -> bool:
        """Remove a video everywhere: collection, selection, playlists and playback."""
        if video_id not in self.videos:
            return False
        del self.videos[video_id]
        self._selection.pop(video_id, None)
        for playlist_id, playlist in list(self.playlists.items()):
            self.playlists[playlist_id] = ordering.remove_video(playlist, video_id)
        self.playback.drop(video_id)
        self._changed()
        return True

    # Selection

    @property
    def selection(self) -> list[str]:
        return list(self._selection)

    def select(self, video_id: str) -> None:
        if video_id in self.videos:
            self._selection.setdefault(video_id, None)

    def deselect(self, video_id: str) -> None:
        self._selection.pop(video_id, None)

    def clear_selection(self) -> None:
        self._selection.clear()

    # Playlists

    def _name_taken(self, name: str) -> bool:
        folded = name.strip().casefold()
        return any(p.name.casefold() == folded for p in self.playlists.values())

    def create_playlist(self, name: str, description: str = "",
                        video_ids: Iterable[str] | None = None) -> Playlist | None:
        """Create a playlist from the given videos, or from the selection.

        Returns None without touching anything when the name is blank or
        already used, or when no known videos are given.
        """
        from_selection = video_ids is None
        ids = self._known(self._selection if from_selection else video_ids)
        if self._name_taken(name):
            logger.info("Playlist name %r is already used", name.strip())
            return None
        first = self.videos[ids[0]] if ids else None
        playlist = ordering.create(
            name, description, ids, thumbnail=first.thumbnail_url if first else None)
        if playlist is None:
            logger.info("Refusing to create playlist without a name or videos")
            return None
        self.playlists[playlist.id] = playlist
        if from_selection:
            self.clear_selection()
        self._changed()
        return playlist

    def reorder_playlist(self, playlist_id: str, new_order: Iterable[str]) -> Playlist | None:
        playlist = self.playlists.get(playlist_id)
        if playlist is None:
            return None
        playlist = ordering.reorder(playlist, self._known(new_order))
        self._playlist_changed(playlist)
        self.playback.resync(playlist_id, playlist.video_ids)
        return playlist

    def append_to_playlist(self, playlist_id: str,
                           video_ids: Iterable[str] | None = None) -> Playlist | None:
        """Append videos (default: the selection) not already in the playlist."""
        playlist = self.playlists.get(playlist_id)
        if playlist is None:
            return None
        ids = self._known(self._selection if video_ids is None else video_ids)
        updated = ordering.append_distinct(playlist, ids)
        if updated is not playlist:
            self._playlist_changed(updated)
            self.playback.resync(playlist_id, updated.video_ids)
        return updated

    def remove_from_playlist(self, playlist_id: str, video_id: str) -> Playlist | None:
        playlist = self.playlists.get(playlist_id)
        if playlist is None:
            return None
        updated = ordering.remove_video(playlist, video_id)
        if updated is not playlist:
            self._playlist_changed(updated)
            if self.playback.playlist_id == playlist_id:
                self.playback.drop(video_id)
        return updated

    async def delete_playlist(self, playlist_id: str) -> bool:
        """Delete a playlist remotely first; local state is kept if that fails."""
        if playlist_id not in self.playlists:
            return False
        if not await self.sync.delete_playlist(playlist_id):
            return False
        del self.playlists[playlist_id]
        if self.playback.playlist_id == playlist_id:
            self.playback.stop()
        self._changed()
        return True

    # Playback

    def play_video(self, video_id: str) -> bool:
        if video_id not in self.videos:
            return False
        return self.playback.play_single(video_id)

    def play_playlist(self, playlist_id: str) -> bool:
        playlist = self.playlists.get(playlist_id)
        if playlist is None:
            return False
        return self.playback.play(playlist)
