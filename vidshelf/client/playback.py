"""
Sequential playback over a playlist.

Navigation does not wrap: ``next()`` on the last item and ``previous()`` on
the first are no-ops. When the player reports the last item ended, playback
stops. A single video is played as a one-item playlist.
"""
from collections.abc import Callable, Iterable
from typing import Protocol

from vidshelf.logger import logger
from vidshelf.models import Playlist

SINGLE_PLAY_PREFIX = "single:"


class Player(Protocol):
    """An embedded player that shows one video at a time."""

    def load(self, video_id: str) -> None: ...

    def destroy(self) -> None: ...


class PlaybackSequencer:
    def __init__(self, player_factory: Callable[[], Player] | None = None):
        self.player_factory = player_factory
        self.player: Player | None = None
        self.playlist_id: str | None = None
        self.video_ids: list[str] = []
        self.index: int | None = None
        self.is_open: bool = False

    @property
    def current_video_id(self) -> str | None:
        if self.index is None or not (0 <= self.index < len(self.video_ids)):
            return None
        return self.video_ids[self.index]

    @property
    def has_next(self) -> bool:
        return self.index is not None and self.index < len(self.video_ids) - 1

    @property
    def has_previous(self) -> bool:
        return self.index is not None and self.index > 0

    def is_playing(self, playlist_id: str) -> bool:
        return self.playlist_id == playlist_id and self.index is not None

    def play(self, playlist: Playlist) -> bool:
        """Start a playlist from its first video. Empty playlists are refused."""
        if not playlist.video_ids:
            logger.info("Refusing to play empty playlist %s", playlist.id)
            return False
        self.playlist_id = playlist.id
        self.video_ids = list(playlist.video_ids)
        self.index = 0
        self.is_open = True
        self._show()
        return True

    def play_single(self, video_id: str) -> bool:
        return self.play(Playlist(
            id=f"{SINGLE_PLAY_PREFIX}{video_id}", name=video_id, video_ids=[video_id]))

    def next(self) -> bool:
        if not self.has_next:
            return False
        self.index += 1
        self._show()
        return True

    def previous(self) -> bool:
        if not self.has_previous:
            return False
        self.index -= 1
        self._show()
        return True

    def on_ended(self) -> None:
        if not self.next():
            self.stop()

    def on_error(self, error: object = None) -> None:
        # Unplayable videos are skipped like finished ones
        logger.warning("Player error on video %s: %s", self.current_video_id, error)
        self.on_ended()

    def close(self) -> None:
        """Hide the player and release the embedded instance."""
        self.is_open = False
        if self.player is not None:
            try:
                self.player.destroy()
            finally:
                self.player = None

    def stop(self) -> None:
        """Close the player and forget the playback position."""
        self.close()
        self.playlist_id = None
        self.video_ids = []
        self.index = None

    def resync(self, playlist_id: str, new_order: Iterable[str]) -> None:
        """Follow a reorder of the playing playlist, keeping the same video on screen."""
        if self.playlist_id != playlist_id:
            return
        current = self.current_video_id
        self.video_ids = list(new_order)
        if current is not None and current in self.video_ids:
            self.index = self.video_ids.index(current)
        elif self.video_ids:
            self.index = 0
            self._show()
        else:
            self.stop()

    def drop(self, video_id: str) -> None:
        """Remove a deleted video from the playing sequence."""
        if video_id not in self.video_ids:
            return
        position = self.video_ids.index(video_id)
        was_current = position == self.index
        self.video_ids = [vid for vid in self.video_ids if vid != video_id]
        if not was_current:
            if self.index is not None and position < self.index:
                self.index -= 1
            return
        # The following video slid into the current position
        if self.index is not None and self.index < len(self.video_ids):
            self._show()
        else:
            self.stop()

    def _show(self) -> None:
        video_id = self.current_video_id
        if video_id is None or not self.is_open:
            return
        if self.player is None and self.player_factory is not None:
            self.player = self.player_factory()
        if self.player is not None:
            self.player.load(video_id)
