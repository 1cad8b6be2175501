"""
Synchronization between the in-memory collection, the local mirror and the
remote store.

The mirror is written on every change. Remote writes are debounced: each
change bumps a write generation and restarts the delay, and a delayed write
only goes out if no newer change arrived while it waited. Remote writes are
sent one at a time in the order they were issued.
"""
import asyncio
from collections.abc import Coroutine
from typing import Any

from vidshelf.logger import logger
from vidshelf.models import Snapshot, Playlist, FullReplace, PartialMerge, PlaylistPatch, WriteAck
from .mirror import LocalMirror, JsonFileStore
from .remote import RemoteStoreClient, RemoteStoreError
from .settings import SyncSettings


class SyncPolicy:
    def __init__(self, remote: RemoteStoreClient, mirror: LocalMirror,
                 debounce_seconds: float = 0.3):
        self.remote = remote
        self.mirror = mirror
        self.debounce_seconds = debounce_seconds
        self.generation = 0
        self._latest: Snapshot | None = None
        self._pending: asyncio.Task | None = None
        self._in_flight: set[asyncio.Task] = set()
        # Writes reach the store one at a time, in the order they were issued
        self._send_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: SyncSettings) -> "SyncPolicy":
        return cls(
            RemoteStoreClient(settings.remote_url, settings.request_timeout),
            LocalMirror(JsonFileStore(settings.mirror_path), settings.mirror_key),
            settings.debounce_seconds,
        )

    async def load(self) -> Snapshot:
        """Remote data if there is any, else the mirror, else an empty collection."""
        try:
            snapshot = await asyncio.to_thread(self.remote.fetch_snapshot)
        except RemoteStoreError as e:
            logger.warning("Remote load failed, falling back to mirror: %s", e)
            snapshot = None

        if snapshot is not None and not snapshot.is_empty():
            logger.info("Loaded collection from remote store", extra={
                "videos": len(snapshot.videos), "playlists": len(snapshot.playlists)})
            self.mirror.save(snapshot)
            return snapshot

        mirrored = self.mirror.load()
        if mirrored is not None:
            logger.info("Loaded collection from local mirror", extra={
                "videos": len(mirrored.videos), "playlists": len(mirrored.playlists)})
            return mirrored

        logger.info("No stored collection found, starting empty")
        return Snapshot()

    @property
    def has_pending_write(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def schedule(self, snapshot: Snapshot) -> None:
        """Mirror the snapshot now and push it remotely once changes settle.

        Must be called from a running event loop.
        """
        self.mirror.save(snapshot)
        self._latest = snapshot
        self.generation += 1
        if self.has_pending_write:
            self._pending.cancel()
        self._pending = asyncio.get_running_loop().create_task(
            self._push_later(self.generation, snapshot))

    def persist_playlist(self, snapshot: Snapshot, playlist: Playlist) -> None:
        """Mirror the snapshot and push only one playlist's ordering.

        A full write that is still waiting would carry the old ordering, so
        it is rescheduled with the new snapshot instead.
        """
        if self.has_pending_write:
            self.schedule(snapshot)
            return
        self.mirror.save(snapshot)
        self._latest = snapshot
        self._track(self._send(PartialMerge(playlists=[PlaylistPatch.from_playlist(playlist)])))

    async def delete_playlist(self, playlist_id: str) -> bool:
        """Delete a playlist remotely. Returns whether the store confirmed it."""
        try:
            await asyncio.to_thread(self.remote.delete_playlist, playlist_id)
        except RemoteStoreError as e:
            logger.error("Remote delete of playlist %s failed: %s", playlist_id, e)
            return False
        return True

    async def flush(self) -> None:
        """Send a waiting write immediately and wait for writes in flight."""
        if self.has_pending_write and self._latest is not None:
            self._pending.cancel()
            self._pending = None
            self._track(self._send(FullReplace.from_snapshot(self._latest)))
        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    async def _push_later(self, generation: int, snapshot: Snapshot) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if generation != self.generation:
            return
        self._pending = None
        self._track(self._send(FullReplace.from_snapshot(snapshot)))

    def _track(self, coro: Coroutine[Any, Any, WriteAck | None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _send(self, write: FullReplace | PartialMerge) -> WriteAck | None:
        async with self._send_lock:
            try:
                ack = await asyncio.to_thread(self.remote.write, write)
            except RemoteStoreError as e:
                logger.warning("Remote %s write failed: %s", write.mode, e)
                return None
        if not ack.ok:
            logger.warning("Remote store did not apply %s write: %s", write.mode, ack.reason)
        return ack
