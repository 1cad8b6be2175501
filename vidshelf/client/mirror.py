"""Local mirror of the collection: a snapshot blob in a key-value store."""
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from vidshelf.logger import logger
from vidshelf.models import Snapshot
from vidshelf.models.playlist import utcnow


class MemoryStore:
    """Key-value store kept in a dict."""

    def __init__(self, data: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """Key-value store persisted as one JSON object on disk.

    Writes go to a temporary file that replaces the existing one, so a crash
    mid-write leaves the previous contents intact.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read mirror file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


class LocalMirror:
    def __init__(self, store: MemoryStore | JsonFileStore, key: str):
        self.store = store
        self.key = key

    def save(self, snapshot: Snapshot) -> bool:
        """Serialize the snapshot under the mirror key. Returns False on failure."""
        blob: dict[str, Any] = snapshot.model_dump(mode="json", by_alias=True)
        blob["updatedAt"] = utcnow().isoformat()
        try:
            self.store.set(self.key, json.dumps(blob))
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Mirror write failed: %s", e)
            return False
        return True

    def load(self) -> Snapshot | None:
        """The mirrored snapshot, or None when absent or malformed."""
        raw = self.store.get(self.key)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Mirror blob is not valid JSON, ignoring it")
            return None
        if not isinstance(data, dict) or not isinstance(data.get("videos"), list) \
                or not isinstance(data.get("playlists"), list):
            return None
        try:
            return Snapshot.model_validate(data)
        except ValidationError as e:
            logger.warning("Mirror blob failed validation: %s", e)
            return None
