"""Export and import of collection backup files."""
import json
from pathlib import Path

from pydantic import ValidationError

from vidshelf.logger import logger
from vidshelf.models import Snapshot
from vidshelf.models.playlist import utcnow

BACKUP_VERSION = 1
BACKUP_FILENAME = "youtube-collection-backup.json"


class BackupError(Exception):
    """The backup file could not be read as a collection."""


def export_backup(snapshot: Snapshot, path: str | Path) -> Path:
    path = Path(path)
    if path.is_dir():
        path = path / BACKUP_FILENAME
    payload = {
        "version": BACKUP_VERSION,
        "exportedAt": utcnow().isoformat(),
        **snapshot.model_dump(mode="json", by_alias=True),
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    logger.info("Exported backup to %s", path, extra={
        "videos": len(snapshot.videos), "playlists": len(snapshot.playlists)})
    return path


def import_backup(path: str | Path) -> Snapshot:
    """Read a backup file.

    Raises:
        BackupError: If the file is not JSON or lacks the videos/playlists arrays
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise BackupError(f"Could not read backup {path}: {e}") from e
    if not isinstance(data, dict) or not isinstance(data.get("videos"), list) \
            or not isinstance(data.get("playlists"), list):
        raise BackupError("Invalid backup file.")
    try:
        return Snapshot.model_validate(data)
    except ValidationError as e:
        raise BackupError(f"Invalid backup file: {e}") from e
