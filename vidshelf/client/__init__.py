from .settings import SyncSettings
from .mirror import LocalMirror, MemoryStore, JsonFileStore
from .remote import RemoteStoreClient, RemoteStoreError
from .sync import SyncPolicy
from .playback import PlaybackSequencer, Player
from .collection import CollectionState
from .backup import BackupError, export_backup, import_backup
