from dataclasses import dataclass
from vidshelf.models.config import Config, config as default_config


@dataclass(frozen=True)
class SyncSettings:
    """Where and how the collection client persists its state."""
    remote_url: str
    mirror_path: str
    mirror_key: str = "__yt_collection_backup__"
    debounce_seconds: float = 0.3
    request_timeout: float = 10.0

    @classmethod
    def from_config(cls, config: Config | None = None) -> "SyncSettings":
        config = config or default_config
        return cls(
            remote_url=config.remote_url.rstrip("/"),
            mirror_path=config.mirror_path,
            mirror_key=config.mirror_key,
            debounce_seconds=config.sync_debounce,
            request_timeout=config.request_timeout,
        )
