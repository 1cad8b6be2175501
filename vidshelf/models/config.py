import os
import logging
from dotenv import load_dotenv


class Config:
    def __init__(self):
        self.app_url: str = os.environ.get("APP_URL", "*")
        self.database_uri: str = os.environ.get(
            "DB_URI", "sqlite:///vidshelf.db")
        self.log_level: str | int = os.environ.get("LOG_LEVEL", logging.INFO)
        self.debug: bool = os.environ.get("DEBUG", "").lower() == "true"
        self.app_port: int = int(os.environ.get("PORT", 5000))
        self.app_host: str = os.environ.get("HOST", "0.0.0.0")
        self.environment: str = os.environ.get("ENVIRONMENT", "development")
        self.service_name: str = os.environ.get("SERVICE_NAME", "vidshelf")
        # example: http://localhost:4040/loki/api/v1/push
        self.loki_url: str | None = os.environ.get("LOKI_URL")
        self.version: str = os.environ.get("VERSION", "0.0.0")

        # Collection client
        self.remote_url: str = os.environ.get(
            "REMOTE_URL", "http://127.0.0.1:5000/api")
        self.mirror_path: str = os.environ.get(
            "MIRROR_PATH", os.path.expanduser("~/.vidshelf/mirror.json"))
        self.mirror_key: str = os.environ.get(
            "MIRROR_KEY", "__yt_collection_backup__")
        self.sync_debounce: float = float(
            os.environ.get("SYNC_DEBOUNCE", 0.3))
        self.request_timeout: float = float(
            os.environ.get("REQUEST_TIMEOUT", 10))


_ = load_dotenv()
config = Config()
