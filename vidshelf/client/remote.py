"""HTTP client for the remote collection store."""
from typing import Any
from urllib.parse import quote

import requests
from pydantic import ValidationError

from vidshelf.logger import logger
from vidshelf.models import Snapshot, WriteAck, FullReplace, PartialMerge, dump_write_request


class RemoteStoreError(Exception):
    """The remote store was unreachable or answered with an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteStoreClient:
    def __init__(self, base_url: str, timeout: float = 10.0,
                 session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise RemoteStoreError(f"{method} {url} failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            message = body.get("error") if isinstance(body, dict) else None
            raise RemoteStoreError(
                message or f"{method} {url} returned {response.status_code}",
                status_code=response.status_code,
            )
        return body

    def fetch_snapshot(self) -> Snapshot | None:
        """The stored collection, or None when the payload is malformed."""
        body = self._request("GET", "/library")
        if not isinstance(body, dict) or not isinstance(body.get("videos"), list) \
                or not isinstance(body.get("playlists"), list):
            logger.warning("Remote library payload is missing arrays, ignoring it")
            return None
        try:
            return Snapshot.model_validate(body)
        except ValidationError as e:
            logger.warning("Remote library payload failed validation: %s", e)
            return None

    def write(self, write: FullReplace | PartialMerge) -> WriteAck:
        body = self._request("PUT", "/library", json=dump_write_request(write))
        if not isinstance(body, dict):
            raise RemoteStoreError("Write reply was not a JSON object")
        return WriteAck.model_validate(body)

    def delete_playlist(self, playlist_id: str) -> None:
        self._request("DELETE", f"/playlists/{quote(playlist_id, safe='')}")
