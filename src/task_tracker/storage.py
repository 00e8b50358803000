"""
Object storage for task media (images, videos).
"""

import time
from pathlib import PurePath
from typing import Optional
from urllib.parse import quote

from task_tracker.errors import BackendError, UploadError
from task_tracker.transport.http import HttpClient


def build_object_path(user_id: str, filename: str, now_ms: Optional[int] = None) -> str:
    """`<user_id>/<epoch millis>-<file name>`: per-user folder, timestamp against collisions."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{user_id}/{now_ms}-{PurePath(filename).name}"


class StorageAPI:
    def __init__(self, http: HttpClient, bucket: str = "uploads"):
        self._http = http
        self._bucket = bucket

    @property
    def bucket(self) -> str:
        return self._bucket

    async def upload(self, path: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        """Store `data` at `path` in the bucket. Returns the object key."""
        try:
            result = await self._http.upload(f"/storage/v1/object/{self._bucket}/{quote(path)}", data, content_type)
        except BackendError as e:
            raise UploadError(e.message) from e
        if isinstance(result, dict) and result.get("Key"):
            return result["Key"]
        return f"{self._bucket}/{path}"

    def get_public_url(self, path: str) -> str:
        return f"{self._http.base_url}/storage/v1/object/public/{self._bucket}/{quote(path)}"
