"""File Storage Implementations

Receipt images are written to a local directory or posted to an upload
service over HTTP.
"""

import asyncio
import logging
import mimetypes
import os
import uuid
from typing import Optional
import httpx
from src.app.services.file_storage import FileStorage

logger = logging.getLogger(__name__)


def _storage_name(filename: Optional[str], content_type: Optional[str]) -> str:
    extension = ""
    if filename:
        extension = os.path.splitext(filename)[1].lower()
    if not extension and content_type:
        extension = mimetypes.guess_extension(content_type) or ""
    return f"{uuid.uuid4().hex}{extension}"


class LocalFileStorage(FileStorage):
    """
    Stores files under a local directory

    URLs are built as <base_url>/<generated name>; serving them is left to
    the web server.
    """

    def __init__(self, directory: str, base_url: str = "/receipts"):
        self.directory = directory
        self.base_url = base_url.rstrip("/")

    async def store_file(
        self,
        content: bytes,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> str:
        name = _storage_name(filename, content_type)
        path = os.path.join(self.directory, name)
        await asyncio.to_thread(self._write, path, content)
        logger.info(f"Stored {len(content)} bytes at {path}")
        return f"{self.base_url}/{name}"

    def _write(self, path: str, content: bytes) -> None:
        os.makedirs(self.directory, exist_ok=True)
        with open(path, "wb") as f:
            f.write(content)


class HttpFileStorage(FileStorage):
    """
    Uploads files to an HTTP upload endpoint

    The endpoint receives a multipart form with a ``file`` field and must
    answer with JSON containing ``url``.
    """

    def __init__(self, upload_url: str, timeout: float = 30.0):
        self.upload_url = upload_url
        self.timeout = timeout

    async def store_file(
        self,
        content: bytes,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> str:
        name = _storage_name(filename, content_type)
        files = {"file": (name, content, content_type or "application/octet-stream")}

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(self.upload_url, files=files)
            response.raise_for_status()
            url = response.json()["url"]

        logger.info(f"Uploaded {len(content)} bytes to {url}")
        return url


def create_file_storage(
    backend: str,
    directory: Optional[str] = None,
    base_url: str = "/receipts",
    upload_url: Optional[str] = None,
) -> FileStorage:
    """
    Factory function to create the configured file storage

    Args:
        backend: "local" or "http"
        directory: Target directory for local storage
        base_url: URL prefix of locally stored files
        upload_url: Upload endpoint for http storage

    Returns:
        Configured FileStorage
    """
    if backend == "http":
        if not upload_url:
            raise ValueError("RECEIPT_UPLOAD_URL is required for the http receipt storage")
        return HttpFileStorage(upload_url)
    return LocalFileStorage(directory or "./receipts", base_url)
