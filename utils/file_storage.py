"""
File Storage Utility Module

File-transport collaborator for the Document Registry: stores blobs,
issues expiring signed URLs and removes blobs. `LocalFileStorage` keeps files
under `settings.STORAGE_ROOT`; the API's `/files` route serves them after
checking the signature.
"""

import hashlib
import hmac
import logging
import time
from functools import lru_cache
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import quote, urlencode

from config.settings import settings

logger = logging.getLogger(__name__)


class FileStorage(Protocol):
    """Contract the Document Registry relies on."""

    def store(self, content: bytes, path: str, metadata: Optional[dict] = None) -> str: ...

    def retrieve_url(self, file_ref: str, download: bool = False) -> str: ...

    def remove(self, file_ref: str) -> None: ...

    def exists(self, file_ref: str) -> bool: ...


class LocalFileStorage:
    """Filesystem-backed storage with HMAC-signed download links."""

    def __init__(
        self,
        root: str = None,
        base_url: str = None,
        signing_key: str = None,
        url_ttl_seconds: int = None,
    ):
        self.root = Path(root or settings.STORAGE_ROOT).resolve()
        self.base_url = (base_url or settings.STORAGE_BASE_URL).rstrip("/")
        self.signing_key = (signing_key or settings.STORAGE_SIGNING_KEY).encode("utf-8")
        self.url_ttl_seconds = url_ttl_seconds or settings.SIGNED_URL_TTL_SECONDS

    def resolve_path(self, file_ref: str) -> Path:
        """Absolute path of a reference; rejects references escaping the root."""
        path = (self.root / file_ref).resolve()
        if self.root not in path.parents:
            raise ValueError(f"Invalid file reference: {file_ref}")
        return path

    def store(self, content: bytes, path: str, metadata: Optional[dict] = None) -> str:
        """
        Write a blob.

        Args:
            content: File bytes
            path: Relative storage path, used as the file reference
            metadata: Optional metadata (logged only for local storage)

        Returns:
            The file reference
        """
        target = self.resolve_path(path)
        if target.exists():
            raise FileExistsError(f"File already exists: {path}")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        logger.info(f"Stored file {path} ({len(content)} bytes) {metadata or {}}")
        return path

    def retrieve_url(self, file_ref: str, download: bool = False) -> str:
        """Signed URL valid for `url_ttl_seconds`; `download` asks for an attachment."""
        expires = int(time.time()) + self.url_ttl_seconds
        params = {
            "expires": expires,
            "download": int(download),
            "signature": self.sign(file_ref, expires, download),
        }
        return f"{self.base_url}/{quote(file_ref)}?{urlencode(params)}"

    def sign(self, file_ref: str, expires: int, download: bool) -> str:
        payload = f"{file_ref}:{expires}:{int(download)}".encode("utf-8")
        return hmac.new(self.signing_key, payload, hashlib.sha256).hexdigest()

    def verify(self, file_ref: str, expires: int, download: bool, signature: str) -> bool:
        if expires < int(time.time()):
            return False
        return hmac.compare_digest(self.sign(file_ref, expires, download), signature)

    def remove(self, file_ref: str) -> None:
        self.resolve_path(file_ref).unlink(missing_ok=True)
        logger.info(f"Removed file {file_ref}")

    def exists(self, file_ref: str) -> bool:
        return self.resolve_path(file_ref).is_file()


@lru_cache()
def get_file_storage() -> LocalFileStorage:
    return LocalFileStorage()
