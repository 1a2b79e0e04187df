"""Blob storage for submitted images.

Keys are slash-separated paths inside a bucket (``submissions/<uuid>.jpg``).
Public URLs are built by templating, mirroring hosted object stores:
``<public_base_url>/storage/v1/object/public/<bucket>/<key>``.
"""
import logging
import os
from typing import Protocol

from gallery.config import settings

logger = logging.getLogger(__name__)

PUBLIC_PATH_PREFIX = "/storage/v1/object/public"


class StorageError(Exception):
    pass


class StorageConflict(StorageError):
    """Raised when an upload targets a key that already exists."""


class BlobStore(Protocol):
    bucket: str

    async def upload(self, key: str, data: bytes, content_type: str) -> None: ...

    async def exists(self, key: str) -> bool: ...

    async def list_keys(self, prefix: str = "") -> list[str]: ...

    def public_url(self, key: str) -> str: ...


def public_url_for(key: str, bucket: str | None = None, base_url: str | None = None) -> str:
    base = (base_url if base_url is not None else settings.public_base_url).rstrip("/")
    return f"{base}{PUBLIC_PATH_PREFIX}/{bucket or settings.storage_bucket}/{key}"


class LocalBlobStore:
    """Filesystem bucket under ``<root>/<bucket>/``. Uploads never overwrite."""

    def __init__(self, root: str, bucket: str, base_url: str | None = None):
        self.root = root
        self.bucket = bucket
        self.base_url = base_url

    @property
    def bucket_dir(self) -> str:
        return os.path.join(self.root, self.bucket)

    def _path_for(self, key: str) -> str:
        normalized = os.path.normpath(key)
        if normalized.startswith("..") or os.path.isabs(normalized):
            raise StorageError(f"Invalid object key: {key}")
        return os.path.join(self.bucket_dir, normalized)

    def _write_new(self, path: str, data: bytes) -> None:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        # "xb" fails if the file exists, so a key is never silently replaced.
        with open(path, "xb") as f:
            f.write(data)

    async def upload(self, key: str, data: bytes, content_type: str) -> None:
        path = self._path_for(key)
        try:
            self._write_new(path, data)
        except FileExistsError as e:
            raise StorageConflict(f"The resource already exists: {key}") from e
        except OSError as e:
            raise StorageError(str(e)) from e
        logger.info("Stored %s (%d bytes, %s) in bucket %s", key, len(data), content_type, self.bucket)

    async def exists(self, key: str) -> bool:
        return os.path.isfile(self._path_for(key))

    def _walk(self, prefix: str) -> list[str]:
        keys = []
        if not os.path.isdir(self.bucket_dir):
            return keys
        for dirpath, _dirnames, filenames in os.walk(self.bucket_dir):
            for name in filenames:
                rel = os.path.relpath(os.path.join(dirpath, name), self.bucket_dir)
                key = rel.replace(os.sep, "/")
                if key.startswith(prefix):
                    keys.append(key)
        return sorted(keys)

    async def list_keys(self, prefix: str = "") -> list[str]:
        return self._walk(prefix)

    def public_url(self, key: str) -> str:
        return public_url_for(key, bucket=self.bucket, base_url=self.base_url)


def get_blob_store() -> BlobStore:
    return LocalBlobStore(settings.storage_dir, settings.storage_bucket)
