"""
Blob storage for uploaded card images.

Two interchangeable backends implement the `BlobStore` protocol:

- `LocalBlobStore` keeps each blob as a file under a root directory
- `DatabaseBlobStore` keeps blobs as rows in the `blobs` table

Keys are generated at `put` time as ``<epoch-millis>-<8 hex>-<name>``, where
``name`` is the client's file name reduced to a safe character set. A key
is a plain file name, never a path.
"""

import asyncio
import logging
import mimetypes
import os
import re
import tempfile
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Protocol

from fastapi import Depends
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardsmith.config import settings
from cardsmith.db.database import get_session
from cardsmith.models.db import BlobDB
from cardsmith.models.failure import NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
MAX_NAME_LENGTH = 100

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_VALID_KEY = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class BlobStoreError(Exception):
    """The blob backend could not be read or written."""


class BlobNotFoundError(NotFoundError):
    """No blob is stored under the requested key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__("File", key)


@dataclass(frozen=True, slots=True)
class StoredBlob:
    """A blob read back from storage."""

    key: str
    data: bytes
    content_type: str


class BlobStore(Protocol):
    """Store, fetch and delete binary payloads by key."""

    async def put(self, data: bytes, original_name: str, content_type: str) -> str: ...

    async def get(self, key: str) -> StoredBlob: ...

    async def delete(self, key: str) -> None: ...

    async def list_keys(self) -> list[str]: ...

    async def check(self) -> None: ...

def sanitize_filename(original_name: str) -> str:
    """
    Reduce a client-supplied file name to a safe single path component.

    Directory parts are dropped and runs of unsafe characters become "_".
    Long names are shortened, keeping the extension.
    """
    name = original_name.replace("\\", "/").rsplit("/", 1)[-1]
    name = _UNSAFE_CHARS.sub("_", name).lstrip("._")
    if not name:
        return "upload"

    if len(name) > MAX_NAME_LENGTH:
        stem, dot, suffix = name.rpartition(".")
        if dot and len(suffix) < 10:
            name = stem[: MAX_NAME_LENGTH - len(suffix) - 1] + "." + suffix
        else:
            name = name[:MAX_NAME_LENGTH]
    return name


def generate_key(original_name: str, content_type: str = "") -> str:
    """
    Build a collision-resistant key from the current time and the file name.

    When the name's extension does not match content_type, the extension for
    content_type is appended so the type can be recovered from the key.
    """
    name = sanitize_filename(original_name)
    if content_type and mimetypes.guess_type(name)[0] != content_type:
        extension = mimetypes.guess_extension(content_type)
        if extension:
            name = sanitize_filename(name + extension)

    millis = int(time.time() * 1000)
    return f"{millis}-{uuid.uuid4().hex[:8]}-{name}"


def key_created_at(key: str) -> float | None:
    """Epoch seconds encoded in a key's prefix, or None for foreign keys."""
    prefix = key.split("-", 1)[0]
    if not (prefix.isascii() and prefix.isdecimal()):
        return None
    return int(prefix) / 1000


def is_valid_key(key: str) -> bool:
    """Check that a key is a plain file name this module could have produced."""
    return bool(_VALID_KEY.match(key)) and ".." not in key


class LocalBlobStore:
    """
    Blobs stored as files in a directory.

    Writes go to a temporary file that is fsynced and renamed into place,
    so a key is only returned once its bytes are on disk. The content type
    is derived from the key's extension, which `generate_key` aligns with
    the type given at upload.
    """

    def __init__(self, root_dir: Path):
        self.root_dir = root_dir

    def _path(self, key: str) -> Path:
        if not is_valid_key(key):
            raise BlobNotFoundError(key)
        return self.root_dir / key

    def _check_writable(self) -> None:
        self.root_dir.mkdir(parents=True, exist_ok=True)
        if not os.access(self.root_dir, os.W_OK):
            raise PermissionError(f"{self.root_dir} is not writable")

    def _write(self, key: str, data: bytes) -> None:
        self.root_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.root_dir, prefix=".upload-")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.root_dir / key)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    async def put(self, data: bytes, original_name: str, content_type: str) -> str:
        key = generate_key(original_name, content_type)
        try:
            await asyncio.to_thread(self._write, key, data)
        except OSError as e:
            raise BlobStoreError(f"Failed to write blob {key}") from e

        logger.info("Stored blob %s (%d bytes)", key, len(data))
        return key

    async def get(self, key: str) -> StoredBlob:
        path = self._path(key)
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as e:
            raise BlobNotFoundError(key) from e
        except OSError as e:
            raise BlobStoreError(f"Failed to read blob {key}") from e

        content_type, _ = mimetypes.guess_type(key)
        return StoredBlob(key=key, data=data, content_type=content_type or DEFAULT_CONTENT_TYPE)

    async def delete(self, key: str) -> None:
        if not is_valid_key(key):
            return
        try:
            await asyncio.to_thread((self.root_dir / key).unlink, missing_ok=True)
        except OSError as e:
            raise BlobStoreError(f"Failed to delete blob {key}") from e
        logger.info("Deleted blob %s", key)

    async def list_keys(self) -> list[str]:
        if not self.root_dir.is_dir():
            return []
        return sorted(
            p.name for p in self.root_dir.iterdir() if p.is_file() and is_valid_key(p.name)
        )

    async def check(self) -> None:
        """Raise BlobStoreError unless the root directory can be written."""
        try:
            await asyncio.to_thread(self._check_writable)
        except OSError as e:
            raise BlobStoreError(f"Blob directory {self.root_dir} unavailable") from e


class DatabaseBlobStore:
    """
    Blobs stored in the `blobs` table.

    Shares the request's session, so a blob written alongside a card is
    committed or rolled back together with it.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def put(self, data: bytes, original_name: str, content_type: str) -> str:
        key = generate_key(original_name, content_type)
        try:
            self.session.add(
                BlobDB(key=key, data=data, content_type=content_type or DEFAULT_CONTENT_TYPE)
            )
            await self.session.flush()
        except SQLAlchemyError as e:
            raise BlobStoreError(f"Failed to write blob {key}") from e

        logger.info("Stored blob %s (%d bytes)", key, len(data))
        return key

    async def get(self, key: str) -> StoredBlob:
        try:
            result = await self.session.execute(select(BlobDB).where(BlobDB.key == key))
            blob = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise BlobStoreError(f"Failed to read blob {key}") from e

        if blob is None:
            raise BlobNotFoundError(key)
        return StoredBlob(key=blob.key, data=blob.data, content_type=blob.content_type)

    async def delete(self, key: str) -> None:
        try:
            await self.session.execute(delete(BlobDB).where(BlobDB.key == key))
        except SQLAlchemyError as e:
            raise BlobStoreError(f"Failed to delete blob {key}") from e
        logger.info("Deleted blob %s", key)

    async def list_keys(self) -> list[str]:
        result = await self.session.execute(select(BlobDB.key).order_by(BlobDB.key))
        return list(result.scalars().all())

    async def check(self) -> None:
        """Raise BlobStoreError unless the blobs table can be queried."""
        try:
            await self.session.execute(select(BlobDB.key).limit(1))
        except SQLAlchemyError as e:
            raise BlobStoreError("Blob table unavailable") from e


def create_blob_store(session: AsyncSession) -> BlobStore:
    """Build the backend selected by settings.blob_backend."""
    if settings.blob_backend == "database":
        return DatabaseBlobStore(session)
    return LocalBlobStore(Path(settings.blob_dir))


async def get_blob_store(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> BlobStore:
    """Dependency that provides the configured blob store."""
    return create_blob_store(session)
