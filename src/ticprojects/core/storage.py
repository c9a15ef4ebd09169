"""File attachment storage on the local filesystem.

Uploaded files are written under ``upload_dir`` with a generated, collision
resistant name and served back by the static mount at ``upload_url_path``.
The database only ever stores the public path (``/uploads/<name>``).
"""

import asyncio
import secrets
import time
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from fastapi import UploadFile

from src.ticprojects.core.config import get_settings
from src.ticprojects.core.exceptions import PayloadTooLargeError, StorageError
from src.ticprojects.core.logging import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class StoredFile:
    """A file persisted by FileStorage."""

    name: str
    disk_path: Path
    public_path: str
    size: int


def generate_filename(original_name: str | None) -> str:
    """Build a unique name: '<epoch millis>-<random 0..1e9><original extension>'."""
    suffix = PurePosixPath(original_name or "").suffix
    return f"{time.time_ns() // 1_000_000}-{secrets.randbelow(1_000_000_000)}{suffix}"


class FileStorage:
    """Stores attachment bytes in a dedicated directory with a size cap."""

    def __init__(self, upload_dir: str | Path, url_path: str, max_bytes: int):
        self.upload_dir = Path(upload_dir)
        self.url_path = "/" + url_path.strip("/")
        self.max_bytes = max_bytes

    def public_path_for(self, name: str) -> str:
        return f"{self.url_path}/{name}"

    def resolve(self, public_path: str) -> Path | None:
        """Map a stored public path back to its file, or None if it is not ours."""
        prefix = f"{self.url_path}/"
        if not public_path.startswith(prefix):
            return None
        name = public_path[len(prefix) :]
        if not name or "/" in name or name in (".", ".."):
            return None
        return self.upload_dir / name

    async def save(self, upload: UploadFile) -> StoredFile:
        """Stream an upload to disk.

        Raises:
            PayloadTooLargeError: the upload exceeds max_bytes. Nothing is left on disk.
            StorageError: the file could not be written.
        """
        name = generate_filename(upload.filename)
        disk_path = self.upload_dir / name
        size = 0
        created = False

        try:
            await asyncio.to_thread(self.upload_dir.mkdir, parents=True, exist_ok=True)
            fh = await asyncio.to_thread(disk_path.open, "xb")
            created = True
            try:
                while chunk := await upload.read(CHUNK_SIZE):
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise PayloadTooLargeError(
                            f"File exceeds the {self.max_bytes // (1024 * 1024)} MiB upload limit"
                        )
                    await asyncio.to_thread(fh.write, chunk)
            finally:
                await asyncio.to_thread(fh.close)
        except PayloadTooLargeError:
            await asyncio.to_thread(disk_path.unlink, missing_ok=True)
            raise
        except OSError as e:
            if created:
                await asyncio.to_thread(disk_path.unlink, missing_ok=True)
            logger.error("Failed to store upload", filename=upload.filename, error=str(e))
            raise StorageError("Failed to store uploaded file") from e

        logger.info("Stored upload", stored_name=name, size=size)
        return StoredFile(
            name=name,
            disk_path=disk_path,
            public_path=self.public_path_for(name),
            size=size,
        )

    async def remove(self, public_path: str) -> bool:
        """Delete a stored file. Returns False if it was missing or could not be removed."""
        disk_path = self.resolve(public_path)
        if disk_path is None:
            logger.warning("Refusing to remove file outside upload dir", file_path=public_path)
            return False
        try:
            await asyncio.to_thread(disk_path.unlink)
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("Failed to remove stored file", file_path=public_path, error=str(e))
            return False
        return True


def get_file_storage() -> FileStorage:
    """Build the storage from current settings."""
    settings = get_settings()
    return FileStorage(
        upload_dir=settings.upload_dir,
        url_path=settings.upload_url_path,
        max_bytes=settings.max_upload_size_bytes,
    )
