from dataclasses import dataclass
from pathlib import Path
import logging
import secrets
import time

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from inventory_api.exceptions import PayloadTooLargeError, ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class StoredFile:
    filename: str
    original_name: str
    size: int


def unique_filename(original_name: str) -> str:
    """Build `<epoch-ms>-<random><ext>` so concurrent uploads never collide."""
    suffix = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
    return f"{suffix}{Path(original_name or '').suffix}"


class UploadService:
    """Stores uploaded images on local disk."""

    def __init__(self, upload_dir: str, max_size: int):
        self.upload_dir = Path(upload_dir)
        self.max_size = max_size

    async def store_image(self, upload: UploadFile) -> StoredFile:
        """
        Validate and write an uploaded image.

        The file is streamed to disk in chunks; crossing the size
        ceiling aborts the write and removes the partial file.

        Raises:
            ValidationError: If the upload is not an image
            PayloadTooLargeError: If the upload exceeds the size ceiling
        """
        if not (upload.content_type or "").startswith("image/"):
            raise ValidationError("Only image files are allowed")

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        filename = unique_filename(upload.filename)
        destination = self.upload_dir / filename

        out = await run_in_threadpool(destination.open, "wb")
        try:
            size = await self._copy(upload, out)
        except PayloadTooLargeError:
            await run_in_threadpool(out.close)
            await run_in_threadpool(destination.unlink, missing_ok=True)
            raise
        finally:
            if not out.closed:
                await run_in_threadpool(out.close)

        logger.info(f"Stored upload {upload.filename!r} as {filename} ({size} bytes)")
        return StoredFile(filename=filename, original_name=upload.filename or "", size=size)

    async def _copy(self, upload: UploadFile, out) -> int:
        size = 0
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                return size
            size += len(chunk)
            if size > self.max_size:
                raise PayloadTooLargeError("File too large")
            await run_in_threadpool(out.write, chunk)
