import asyncio
import logging
import os
import re
import secrets
import time
from pathlib import Path
from typing import Optional

from fastapi import Request, UploadFile
from starlette.datastructures import FormData
from starlette.exceptions import HTTPException as StarletteHTTPException

from backpack.core.config import settings
from backpack.core.errors import UploadError, UploadTimeout

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1MB
EXTENSION_PATTERN = re.compile(r"\.[a-z0-9]{1,10}")


def safe_extension(original_name: Optional[str]) -> str:
    """Extension of the client filename, or '' when it is absent or unusual"""
    if not original_name:
        return ""
    basename = original_name.replace("\\", "/").rsplit("/", 1)[-1]
    ext = os.path.splitext(basename)[1].lower()
    return ext if EXTENSION_PATTERN.fullmatch(ext) else ""


def describe_size(num_bytes: int) -> str:
    """Human-readable limit: whole MB or KB where they divide evenly, else bytes"""
    for unit, size in (("MB", 1024 * 1024), ("KB", 1024)):
        if num_bytes >= size and num_bytes % size == 0:
            return f"{num_bytes // size}{unit}"
    return f"{num_bytes} bytes"


def generate_stored_name(original_name: Optional[str]) -> str:
    """timestamp + random suffix; nothing from the client name but its extension"""
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{safe_extension(original_name)}"


class UploadManager:
    """
    Stores ticket files in UPLOAD_DIR under generated names.

    store() persists the file before the surrounding request is validated, so
    callers must discard() it when validation fails. discard() never raises.
    """

    def __init__(
        self,
        directory=None,
        max_bytes: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.directory = Path(directory or settings.UPLOAD_DIR)
        self.max_bytes = max_bytes if max_bytes is not None else settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.UPLOAD_TIMEOUT_SECONDS

    def ensure_directory(self):
        self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, filename: str) -> Path:
        if (
            not filename
            or "/" in filename
            or "\\" in filename
            or filename.startswith(".")
        ):
            raise UploadError("Invalid filename")
        return self.directory / filename

    def exists(self, filename: str) -> bool:
        try:
            return self.path_for(filename).is_file()
        except UploadError:
            return False

    async def receive_form(self, request: Request) -> FormData:
        """
        Read and parse the multipart body from the client, bounded by
        timeout_seconds. A stalled or trickling sender raises UploadTimeout.
        """
        try:
            return await asyncio.wait_for(self._parse_form(request), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(f"Upload TIMEOUT after {self.timeout_seconds}s receiving request body")
            raise UploadTimeout()
        except StarletteHTTPException as e:
            # malformed multipart body
            raise UploadError(f"Upload failed: {e.detail}") from e

    async def _parse_form(self, request: Request) -> FormData:
        return await request.form()

    async def store(self, upload: UploadFile) -> str:
        """Write the upload to disk and return the generated filename"""
        self.ensure_directory()
        filename = generate_stored_name(upload.filename)
        target = self.directory / filename

        try:
            await asyncio.wait_for(self._receive(upload, target), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(f"Upload TIMEOUT after {self.timeout_seconds}s ({upload.filename})")
            self._remove_partial(target)
            raise UploadTimeout()
        except UploadError:
            self._remove_partial(target)
            raise
        except OSError as e:
            logger.error(f"❌ Could not write upload {filename}: {e}")
            self._remove_partial(target)
            raise UploadError(f"Upload failed: {e}") from e

        logger.info(f"Stored upload {upload.filename!r} as {filename}")
        return filename

    async def _receive(self, upload: UploadFile, target: Path):
        written = 0
        with open(target, "wb") as out:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > self.max_bytes:
                    raise UploadError(f"Upload failed: file exceeds {describe_size(self.max_bytes)}")
                out.write(chunk)

    def _remove_partial(self, target: Path):
        try:
            target.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Error deleting partial upload {target.name}: {e}")

    def discard(self, filename: str) -> bool:
        """Best-effort delete used to roll back a failed request"""
        try:
            os.remove(self.path_for(filename))
        except UploadError:
            logger.error(f"Refusing to delete suspicious filename {filename!r}")
            return False
        except OSError as e:
            logger.error(f"Error deleting file {filename}: {e}")
            return False

        logger.info(f"🗑️ Discarded upload {filename}")
        return True

    def check_writable(self) -> str:
        """Write and remove a probe file, reporting the outcome as text"""
        try:
            self.ensure_directory()
            probe = self.directory / f"test-{int(time.time() * 1000)}.txt"
            probe.write_text("write-test")
            probe.unlink()
            return "Writable"
        except OSError as e:
            return f"Not Writable: {e}"


upload_manager = UploadManager()
