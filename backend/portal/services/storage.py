import contextlib
import logging
import time
from collections.abc import AsyncIterator
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Final
from urllib.parse import quote
from uuid import uuid4

import aiofiles
import aiofiles.os
from fastapi import Request

from portal.core.config import Settings
from portal.core.errors import PayloadTooLargeError, StorageWriteError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {".jpg", ".jpeg", ".png", ".webp", ".gif", ".svg"}
)
UPLOAD_PUT_PATH: Final[str] = "/api/uploads/put"
PUBLIC_PATH: Final[str] = "/uploads"
LEGACY_PUBLIC_PATH: Final[str] = "/objects"


def resolve_upload_dir(settings: Settings) -> Path:
    path = settings.upload_path
    path.mkdir(parents=True, exist_ok=True)
    return path


def safe_extension(name: str) -> str:
    """Lower-cased suffix of ``name`` if it is an allowed image type, else ``""``."""
    ext = PurePosixPath(name.replace("\\", "/")).suffix[:10].lower()
    return ext if ext in ALLOWED_EXTENSIONS else ""


def generate_upload_key(name: str) -> str:
    return f"{int(time.time() * 1000)}-{uuid4()}{safe_extension(name)}"


def sanitize_file_name(file_name: str) -> str:
    """Reduce a caller-supplied name to its base name; ``""`` if nothing usable remains."""
    if "\x00" in file_name:
        return ""
    name = PurePosixPath(file_name.replace("\\", "/")).name
    if name in ("", ".", ".."):
        return ""
    return name


def public_base_url(request: Request) -> str:
    headers = request.headers
    proto = headers.get("x-forwarded-proto", "").split(",")[0].strip()
    host = headers.get("x-forwarded-host", "").split(",")[0].strip()
    proto = proto or request.url.scheme or "https"
    host = host or headers.get("host") or "localhost"
    return f"{proto}://{host}"


@dataclass(frozen=True)
class IssuedUpload:
    key: str
    upload_url: str
    file_url: str


@dataclass(frozen=True)
class StoredUpload:
    name: str
    size: int
    file_url: str

    @property
    def etag(self) -> str:
        return f'"{self.name}"'


class UploadStore:
    """Local-disk upload target behind the request-url / PUT endpoints.

    Built once at startup from ``Settings`` and shared through ``app.state``.
    Keys are never tracked: the filesystem is the only record of what exists.
    """

    def __init__(self, root: Path, max_bytes: int = 0) -> None:
        self.root = root
        self.max_bytes = max_bytes

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadStore":
        return cls(resolve_upload_dir(settings), max_bytes=settings.max_upload_bytes)

    def upload_url(self, base_url: str, key: str) -> str:
        return f"{base_url}{UPLOAD_PUT_PATH}/{quote(key, safe='')}"

    def file_url(self, base_url: str, key: str) -> str:
        return f"{base_url}{PUBLIC_PATH}/{quote(key, safe='')}"

    def issue(self, name: str | None, base_url: str) -> IssuedUpload:
        if not name:
            raise ValidationError("Missing file name")
        key = generate_upload_key(name)
        return IssuedUpload(
            key=key,
            upload_url=self.upload_url(base_url, key),
            file_url=self.file_url(base_url, key),
        )

    async def save_stream(
        self,
        file_name: str,
        chunks: AsyncIterator[bytes],
        base_url: str,
    ) -> StoredUpload:
        name = sanitize_file_name(file_name)
        if not name:
            raise ValidationError("Invalid fileName")
        destination = self.root / name
        # Dot-prefixed so the static mounts never serve a half-written file.
        tmp_path = self.root / f".upload-{uuid4().hex}.part"

        written = 0
        committed = False
        try:
            async with aiofiles.open(tmp_path, "xb") as fh:
                async for chunk in chunks:
                    if not chunk:
                        continue
                    written += len(chunk)
                    if self.max_bytes and written > self.max_bytes:
                        raise PayloadTooLargeError(
                            f"Upload exceeds the {self.max_bytes} byte limit"
                        )
                    await fh.write(chunk)
            await aiofiles.os.replace(tmp_path, destination)
            committed = True
        except OSError as exc:
            logger.exception("Writing upload %s failed", name)
            raise StorageWriteError() from exc
        finally:
            if not committed:
                with contextlib.suppress(FileNotFoundError):
                    await aiofiles.os.remove(tmp_path)

        logger.info("Stored upload %s (%d bytes)", name, written)
        return StoredUpload(name=name, size=written, file_url=self.file_url(base_url, name))
