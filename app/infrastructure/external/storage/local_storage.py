"""Local filesystem storage for workflow evidence images.

Files land under ``<storage_root>/evidence/<yyyy>/<mm>/<cuid>.<ext>``.
Each write goes to a temp file in the target directory, is checksummed,
then renamed into place so a reader never sees a partial image.
"""

from __future__ import annotations

import hashlib
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

import aiofiles

from app.application.dtos.evidence import EvidenceFile
from app.domain.exceptions import ValidationException
from app.infrastructure.exceptions import (
    StorageChecksumMismatchError,
    StoragePermissionError,
    StorageUploadError,
)
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import evidence_partition, utc_now
from app.shared.utils.generators import generate_cuid

logger = get_logger(__name__)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/heic": "heic",
    "image/gif": "gif",
}


class LocalEvidenceStorage:
    """Evidence storage on the local filesystem. Implements IEvidenceStorage.

    References returned by store_images are paths relative to storage_root
    (or absolute URLs when base_url is configured); the engine treats them
    as opaque strings.
    """

    CHUNK_SIZE = 64 * 1024  # 64KB

    def __init__(
        self,
        storage_root: str,
        *,
        allowed_mime_types: Iterable[str],
        max_file_size: int,
        base_url: str | None = None,
    ) -> None:
        """Initialize local evidence storage.

        Args:
            storage_root: Base directory for all stored files.
            allowed_mime_types: Accepted image content types.
            max_file_size: Maximum size of a single image in bytes.
            base_url: Optional public prefix for returned references.
        """
        self.storage_root = Path(storage_root).resolve()
        self.allowed_mime_types = frozenset(t.lower() for t in allowed_mime_types)
        self.max_file_size = max_file_size
        self.base_url = base_url.rstrip("/") if base_url else None

    def _get_full_path(self, storage_ref: str) -> Path:
        """Resolve storage_ref under storage_root; reject traversal."""
        full_path = (self.storage_root / storage_ref).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(storage_ref, "store_images") from e
        return full_path

    def _validate(self, file: EvidenceFile, content: bytes) -> str:
        """Check type and size; return the file extension to store under."""
        content_type = (file.content_type or "").split(";")[0].strip().lower()
        if content_type not in self.allowed_mime_types:
            raise ValidationException(
                f"Unsupported evidence file type '{file.content_type}' for {file.filename!r}",
                field="files",
            )
        if not content:
            raise ValidationException(
                f"Evidence file {file.filename!r} is empty", field="files"
            )
        if len(content) > self.max_file_size:
            raise ValidationException(
                f"Evidence file {file.filename!r} exceeds {self.max_file_size} bytes",
                field="files",
            )
        suffix = Path(file.filename or "").suffix.lstrip(".").lower()
        return _EXTENSIONS.get(content_type) or suffix or "bin"

    async def _compute_checksum(self, file_path: Path) -> str:
        sha256 = hashlib.sha256()
        async with aiofiles.open(file_path, "rb") as f:
            while True:
                chunk = await f.read(self.CHUNK_SIZE)
                if not chunk:
                    break
                sha256.update(chunk)
        return sha256.hexdigest()

    async def _write_atomic(self, storage_ref: str, content: bytes) -> None:
        """Write content to storage_ref via temp file + checksum + rename."""
        target_path = self._get_full_path(storage_ref)
        expected = hashlib.sha256(content).hexdigest()
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=target_path.parent,
                prefix=".tmp_",
                suffix=target_path.suffix,
            )
            os.close(temp_fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(content)
                os.chmod(temp_path, 0o640)
                computed = await self._compute_checksum(Path(temp_path))
                if computed != expected:
                    raise StorageChecksumMismatchError(storage_ref, expected, computed)
                os.replace(temp_path, target_path)
            finally:
                if Path(temp_path).exists():
                    os.unlink(temp_path)
        except StorageChecksumMismatchError:
            raise
        except OSError as e:
            raise StorageUploadError(storage_ref, str(e)) from e

    def _public_ref(self, storage_ref: str) -> str:
        return f"{self.base_url}/{storage_ref}" if self.base_url else storage_ref

    async def store_images(self, files: list[EvidenceFile]) -> list[str]:
        """Validate and persist every file; return one reference per file, in order.

        All files are validated before any is written, so a rejected batch
        leaves nothing behind.

        Raises:
            ValidationException: Unsupported type, empty or oversized file.
            StorageUploadError: Filesystem failure while writing.
        """
        prepared: list[tuple[str, bytes]] = []
        partition = evidence_partition(utc_now())
        for file in files:
            content = file.data.read()
            ext = self._validate(file, content)
            prepared.append((f"evidence/{partition}/{generate_cuid()}.{ext}", content))

        refs: list[str] = []
        for storage_ref, content in prepared:
            await self._write_atomic(storage_ref, content)
            refs.append(self._public_ref(storage_ref))
        logger.info("Stored %d evidence file(s) under %s", len(refs), partition)
        return refs
