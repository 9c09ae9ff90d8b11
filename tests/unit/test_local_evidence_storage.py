"""LocalEvidenceStorage tests against a temporary directory."""

import hashlib
import io
import re

import pytest

from app.application.dtos.evidence import EvidenceFile
from app.domain.exceptions import ValidationException
from app.infrastructure.external.storage import LocalEvidenceStorage

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg"


@pytest.fixture
def storage(tmp_path) -> LocalEvidenceStorage:
    return LocalEvidenceStorage(
        str(tmp_path),
        allowed_mime_types={"image/jpeg", "image/png"},
        max_file_size=1024,
    )


async def test_store_images_writes_files_in_order(storage, tmp_path) -> None:
    refs = await storage.store_images(
        [
            EvidenceFile("before.jpg", "image/jpeg", io.BytesIO(JPEG_BYTES)),
            EvidenceFile("after.png", "image/png", io.BytesIO(b"png")),
        ]
    )
    assert len(refs) == 2
    assert re.fullmatch(r"evidence/\d{4}/\d{2}/[a-z0-9]+\.jpg", refs[0])
    assert refs[1].endswith(".png")
    stored = (tmp_path / refs[0]).read_bytes()
    assert hashlib.sha256(stored).hexdigest() == hashlib.sha256(JPEG_BYTES).hexdigest()
    assert not list(tmp_path.rglob(".tmp_*"))


async def test_rejects_unsupported_type_before_writing(storage, tmp_path) -> None:
    with pytest.raises(ValidationException):
        await storage.store_images(
            [
                EvidenceFile("ok.jpg", "image/jpeg", io.BytesIO(JPEG_BYTES)),
                EvidenceFile("doc.pdf", "application/pdf", io.BytesIO(b"%PDF")),
            ]
        )
    assert not (tmp_path / "evidence").exists()


async def test_rejects_oversized_and_empty_files(storage) -> None:
    with pytest.raises(ValidationException):
        await storage.store_images(
            [EvidenceFile("big.jpg", "image/jpeg", io.BytesIO(b"x" * 2048))]
        )
    with pytest.raises(ValidationException):
        await storage.store_images(
            [EvidenceFile("empty.jpg", "image/jpeg", io.BytesIO(b""))]
        )


async def test_base_url_prefixes_references(tmp_path) -> None:
    storage = LocalEvidenceStorage(
        str(tmp_path),
        allowed_mime_types={"image/jpeg"},
        max_file_size=1024,
        base_url="https://files.example.com/",
    )
    refs = await storage.store_images(
        [EvidenceFile("a.jpeg", "image/jpeg; charset=binary", io.BytesIO(JPEG_BYTES))]
    )
    assert refs[0].startswith("https://files.example.com/evidence/")
