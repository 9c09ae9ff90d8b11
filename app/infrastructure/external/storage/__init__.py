"""Evidence storage backends (local filesystem)."""

from app.infrastructure.external.storage.local_storage import LocalEvidenceStorage

__all__ = ["LocalEvidenceStorage"]
