"""Service interfaces (ports) for the application layer.

Protocols define contracts for collaborators the engine depends on (DIP).
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.evidence import EvidenceFile


class IClock(Protocol):
    """Source of the current time (injectable for tests)."""

    def now(self) -> datetime:
        """Return the current timezone-aware UTC datetime."""


class IEvidenceStorage(Protocol):
    """Stores evidence images and returns opaque references."""

    async def store_images(self, files: list[EvidenceFile]) -> list[str]:
        """Persist files in order; return one opaque reference per file."""
