"""DTOs for evidence uploads (no dependency on web framework types)."""

from dataclasses import dataclass
from typing import BinaryIO


@dataclass(frozen=True)
class EvidenceFile:
    """One image supplied as evidence. Content is never interpreted by the engine."""

    filename: str
    content_type: str
    data: BinaryIO
