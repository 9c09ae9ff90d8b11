"""Application DTOs (no ORM dependency)."""

from app.application.dtos.evidence import EvidenceFile
from app.application.dtos.workflow import (
    HistoryEntryCreate,
    HistoryEntryResult,
    TransitionOutcome,
    WorkflowCreate,
    WorkflowFilter,
    WorkflowResult,
    WorkflowView,
)

__all__ = [
    "EvidenceFile",
    "HistoryEntryCreate",
    "HistoryEntryResult",
    "TransitionOutcome",
    "WorkflowCreate",
    "WorkflowFilter",
    "WorkflowResult",
    "WorkflowView",
]
