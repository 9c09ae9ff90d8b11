"""Application ports: repository and service protocols."""

from app.application.interfaces.repositories import (
    IWorkflowHistoryRepository,
    IWorkflowRepository,
)
from app.application.interfaces.services import IClock, IEvidenceStorage

__all__ = [
    "IClock",
    "IEvidenceStorage",
    "IWorkflowHistoryRepository",
    "IWorkflowRepository",
]
