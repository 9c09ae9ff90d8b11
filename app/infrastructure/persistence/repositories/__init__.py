"""SQLAlchemy repositories for the workflow record store and history log."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.workflow_history_repo import (
    WorkflowHistoryRepository,
)
from app.infrastructure.persistence.repositories.workflow_repo import WorkflowRepository

__all__ = [
    "BaseRepository",
    "WorkflowHistoryRepository",
    "WorkflowRepository",
]
