"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
    VersionedMixin,
)
from app.infrastructure.persistence.models.workflow import Workflow
from app.infrastructure.persistence.models.workflow_history import WorkflowHistory

__all__ = [
    "Workflow",
    "WorkflowHistory",
    "CuidMixin",
    "TimestampMixin",
    "VersionedMixin",
]
