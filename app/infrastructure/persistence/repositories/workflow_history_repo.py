"""Workflow history log (implements IWorkflowHistoryRepository). Append and read only."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.workflow import HistoryEntryResult
from app.domain.enums import HistoryAction
from app.infrastructure.persistence.models.workflow_history import WorkflowHistory
from app.infrastructure.persistence.repositories.base import (
    BaseRepository,
    wrap_store_errors,
)

if TYPE_CHECKING:
    from app.application.dtos.workflow import HistoryEntryCreate


def _to_result(h: WorkflowHistory) -> HistoryEntryResult:
    """Map WorkflowHistory ORM to HistoryEntryResult DTO."""
    return HistoryEntryResult(
        id=h.id,
        workflow_id=h.workflow_id,
        action=HistoryAction(h.action),
        notes=h.notes,
        photos=list(h.photos or []),
        performed_by=h.performed_by,
        created_at=h.created_at,
    )


class WorkflowHistoryRepository(BaseRepository[WorkflowHistory]):
    """History repository. Implements IWorkflowHistoryRepository; exposes no update or delete."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkflowHistory)

    @wrap_store_errors("append_history")
    async def append_history(self, entry: HistoryEntryCreate) -> HistoryEntryResult:
        """Insert one entry inside a SAVEPOINT.

        A failed insert rolls back only its own savepoint, leaving the request
        transaction usable so the caller can retry the append.
        """
        row = WorkflowHistory(
            workflow_id=entry.workflow_id,
            action=HistoryAction(entry.action).value,
            notes=entry.notes,
            photos=list(entry.photos),
            performed_by=entry.performed_by,
        )
        async with self.db.begin_nested():
            created = await self.create(row)
        return _to_result(created)

    @wrap_store_errors("list_history")
    async def list_history(self, workflow_id: str) -> list[HistoryEntryResult]:
        result = await self.db.execute(
            select(WorkflowHistory)
            .where(WorkflowHistory.workflow_id == workflow_id)
            .order_by(WorkflowHistory.created_at.asc())
        )
        return [_to_result(h) for h in result.scalars().all()]
