"""Workflow record store (implements IWorkflowRepository)."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.workflow import WorkflowResult
from app.domain.enums import WorkflowNature, WorkflowStatus
from app.domain.exceptions import ResourceNotFoundException, StateConflictException
from app.infrastructure.persistence.models.workflow import Workflow
from app.infrastructure.persistence.repositories.base import (
    BaseRepository,
    wrap_store_errors,
)
from app.shared.utils.datetime import ensure_utc

if TYPE_CHECKING:
    from app.application.dtos.workflow import WorkflowCreate, WorkflowFilter

# Fields a transition may change; identity, ownership and creation fields are immutable.
MUTABLE_FIELDS = frozenset(
    {
        "status",
        "response_notes",
        "evidence_photos",
        "validator_notes",
        "validator_id",
        "validated_at",
        "completed_at",
    }
)


def _to_result(w: Workflow) -> WorkflowResult:
    """Map Workflow ORM to WorkflowResult DTO."""
    return WorkflowResult(
        id=w.id,
        sequence_id=w.sequence_id,
        deviation_id=w.deviation_id,
        title=w.title,
        description=w.description,
        responsible_id=w.responsible_id,
        nature=WorkflowNature(w.nature),
        deadline=ensure_utc(w.deadline),
        status=WorkflowStatus(w.status),
        response_notes=w.response_notes,
        evidence_photos=list(w.evidence_photos or []),
        validator_notes=w.validator_notes,
        validator_id=w.validator_id,
        validated_at=ensure_utc(w.validated_at),
        completed_at=ensure_utc(w.completed_at),
        version=w.version,
        created_at=w.created_at,
        updated_at=w.updated_at,
    )


def _column_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return list(value)
    return value


class WorkflowRepository(BaseRepository[Workflow]):
    """Workflow repository. Implements IWorkflowRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Workflow)

    @wrap_store_errors("get_workflow")
    async def get_workflow(self, workflow_id: str) -> WorkflowResult | None:
        workflow = await self.get_by_id(workflow_id)
        return _to_result(workflow) if workflow else None

    @wrap_store_errors("list_workflows_by_deviation")
    async def list_workflows_by_deviation(self, deviation_id: str) -> list[WorkflowResult]:
        result = await self.db.execute(
            select(Workflow)
            .where(Workflow.deviation_id == deviation_id)
            .order_by(Workflow.sequence_id.asc())
        )
        return [_to_result(w) for w in result.scalars().all()]

    @wrap_store_errors("list_workflows")
    async def list_workflows(
        self,
        filters: WorkflowFilter,
        skip: int = 0,
        limit: int = 100,
    ) -> list[WorkflowResult]:
        q = select(Workflow)
        if filters.status is not None:
            q = q.where(Workflow.status == WorkflowStatus(filters.status).value)
        if filters.responsible_id is not None:
            q = q.where(Workflow.responsible_id == filters.responsible_id)
        if filters.deviation_id is not None:
            q = q.where(Workflow.deviation_id == filters.deviation_id)
        if filters.exclude_responsible_id is not None:
            q = q.where(Workflow.responsible_id != filters.exclude_responsible_id)
        q = q.order_by(Workflow.sequence_id.desc()).offset(skip).limit(limit)
        result = await self.db.execute(q)
        return [_to_result(w) for w in result.scalars().all()]

    @wrap_store_errors("insert_workflow")
    async def insert_workflow(self, data: WorkflowCreate) -> WorkflowResult:
        """Insert workflow; sequence_id comes from the identity column."""
        workflow = Workflow(
            deviation_id=data.deviation_id,
            title=data.title,
            description=data.description,
            responsible_id=data.responsible_id,
            nature=WorkflowNature(data.nature).value,
            deadline=data.deadline,
            status=WorkflowStatus(data.status).value,
            evidence_photos=[],
        )
        return _to_result(await self.create(workflow))

    @wrap_store_errors("update_workflow")
    async def update_workflow(
        self,
        workflow_id: str,
        changes: dict[str, Any],
        *,
        expected_version: int | None = None,
    ) -> WorkflowResult:
        """Conditional UPDATE bumping version; stale expected_version raises StateConflictException."""
        unknown = set(changes) - MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update immutable workflow field(s): {sorted(unknown)}")
        values = {k: _column_value(v) for k, v in changes.items()}
        stmt = (
            update(Workflow)
            .where(Workflow.id == workflow_id)
            .values(**values, version=Workflow.version + 1, updated_at=func.now())
            .returning(Workflow.id)
            .execution_options(synchronize_session=False)
        )
        if expected_version is not None:
            stmt = stmt.where(Workflow.version == expected_version)
        result = await self.db.execute(stmt)
        if result.scalar_one_or_none() is None:
            current = await self.get_by_id(workflow_id)
            if current is None:
                raise ResourceNotFoundException("workflow", workflow_id)
            raise StateConflictException(
                "Workflow was modified by another request; reload and retry",
                workflow_id=workflow_id,
                current_status=current.status,
                expected_version=expected_version,
                current_version=current.version,
            )
        updated = await self.get_by_id(workflow_id)
        assert updated is not None
        return _to_result(updated)
